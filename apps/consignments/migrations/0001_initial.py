import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


def money(**kwargs):
    return models.DecimalField(
        decimal_places=2, default=Decimal("0"), max_digits=12,
        validators=[django.core.validators.MinValueValidator(0)], **kwargs,
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("customers", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Consignment",
            fields=[
                ("id",                 models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("consignment_number", models.CharField(max_length=30, unique=True)),
                ("booking_date",       models.DateTimeField(default=django.utils.timezone.now)),
                ("booking_branch",     models.CharField(blank=True, max_length=80)),

                ("consignor_customer", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="consignments_sent", to="customers.customer",
                )),
                ("consignor_name",       models.CharField(max_length=120)),
                ("consignor_address",    models.CharField(max_length=255)),
                ("consignor_mobile",     models.CharField(max_length=15)),
                ("consignor_email",      models.EmailField(blank=True, max_length=254)),
                ("consignor_gst_number", models.CharField(blank=True, max_length=15)),

                ("consignee_customer", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="consignments_received", to="customers.customer",
                )),
                ("consignee_name",       models.CharField(max_length=120)),
                ("consignee_address",    models.CharField(max_length=255)),
                ("consignee_mobile",     models.CharField(max_length=15)),
                ("consignee_email",      models.EmailField(blank=True, max_length=254)),
                ("consignee_gst_number", models.CharField(blank=True, max_length=15)),

                ("from_city", models.CharField(max_length=80)),
                ("to_city",   models.CharField(max_length=80)),

                ("description",    models.CharField(max_length=255)),
                ("packages",       models.PositiveIntegerField(default=1)),
                ("package_type",   models.CharField(blank=True, max_length=40)),
                ("actual_weight",  models.DecimalField(decimal_places=2, max_digits=10,
                                                       validators=[django.core.validators.MinValueValidator(0)])),
                ("charged_weight", models.DecimalField(decimal_places=2, max_digits=10,
                                                       validators=[django.core.validators.MinValueValidator(0)])),
                ("value",          money()),
                ("rate",           models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),

                ("freight",       money()),
                ("hamali",        money()),
                ("st_charges",    money()),
                ("door_delivery", money()),
                ("other_charges", money()),
                ("risk_charges",  money()),
                ("service_tax",   money()),
                ("grand_total",   models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),

                ("gst_payable_by", models.CharField(
                    choices=[("CONSIGNER", "Consigner"), ("CONSIGNEE", "Consignee"), ("TRANSPORTER", "Transporter")],
                    default="CONSIGNER", max_length=12,
                )),
                ("risk", models.CharField(
                    choices=[("OWNER_RISK", "Owner's Risk"), ("CARRIER_RISK", "Carrier's Risk")],
                    default="OWNER_RISK", max_length=12,
                )),
                ("to_pay", models.CharField(
                    choices=[("TO-PAY", "To Pay"), ("TBB", "To Be Billed"), ("PAID", "Paid")],
                    default="TO-PAY", max_length=6,
                )),
                ("insurance",        models.BooleanField(default=False)),
                ("type_of_pickup",   models.CharField(choices=[("GODOWN", "Godown"), ("DOOR", "Door")],
                                                      default="GODOWN", max_length=6)),
                ("type_of_delivery", models.CharField(choices=[("GODOWN", "Godown"), ("DOOR", "Door")],
                                                      default="GODOWN", max_length=6)),
                ("pan",              models.CharField(blank=True, max_length=10)),
                ("invoice_number",   models.CharField(blank=True, max_length=40)),
                ("eway_bill_number", models.CharField(blank=True, max_length=20)),

                ("vehicle_id",                  models.UUIDField(blank=True, db_index=True, null=True)),
                ("vehicle_number",              models.CharField(blank=True, max_length=12)),
                ("vehicle_engine_number",       models.CharField(blank=True, max_length=30)),
                ("vehicle_chassis_number",      models.CharField(blank=True, max_length=30)),
                ("vehicle_insurance_policy_no", models.CharField(blank=True, max_length=40)),
                ("vehicle_insurance_validity",  models.DateField(blank=True, null=True)),

                ("driver_id",     models.UUIDField(blank=True, db_index=True, null=True)),
                ("driver_name",   models.CharField(blank=True, max_length=120)),
                ("driver_mobile", models.CharField(blank=True, max_length=15)),

                ("status", models.CharField(
                    choices=[
                        ("BOOKED", "Booked"), ("ASSIGNED", "Vehicle Assigned"),
                        ("SCHEDULED", "Pickup Scheduled"), ("IN_TRANSIT", "In Transit"),
                        ("DELIVERED_UNCONFIRMED", "Delivered (unconfirmed)"),
                        ("DELIVERED", "Delivered"), ("CANCELLED", "Cancelled"),
                    ],
                    default="BOOKED", max_length=25,
                )),
                ("pickup_date",         models.DateTimeField(blank=True, null=True)),
                ("pickup_time",         models.CharField(blank=True, max_length=10)),
                ("pickup_instructions", models.TextField(blank=True)),
                ("actual_pickup_date",  models.DateTimeField(blank=True, null=True)),
                ("actual_pickup_time",  models.CharField(blank=True, max_length=10)),
                ("transit_notes",       models.TextField(blank=True)),
                ("delivery_date",       models.DateTimeField(blank=True, null=True)),
                ("delivery_time",       models.CharField(blank=True, max_length=10)),
                ("delivered_by",        models.CharField(blank=True, max_length=120)),
                ("proof_of_delivery",   models.TextField(blank=True)),

                ("billed_date",    models.DateTimeField(blank=True, null=True)),
                ("payment_status", models.CharField(
                    choices=[("UNBILLED", "Unbilled"), ("BILLED", "Billed"), ("PAID", "Paid")],
                    default="UNBILLED", max_length=8,
                )),
                ("payment_receipt_status", models.BooleanField(default=False)),
                ("payment_receipt_date",   models.DateTimeField(blank=True, null=True)),

                ("created_by", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="+", to=settings.AUTH_USER_MODEL,
                )),
                ("updated_by", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="+", to=settings.AUTH_USER_MODEL,
                )),
                ("is_deleted", models.BooleanField(default=False)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("deleted_by", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="+", to=settings.AUTH_USER_MODEL,
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["-booking_date"]},
        ),
        migrations.AddIndex(
            model_name="consignment",
            index=models.Index(fields=["status", "is_deleted"], name="consignment_status_idx"),
        ),
        migrations.AddIndex(
            model_name="consignment",
            index=models.Index(fields=["vehicle_id", "status"], name="consignment_vehicle_idx"),
        ),
        migrations.AddIndex(
            model_name="consignment",
            index=models.Index(fields=["driver_id", "status"], name="consignment_driver_idx"),
        ),
        migrations.AddIndex(
            model_name="consignment",
            index=models.Index(fields=["payment_status"], name="consignment_payment_idx"),
        ),
        migrations.AddIndex(
            model_name="consignment",
            index=models.Index(fields=["booking_date"], name="consignment_booked_idx"),
        ),
    ]
