import django.db.models.deletion
import django.utils.timezone
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


def amount(max_digits=12):
    return models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=max_digits)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("customers", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="FreightBill",
            fields=[
                ("id",             models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("bill_number",    models.CharField(max_length=20, unique=True)),
                ("bill_date",      models.DateTimeField(default=django.utils.timezone.now)),
                ("billing_branch", models.CharField(max_length=50)),
                ("party_customer", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="freight_bills", to="customers.customer",
                )),
                ("party_name",       models.CharField(max_length=120)),
                ("party_address",    models.CharField(max_length=500)),
                ("party_gst_number", models.CharField(blank=True, max_length=15)),
                ("total_amount",     amount(14)),
                ("final_amount",     amount(14)),
                ("status", models.CharField(
                    choices=[
                        ("DRAFT", "Draft"), ("GENERATED", "Generated"), ("SENT", "Sent"),
                        ("PARTIALLY_PAID", "Partially Paid"), ("PAID", "Paid"), ("CANCELLED", "Cancelled"),
                    ],
                    default="GENERATED", max_length=15,
                )),
                ("created_by", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="+", to=settings.AUTH_USER_MODEL,
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["-bill_date"]},
        ),
        migrations.AddIndex(
            model_name="freightbill",
            index=models.Index(fields=["status"], name="freightbill_status_idx"),
        ),
        migrations.AddIndex(
            model_name="freightbill",
            index=models.Index(fields=["bill_date"], name="freightbill_date_idx"),
        ),
        migrations.AddIndex(
            model_name="freightbill",
            index=models.Index(fields=["party_customer"], name="freightbill_party_idx"),
        ),
        migrations.CreateModel(
            name="FreightBillLine",
            fields=[
                ("id",                 models.BigAutoField(primary_key=True, serialize=False)),
                ("bill",               models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="lines", to="billing.freightbill",
                )),
                ("consignment_id",     models.UUIDField(unique=True)),
                ("consignment_number", models.CharField(max_length=30)),
                ("consignment_date",   models.DateTimeField()),
                ("destination",        models.CharField(max_length=100)),
                ("charged_weight",     models.DecimalField(decimal_places=2, max_digits=10)),
                ("rate",               models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=10)),
                ("freight",            amount()),
                ("hamali",             amount()),
                ("st_charges",         amount()),
                ("door_delivery",      amount()),
                ("other_charges",      amount()),
                ("grand_total",        amount()),
            ],
            options={"ordering": ["consignment_date", "id"]},
        ),
        migrations.CreateModel(
            name="FreightBillAdjustment",
            fields=[
                ("id",   models.BigAutoField(primary_key=True, serialize=False)),
                ("bill", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="adjustments", to="billing.freightbill",
                )),
                ("adjustment_type", models.CharField(
                    choices=[
                        ("DISCOUNT", "Discount"), ("EXTRA_CHARGE", "Extra Charge"),
                        ("FUEL_SURCHARGE", "Fuel Surcharge"), ("OTHER", "Other"),
                    ],
                    max_length=15,
                )),
                ("description", models.CharField(max_length=200)),
                ("amount",      models.DecimalField(decimal_places=2, max_digits=12)),
            ],
            options={"ordering": ["id"]},
        ),
    ]
