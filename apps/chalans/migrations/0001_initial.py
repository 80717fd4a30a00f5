import django.db.models.deletion
import django.utils.timezone
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


def money():
    return models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="LoadChalan",
            fields=[
                ("id",              models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("chalan_number",   models.CharField(max_length=30, unique=True)),
                ("date",            models.DateTimeField(default=django.utils.timezone.now)),
                ("booking_branch",  models.CharField(max_length=80)),
                ("destination_hub", models.CharField(max_length=80)),
                ("dispatch_time",   models.CharField(blank=True, max_length=20)),
                ("status", models.CharField(
                    choices=[
                        ("CREATED", "Created"), ("DISPATCHED", "Dispatched"), ("IN_TRANSIT", "In Transit"),
                        ("ARRIVED", "Arrived"), ("CLOSED", "Closed"),
                    ],
                    default="CREATED", max_length=12,
                )),
                ("vehicle_id",                  models.UUIDField(blank=True, db_index=True, null=True)),
                ("vehicle_number",              models.CharField(blank=True, max_length=12)),
                ("vehicle_engine_number",       models.CharField(blank=True, max_length=30)),
                ("vehicle_chassis_number",      models.CharField(blank=True, max_length=30)),
                ("vehicle_insurance_policy_no", models.CharField(blank=True, max_length=40)),
                ("vehicle_insurance_validity",  models.DateField(blank=True, null=True)),
                ("owner_name",    models.CharField(blank=True, max_length=120)),
                ("owner_address", models.CharField(blank=True, max_length=255)),
                ("driver_id",             models.UUIDField(blank=True, db_index=True, null=True)),
                ("driver_name",           models.CharField(blank=True, max_length=120)),
                ("driver_mobile",         models.CharField(blank=True, max_length=15)),
                ("driver_license_number", models.CharField(blank=True, max_length=20)),
                ("cleaner_name",          models.CharField(blank=True, max_length=120)),
                ("total_lr_count", models.PositiveIntegerField(default=0)),
                ("total_packages", models.PositiveIntegerField(default=0)),
                ("total_weight",   models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("total_freight",  money()),
                ("lorry_freight",     money()),
                ("loading_charges",   money()),
                ("unloading_charges", money()),
                ("other_charges",     money()),
                ("advance_paid",      money()),
                ("tds_deduction",     money()),
                ("balance_freight",   money()),
                ("frt_payable_at",    models.CharField(blank=True, max_length=80)),
                ("remarks",    models.TextField(blank=True)),
                ("risk_note",  models.CharField(blank=True, max_length=40)),
                ("posting_by", models.CharField(blank=True, max_length=120)),
                ("created_by", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="+", to=settings.AUTH_USER_MODEL,
                )),
                ("updated_by", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="+", to=settings.AUTH_USER_MODEL,
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["-date"]},
        ),
        migrations.AddIndex(
            model_name="loadchalan",
            index=models.Index(fields=["status"], name="chalan_status_idx"),
        ),
        migrations.AddIndex(
            model_name="loadchalan",
            index=models.Index(fields=["date"], name="chalan_date_idx"),
        ),
        migrations.AddIndex(
            model_name="loadchalan",
            index=models.Index(fields=["destination_hub"], name="chalan_hub_idx"),
        ),
        migrations.CreateModel(
            name="LoadChalanLine",
            fields=[
                ("id",     models.BigAutoField(primary_key=True, serialize=False)),
                ("chalan", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="lines", to="chalans.loadchalan",
                )),
                ("consignment_id",     models.UUIDField(db_index=True)),
                ("consignment_number", models.CharField(max_length=30)),
                ("packages",           models.PositiveIntegerField(default=0)),
                ("package_type",       models.CharField(blank=True, max_length=40)),
                ("description",        models.CharField(blank=True, max_length=255)),
                ("weight",             models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=10)),
                ("freight_amount",     money()),
                ("destination",        models.CharField(blank=True, max_length=80)),
            ],
            options={"ordering": ["id"]},
        ),
    ]
