import django.core.validators
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Vehicle",
            fields=[
                ("id",             models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("vehicle_number", models.CharField(max_length=12, unique=True, validators=[
                    django.core.validators.RegexValidator(
                        "^[A-Z]{2}[0-9]{1,2}[A-Z]{1,2}[0-9]{4}$", "Vehicle number must look like KA01AB1234.",
                    ),
                ])),
                ("vehicle_type", models.CharField(
                    choices=[
                        ("TRUCK",     "Truck"),
                        ("VAN",       "Van"),
                        ("TEMPO",     "Tempo"),
                        ("PICKUP",    "Pickup"),
                        ("TRAILER",   "Trailer"),
                        ("CONTAINER", "Container"),
                    ],
                    max_length=10,
                )),
                ("length_feet", models.PositiveSmallIntegerField(
                    choices=[(14, "14 ft"), (19, "19 ft"), (20, "20 ft"), (22, "22 ft"),
                             (24, "24 ft"), (32, "32 ft"), (40, "40 ft")],
                )),
                ("flooring_type",  models.CharField(choices=[("YES", "Yes"), ("NO", "No")], default="YES", max_length=3)),
                ("capacity_value", models.DecimalField(
                    decimal_places=2, max_digits=8,
                    validators=[django.core.validators.MinValueValidator(0)],
                )),
                ("capacity_unit",       models.CharField(choices=[("TON", "Ton"), ("KG", "Kg")], default="TON", max_length=3)),
                ("engine_number",       models.CharField(blank=True, max_length=30)),
                ("chassis_number",      models.CharField(blank=True, max_length=30)),
                ("insurance_policy_no", models.CharField(blank=True, max_length=40)),
                ("insurance_validity",  models.DateField(blank=True, null=True)),
                ("status", models.CharField(
                    choices=[("AVAILABLE", "Available"), ("ON_TRIP", "On Trip"), ("MAINTENANCE", "Maintenance")],
                    default="AVAILABLE",
                    max_length=12,
                )),
                ("is_active",  models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["vehicle_number"]},
        ),
        migrations.CreateModel(
            name="Driver",
            fields=[
                ("id",     models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name",   models.CharField(max_length=120)),
                ("mobile", models.CharField(max_length=10, unique=True, validators=[
                    django.core.validators.RegexValidator("^[6-9]\\d{9}$", "Enter a valid 10-digit mobile number."),
                ])),
                ("email",          models.EmailField(blank=True, max_length=254, null=True, unique=True)),
                ("license_number", models.CharField(blank=True, max_length=15, null=True, unique=True, validators=[
                    django.core.validators.RegexValidator(
                        "^[A-Z]{2}[0-9]{13}$", "License number must look like KA0120230001234.",
                    ),
                ])),
                ("current_vehicle_id", models.UUIDField(blank=True, null=True)),
                ("status", models.CharField(
                    choices=[("AVAILABLE", "Available"), ("ON_TRIP", "On Trip")],
                    default="AVAILABLE",
                    max_length=10,
                )),
                ("is_active",  models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.AddIndex(
            model_name="vehicle",
            index=models.Index(fields=["status", "is_active"], name="vehicle_status_active_idx"),
        ),
        migrations.AddIndex(
            model_name="driver",
            index=models.Index(fields=["status", "is_active"], name="driver_status_active_idx"),
        ),
    ]
