import django.core.validators
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id",       models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name",     models.CharField(max_length=120)),
                ("address",  models.CharField(max_length=255)),
                ("city",     models.CharField(max_length=80)),
                ("state",    models.CharField(max_length=80)),
                ("pincode",  models.CharField(max_length=6, validators=[
                    django.core.validators.RegexValidator("^[1-9][0-9]{5}$", "Pincode must be 6 digits."),
                ])),
                ("mobile",   models.CharField(max_length=10, unique=True, validators=[
                    django.core.validators.RegexValidator("^[6-9]\\d{9}$", "Enter a valid 10-digit mobile number."),
                ])),
                ("email",      models.EmailField(blank=True, max_length=254, null=True, unique=True)),
                ("gst_number", models.CharField(blank=True, max_length=15, null=True, unique=True, validators=[
                    django.core.validators.RegexValidator(
                        "^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$", "Enter a valid GST number.",
                    ),
                ])),
                ("pan_number", models.CharField(blank=True, max_length=10, validators=[
                    django.core.validators.RegexValidator("^[A-Z]{5}[0-9]{4}[A-Z]{1}$", "Enter a valid PAN number."),
                ])),
                ("customer_type", models.CharField(
                    choices=[("CONSIGNOR", "Consignor"), ("CONSIGNEE", "Consignee"), ("BOTH", "Both")],
                    default="BOTH",
                    max_length=10,
                )),
                ("is_active",  models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.AddIndex(
            model_name="customer",
            index=models.Index(fields=["name"], name="customer_name_idx"),
        ),
        migrations.AddIndex(
            model_name="customer",
            index=models.Index(fields=["customer_type", "is_active"], name="customer_type_active_idx"),
        ),
    ]
