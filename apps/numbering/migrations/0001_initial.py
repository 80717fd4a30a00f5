from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="YearlySequence",
            fields=[
                ("id",         models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("series",     models.CharField(
                    choices=[("CONSIGNMENT", "Consignment"), ("FREIGHT_BILL", "Freight Bill")],
                    max_length=20,
                )),
                ("year",       models.PositiveSmallIntegerField()),
                ("last_value", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.AddConstraint(
            model_name="yearlysequence",
            constraint=models.UniqueConstraint(fields=("series", "year"), name="uniq_sequence_series_year"),
        ),
    ]
