from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("consignments", "0002_consignment_billed_in"),
    ]

    operations = [
        migrations.AddField(
            model_name="consignment",
            name="assigned_at",
            field=models.DateTimeField(blank=True, null=True),
        ),
    ]
