import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Property",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(max_length=1000)),
                ("price_per_night", models.DecimalField(decimal_places=2, max_digits=10)),
                ("available_from", models.DateField()),
                ("available_to", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive"), ("archived", "Archived")],
                        default="active",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Property",
                "verbose_name_plural": "Properties",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["status"], name="property_status_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("available_to__gt", models.F("available_from"))),
                        name="property_valid_window",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("price_per_night__gt", 0)),
                        name="property_positive_price",
                    ),
                ],
            },
        ),
    ]
