import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Property",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("active", "Active"),
                            ("paused", "Paused"),
                            ("draft", "Draft"),
                            ("deleted", "Deleted"),
                        ],
                        default="draft",
                        max_length=20,
                    ),
                ),
                (
                    "base_price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "currency",
                    models.CharField(
                        default="EUR",
                        max_length=3,
                        validators=[
                            django.core.validators.RegexValidator(
                                "^[A-Z]{3}$", "Currency must be a 3-letter ISO code."
                            )
                        ],
                    ),
                ),
                (
                    "dynamic_pricing_enabled",
                    models.BooleanField(default=False, help_text="Kept in sync with the presence of pricing rules."),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="properties",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Property",
                "verbose_name_plural": "Properties",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["owner", "status"], name="property_owner_status_idx")],
            },
        ),
        migrations.CreateModel(
            name="AvailabilitySlot",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("is_available", models.BooleanField(default=True)),
                (
                    "price_per_night",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Overrides the property base price for nights inside the slot.",
                        max_digits=10,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "property",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="availability_slots",
                        to="properties.property",
                    ),
                ),
            ],
            options={
                "verbose_name": "Availability slot",
                "verbose_name_plural": "Availability slots",
                "ordering": ["start_date", "id"],
                "indexes": [
                    models.Index(fields=["property", "start_date", "end_date"], name="slot_property_dates_idx"),
                    models.Index(fields=["is_available"], name="slot_is_available_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(end_date__gt=models.F("start_date")),
                        name="availability_slot_valid_date_range",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="DynamicPricingRule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("start_date", models.DateField(blank=True, null=True)),
                ("end_date", models.DateField(blank=True, null=True)),
                (
                    "day_of_week",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        help_text="0 = Sunday ... 6 = Saturday.",
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(6),
                        ],
                    ),
                ),
                (
                    "price_multiplier",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="1.20 raises the nightly price by 20%, 0.80 lowers it by 20%.",
                        max_digits=5,
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                (
                    "priority",
                    models.IntegerField(default=0, help_text="Rules with a higher priority are evaluated first."),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "property",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="pricing_rules",
                        to="properties.property",
                    ),
                ),
            ],
            options={
                "verbose_name": "Dynamic pricing rule",
                "verbose_name_plural": "Dynamic pricing rules",
                "ordering": ["-priority", "created_at", "id"],
                "indexes": [
                    models.Index(fields=["property", "is_active", "priority"], name="rule_property_active_prio_idx"),
                ],
            },
        ),
    ]
