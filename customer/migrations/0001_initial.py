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
            name="Address",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(blank=True, help_text="Label such as 'Home' or 'Office'", max_length=60)),
                ("name", models.CharField(blank=True, help_text="Recipient name", max_length=120)),
                ("addr1", models.CharField(max_length=120)),
                ("addr2", models.CharField(blank=True, max_length=120)),
                ("city", models.CharField(max_length=80)),
                ("state", models.CharField(blank=True, max_length=40, null=True)),
                (
                    "postal_code",
                    models.CharField(
                        blank=True,
                        max_length=12,
                        null=True,
                        validators=[
                            django.core.validators.RegexValidator(
                                "^[A-Za-z0-9\\- ]{0,12}$", message="Use standard alphanumeric postal/zip code"
                            )
                        ],
                    ),
                ),
                (
                    "country_code",
                    models.CharField(
                        default="NG",
                        max_length=2,
                        validators=[
                            django.core.validators.RegexValidator(
                                "^[A-Z]{2}$", message="Use ISO 3166-1 alpha-2 country code (e.g., US)"
                            )
                        ],
                    ),
                ),
                (
                    "phone",
                    models.CharField(
                        blank=True,
                        max_length=16,
                        validators=[
                            django.core.validators.RegexValidator(
                                "^\\+?[1-9]\\d{1,14}$", message="Use E.164 format (e.g., +14155552671)"
                            )
                        ],
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="addresses",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "indexes": [models.Index(fields=["user", "city"], name="address_user_city_idx")],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "addr1", "city", "postal_code", "country_code"),
                        name="unique_address_per_user",
                    )
                ],
            },
        ),
    ]
