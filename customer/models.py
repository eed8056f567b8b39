"""Customer domain models.

Postal addresses owned by a user. Orders reference an address as their
shipping destination, so an address in use by an order cannot be deleted.
"""

from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Address(TimeStampedModel):
    """Normalized postal address tied to a user.

    - Store `country_code` as ISO 3166-1 alpha-2 uppercase.
    - A uniqueness constraint reduces duplicate addresses per user.
    """

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="addresses")
    title = models.CharField(max_length=60, blank=True, help_text="Label such as 'Home' or 'Office'")
    name = models.CharField(max_length=120, blank=True, help_text="Recipient name")
    addr1 = models.CharField(max_length=120)
    addr2 = models.CharField(max_length=120, blank=True)
    city = models.CharField(max_length=80)
    state = models.CharField(max_length=40, blank=True, null=True)
    postal_code = models.CharField(
        max_length=12,
        blank=True,
        null=True,
        validators=[RegexValidator(r"^[A-Za-z0-9\- ]{0,12}$", message="Use standard alphanumeric postal/zip code")],
    )
    country_code = models.CharField(
        max_length=2,
        default="NG",
        validators=[RegexValidator(r"^[A-Z]{2}$", message="Use ISO 3166-1 alpha-2 country code (e.g., US)")],
    )
    phone = models.CharField(
        max_length=16,
        blank=True,
        validators=[RegexValidator(r"^\+?[1-9]\d{1,14}$", message="Use E.164 format (e.g., +14155552671)")],
    )

    class Meta:
        indexes = [
            models.Index(fields=["user", "city"], name="address_user_city_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "addr1", "city", "postal_code", "country_code"],
                name="unique_address_per_user",
            )
        ]

    def __str__(self) -> str:  # pragma: no cover
        parts = [self.addr1, self.addr2, self.city, self.state or "", self.postal_code or "", self.country_code]
        return f"{self.name or ''} - " + ", ".join([p for p in parts if p])

    def contact_phone(self) -> str | None:
        """Return the address phone, falling back to the owner's phone."""

        for candidate in (self.phone, getattr(self.user, "phone", "")):
            if candidate and candidate.strip():
                return candidate.strip()
        return None
