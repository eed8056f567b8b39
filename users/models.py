"""User model for the shop.

Extends Django's `AbstractUser` so that email is unique and can be used as
the default contact address for orders.
"""

from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models


class User(AbstractUser):
    """Custom user with a unique, normalized email and optional phone."""

    email = models.EmailField(unique=True)
    phone = models.CharField(
        max_length=16,
        blank=True,
        validators=[RegexValidator(r"^\+?[1-9]\d{1,14}$", message="Use E.164 format (e.g., +14155552671)")],
        help_text="Primary contact number for the account in E.164 format",
    )

    def save(self, *args, **kwargs):
        """Normalize email and phone before persisting."""
        if self.email:
            self.email = self.email.strip().lower()
        if self.phone:
            self.phone = self.phone.strip()
        super().save(*args, **kwargs)

    @property
    def display_name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        return full or self.username
