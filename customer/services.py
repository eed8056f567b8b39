"""Customer domain services.

Keep business rules here and keep views thin.
"""

from typing import Optional

from django.core.exceptions import ValidationError

from .models import Address


def ensure_address_owner(user, address: Optional[Address]) -> None:
    """Validate that the given address belongs to the given user.

    Raises ValidationError if it does not.
    """

    if address is None:
        raise ValidationError("Shipping address is required.")
    if address.user_id != getattr(user, "id", None):
        raise ValidationError("Shipping address must belong to the ordering user.")
