"""Sequential order numbers.

Numbers start at ``ORDER_NUMBER_SEED`` and grow by one per order. Allocation
reads the current maximum inside the caller's transaction; the unique
constraint on ``Order.number`` rejects a concurrent duplicate, which rolls
the whole checkout back.
"""

from django.conf import settings
from django.db import connection

from .models import Order

DEFAULT_ORDER_NUMBER_SEED = 100000000


def allocate_order_number() -> int:
    seed = int(getattr(settings, "ORDER_NUMBER_SEED", DEFAULT_ORDER_NUMBER_SEED))
    qs = Order.objects.order_by("-number")
    if connection.features.has_select_for_update:
        qs = qs.select_for_update()
    latest = qs.values_list("number", flat=True).first()
    if latest is None:
        return seed
    return int(latest) + 1
