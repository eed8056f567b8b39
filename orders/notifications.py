"""Post-commit dispatch of order confirmations."""

import logging

from django.conf import settings

from . import emails
from .models import Order

logger = logging.getLogger("avthrift.orders")


def dispatch_order_confirmation(order_id: int) -> bool:
    """Send the confirmation for an order with a bounded number of attempts.

    Never raises; the order is already committed when this runs.
    """

    attempts = max(1, int(getattr(settings, "ORDER_NOTIFICATION_MAX_ATTEMPTS", 3)))
    try:
        order = Order.objects.select_related("address").prefetch_related("items").get(id=order_id)
        summary = emails.build_order_summary(order)
    except Exception:
        logger.exception(
            "order.confirmation_skipped",
            extra={"event": "order.confirmation_skipped", "order_id": order_id},
        )
        return False

    for attempt in range(1, attempts + 1):
        try:
            if emails.send_order_confirmation(order.customer_email, order.id, summary):
                logger.info(
                    "order.confirmation_sent",
                    extra={"event": "order.confirmation_sent", "order_id": order.id, "attempt": attempt},
                )
                return True
        except Exception:
            logger.exception(
                "order.confirmation_error",
                extra={"event": "order.confirmation_error", "order_id": order.id, "attempt": attempt},
            )
    logger.warning(
        "order.confirmation_gave_up",
        extra={"event": "order.confirmation_gave_up", "order_id": order.id, "attempts": attempts},
    )
    return False
