"""Order confirmation emails.

Uses Django's email backend, with links composed from FRONTEND_URL. Sending
is best effort: failures are logged and reported through the return value.
"""

import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger("avthrift.orders")


def _order_url(order_id) -> str:
    frontend = getattr(settings, "FRONTEND_URL", "")
    if not frontend:
        return ""
    return f"{frontend.rstrip('/')}/orders/{order_id}"


def build_order_summary(order) -> dict:
    """Summary passed to the confirmation sink; items and address should be prefetched."""

    address = order.address
    return {
        "order_id": order.id,
        "number": order.number,
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "items": [
            {
                "product_name": item.product_name,
                "quantity": int(item.quantity),
                "price": str(item.price),
                "subtotal": str(item.line_total),
            }
            for item in order.items.all()
        ],
        "total_amount": str(order.total_amount),
        "shipping_address": {
            "name": address.name,
            "addr1": address.addr1,
            "addr2": address.addr2,
            "city": address.city,
            "state": address.state or "",
            "postal_code": address.postal_code or "",
            "country_code": address.country_code,
        },
    }


def send_order_confirmation(email: str, order_id, summary: dict) -> bool:
    """Send a plain-text order confirmation; returns False if sending failed."""

    if not email:
        return False
    lines = [
        f"Hi {summary.get('customer_name', '')},",
        "",
        "Thank you for your order!",
        "",
        f"Order: {summary.get('number', order_id)}",
    ]
    for item in summary.get("items", []):
        lines.append(f"  {item['quantity']} x {item['product_name']} @ {item['price']} = {item['subtotal']}")
    lines.append(f"Total: {summary.get('total_amount')}")
    ship = summary.get("shipping_address") or {}
    if ship:
        parts = [ship.get("addr1"), ship.get("addr2"), ship.get("city"), ship.get("state"), ship.get("country_code")]
        lines += ["", "Shipping to: " + ", ".join(p for p in parts if p)]
    url = _order_url(order_id)
    if url:
        lines += ["", f"You can view your order here: {url}"]

    try:
        sent = send_mail(
            f"Your order {summary.get('number', order_id)} has been received",
            "\n".join(lines) + "\n",
            getattr(settings, "DEFAULT_FROM_EMAIL", None),
            [email],
            fail_silently=False,
        )
    except Exception:
        logger.exception(
            "order.confirmation_failed",
            extra={"event": "order.confirmation_failed", "order_id": order_id},
        )
        return False
    return bool(sent)
