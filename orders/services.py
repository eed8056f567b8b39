"""Order services: checkout, status wrappers and request idempotency."""

import hashlib
import json
import logging
from datetime import timedelta
from decimal import Decimal
from functools import partial
from typing import Callable, Optional, Tuple

from cart.models import CartItem
from catalog.models import Product
from customer.selectors import get_address
from customer.services import ensure_address_owner
from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone
from inventory.services import MovementError, available_quantity, consume_stock

from .models import IdempotencyKey, Order, OrderItem
from .notifications import dispatch_order_confirmation
from .numbering import allocate_order_number
from .selectors import get_order

logger = logging.getLogger("avthrift.orders")


class CheckoutError(Exception):
    code = "checkout_error"

    def as_dict(self) -> dict:
        return {"detail": str(self), "code": self.code}


class EmptyCart(CheckoutError):
    code = "empty_cart"

    def __init__(self):
        super().__init__("Cart is empty")


class InsufficientStock(CheckoutError):
    code = "insufficient_stock"

    def __init__(self, *, product_id: int, product_name: str, requested: int, available: int):
        self.product_id = product_id
        self.product_name = product_name
        self.requested = int(requested)
        self.available = int(available)
        super().__init__(f"Insufficient stock for product: {product_name}")

    def as_dict(self) -> dict:
        data = super().as_dict()
        data.update(
            {
                "product_id": self.product_id,
                "product_name": self.product_name,
                "requested": self.requested,
                "available": self.available,
            }
        )
        return data


class AddressNotFound(CheckoutError):
    code = "address_not_found"

    def __init__(self):
        super().__init__("Shipping address not found.")


def create_order(*, user, customer_email: str, customer_name: str, address_id: int) -> Order:
    """Turn the user's cart into a pending order.

    Validation, order and item creation, stock consumption and cart clearing
    happen in one transaction; any failure leaves cart and stock unchanged.
    The confirmation is dispatched only once the order has committed.
    """

    with transaction.atomic():
        lines = list(CartItem.objects.select_for_update().filter(cart__user=user).order_by("product_id", "id"))
        if not lines:
            raise EmptyCart()
        address = get_address(address_id)
        try:
            ensure_address_owner(user, address)
        except DjangoValidationError:
            raise AddressNotFound()
        products = {
            p.id: p
            for p in Product.objects.select_for_update().filter(id__in=[line.product_id for line in lines]).order_by("id")
        }
        for line in lines:
            product = products[line.product_id]
            if int(line.quantity) > int(product.stock):
                raise InsufficientStock(
                    product_id=product.id,
                    product_name=product.name,
                    requested=line.quantity,
                    available=product.stock,
                )

        number = allocate_order_number()
        total = sum((line.unit_price * int(line.quantity) for line in lines), Decimal("0.00"))
        order = Order.objects.create(
            user=user,
            number=number,
            status=Order.STATUS_PENDING,
            total_amount=total,
            customer_email=customer_email,
            customer_name=customer_name,
            address=address,
        )
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product_id=line.product_id,
                    product_name=products[line.product_id].name,
                    quantity=line.quantity,
                    price=line.unit_price,
                )
                for line in lines
            ]
        )
        for line in lines:
            try:
                consume_stock(
                    product_id=line.product_id,
                    quantity=int(line.quantity),
                    reason="order",
                    reference=f"order:{number}",
                )
            except MovementError:
                raise InsufficientStock(
                    product_id=line.product_id,
                    product_name=products[line.product_id].name,
                    requested=line.quantity,
                    available=available_quantity(product_id=line.product_id),
                )
        CartItem.objects.filter(id__in=[line.id for line in lines]).delete()
        transaction.on_commit(partial(dispatch_order_confirmation, order.id))

    logger.info(
        "order.created",
        extra={
            "event": "order.created",
            "order_id": order.id,
            "order_number": number,
            "user_id": getattr(user, "id", None),
            "items": len(lines),
            "total_amount": str(total),
        },
    )
    return get_order(order.id)


def with_idempotency(
    *,
    key: str,
    user,
    path: str,
    method: str,
    handler: Callable[[], Tuple[dict, int]],
    request_hash: Optional[str] = None,
) -> Tuple[dict, int]:
    """Run handler idempotently and persist its response for the given key and scope.

    - Scope is derived from the caller: for authenticated users, "user:<id>"; otherwise "anon".
    - If a record exists and the stored `request_hash` differs from the provided one, returns 409.
    - If a record exists but response is not yet stored, returns 409 to indicate in-progress.
    - Server errors are not stored, so the same key can be retried.
    """

    scope = f"user:{getattr(user, 'id', None)}" if getattr(user, "id", None) else "anon"
    method = str(method).upper()
    path = str(path)
    ttl = int(getattr(settings, "IDEMPOTENCY_TTL_HOURS", 24))

    try:
        with transaction.atomic():
            idem = IdempotencyKey.objects.create(
                key=key,
                user=user if getattr(user, "id", None) else None,
                scope=scope,
                path=path,
                method=method,
                request_hash=request_hash,
                expires_at=timezone.now() + timedelta(hours=ttl),
            )
    except IntegrityError:
        idem = IdempotencyKey.objects.get(key=key, scope=scope, path=path, method=method)
        if idem.request_hash and request_hash and idem.request_hash != request_hash:
            return {"detail": "Idempotency key reused with different request payload"}, 409
        if idem.response_json is not None and idem.response_code is not None:
            return idem.response_json, int(idem.response_code)
        return {"detail": "Request in progress"}, 409

    try:
        body, code = handler()
    except Exception:
        IdempotencyKey.objects.filter(id=idem.id).delete()
        raise
    if code >= 500:
        IdempotencyKey.objects.filter(id=idem.id).delete()
        return body, code

    def _json_safe(value):
        if isinstance(value, Decimal):
            return str(value)
        if isinstance(value, dict):
            return {k: _json_safe(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [_json_safe(v) for v in value]
        return value

    IdempotencyKey.objects.filter(id=idem.id).update(response_json=_json_safe(body), response_code=code)
    return body, code


def compute_request_hash(data: Optional[dict]) -> Optional[str]:
    """Compute a canonical SHA256 hash of the request body.

    Uses sorted keys JSON representation to stabilize the hash across equivalent payloads.
    Returns None when data is falsy or not serializable.
    """
    if not data:
        return None
    try:
        payload = json.dumps(data, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError):
        return None
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
