"""Who may see an order.

The same rule gates the order detail view and the order's message thread:
the buyer who placed the order, or a farmer who sells at least one of the
products in it.
"""
import logging
from typing import Iterable

from ...core.exceptions import Forbidden, NotFound
from ..auth.models import Role, User as AuthUser
from .models import Order, OrderItem

logger = logging.getLogger(__name__)


def can_access_order(order: Order, order_items: Iterable[OrderItem], requester: AuthUser) -> bool:
    """Returns True when the requester owns the order or supplies any of its items.

    Each item must have its product loaded.
    """
    is_buyer_owner = order.buyer_id == requester.id
    is_involved_farmer = requester.role == Role.FARMER and any(
        item.product.farmer_id == requester.id for item in order_items
    )
    return is_buyer_owner or is_involved_farmer


async def load_accessible_order(order_public_id: str, requester: AuthUser) -> Order:
    """Fetches an order with its items and products, enforcing can_access_order.

    Raises:
        NotFound: No order has this id. Checked before access.
        Forbidden: The order exists but the requester may not see it.
    """
    order = await Order.get_or_none(public_id=order_public_id).prefetch_related("items__product")
    if not order:
        raise NotFound(f"Order {order_public_id} not found.")

    if not can_access_order(order, order.items, requester):
        logger.warning(f"User {requester.public_id} denied access to order {order_public_id}")
        raise Forbidden("Not authorized to access this order.")

    return order
