"""Order placement and the buyer and farmer views of orders.

A cart may mix products from several farmers. It becomes one order per
farmer, all created in a single transaction together with the stock
decrements, so either every order exists or none does.
"""
import datetime
import logging
from decimal import Decimal
from typing import Dict, List, Tuple

from tortoise.expressions import F
from tortoise.transactions import in_transaction

from ...core.exceptions import (
    Forbidden, InsufficientStock, InvalidTransition, NotFound, ProductNotFound,
    RoleNotPermitted, ValidationError,
)
from ..auth.models import Role, User as AuthUser
from ..products.models import Product
from .access import load_accessible_order
from .models import Order, OrderItem, OrderStatus
from .schemas import (
    CartItemSchema, OrderCreateSchema, OrderItemDetailSchema, OrderPublicSchema,
    ReceivedOrderSchema,
)

logger = logging.getLogger(__name__)

# Statuses a farmer may set through the generic status endpoint.
FARMER_SETTABLE_STATUSES = (
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
)


def _merge_cart_lines(items: List[CartItemSchema]) -> Dict[str, int]:
    """Sums quantities of lines naming the same product, keeping first-seen order."""
    quantities: Dict[str, int] = {}
    for line in items:
        quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity
    return quantities


def _group_by_farmer(
    quantities: Dict[str, int], products_by_id: Dict[str, Product]
) -> Dict[int, List[Tuple[Product, int]]]:
    groups: Dict[int, List[Tuple[Product, int]]] = {}
    for product_id, quantity in quantities.items():
        product = products_by_id[product_id]
        groups.setdefault(product.farmer_id, []).append((product, quantity))
    return groups


async def create_orders(order_data: OrderCreateSchema, current_user: AuthUser) -> List[Order]:
    """
    Turns a cart into one pending order per farmer.

    Prices come from the catalog at this moment, never from the client.
    The whole cart is validated before any stock is touched, and the
    decrements and inserts share one transaction.

    Returns:
        The created orders, with items and products loaded, in the order
        their farmers first appear in the cart.

    Raises:
        RoleNotPermitted: The requester is a farmer.
        ProductNotFound: A cart line names a missing or deactivated product.
        InsufficientStock: A product has less stock than the cart asks for.
    """
    if current_user.role == Role.FARMER:
        raise RoleNotPermitted("Farmers cannot place orders.")

    quantities = _merge_cart_lines(order_data.items)
    created_ids: List[int] = []

    async with in_transaction() as conn:
        products = (
            await Product.filter(public_id__in=list(quantities), is_active=True)
            .select_for_update()
            .using_db(conn)
        )
        products_by_id = {p.public_id: p for p in products}

        for product_id in quantities:
            if product_id not in products_by_id:
                raise ProductNotFound(product_id)

        for product_id, quantity in quantities.items():
            product = products_by_id[product_id]
            if product.stock < quantity:
                raise InsufficientStock(product_id, quantity, product.stock, product.name)

        groups = _group_by_farmer(quantities, products_by_id)
        logger.debug(
            f"Cart from buyer {current_user.public_id} splits into {len(groups)} farmer group(s)"
        )

        for farmer_id, lines in groups.items():
            group_total = sum((product.price * quantity for product, quantity in lines), Decimal("0"))

            for product, quantity in lines:
                # Guarded decrement: a concurrent cart that drained the stock
                # since the check above makes this match zero rows.
                updated = await (
                    Product.filter(id=product.id, stock__gte=quantity)
                    .using_db(conn)
                    .update(stock=F("stock") - quantity)
                )
                if not updated:
                    current = await Product.get(id=product.id, using_db=conn)
                    raise InsufficientStock(product.public_id, quantity, current.stock, product.name)

            order = await Order.create(
                buyer=current_user,
                status=OrderStatus.PENDING,
                total=group_total,
                shipping_address=order_data.shipping_address,
                phone=order_data.phone,
                customer_note=order_data.note,
                using_db=conn,
            )
            for product, quantity in lines:
                await OrderItem.create(
                    order=order, product=product, quantity=quantity,
                    price=product.price, using_db=conn,
                )
            created_ids.append(order.id)
            logger.debug(f"Order {order.public_id} for farmer {farmer_id}: total {group_total}")
        # Transaction commits when the block exits; any exception above rolls back every group.

    orders = await Order.filter(id__in=created_ids).prefetch_related("items__product")
    orders.sort(key=lambda o: created_ids.index(o.id))
    logger.info(
        f"Buyer {current_user.public_id} placed {len(orders)} order(s): "
        f"{', '.join(o.public_id for o in orders)}"
    )
    return orders


async def list_buyer_orders(current_user: AuthUser) -> List[Order]:
    return (
        await Order.filter(buyer_id=current_user.id)
        .prefetch_related("items__product")
        .order_by("-created_at", "-id")
    )


async def get_order(order_public_id: str, current_user: AuthUser) -> Order:
    return await load_accessible_order(order_public_id, current_user)


async def list_received_orders(current_user: AuthUser) -> List[ReceivedOrderSchema]:
    """
    Orders containing at least one of the farmer's products, newest first.

    Only the farmer's own lines are shown and the total is summed over those
    lines rather than read from the stored order total.
    """
    order_ids = await (
        OrderItem.filter(product__farmer_id=current_user.id)
        .distinct()
        .values_list("order_id", flat=True)
    )
    orders = (
        await Order.filter(id__in=list(order_ids))
        .prefetch_related("buyer", "items__product")
        .order_by("-created_at", "-id")
    )
    return [_to_received_order_schema(order, current_user) for order in orders]


async def _set_status(order_public_id: str, new_status: OrderStatus, actor: AuthUser) -> Order:
    async with in_transaction() as conn:
        # Lock the order row for update
        order = await Order.get_or_none(public_id=order_public_id, using_db=conn).select_for_update()
        if not order:
            raise NotFound(f"Order {order_public_id} not found.")

        previous_status = order.status
        order.status = new_status
        update_fields = ["status"]
        if new_status == OrderStatus.DELIVERED:
            order.delivered_at = datetime.datetime.now(datetime.timezone.utc)
            update_fields.append("delivered_at")
        await order.save(using_db=conn, update_fields=update_fields)

    logger.info(
        f"Order {order_public_id}: {OrderStatus(previous_status).value} -> {new_status.value} "
        f"by {actor.public_id}"
    )
    return order


async def accept_order(order_public_id: str, current_user: AuthUser) -> Order:
    return await _set_status(order_public_id, OrderStatus.ACCEPTED, current_user)


async def reject_order(order_public_id: str, current_user: AuthUser) -> Order:
    return await _set_status(order_public_id, OrderStatus.REJECTED, current_user)


async def update_order_status(order_public_id: str, raw_status: str, current_user: AuthUser) -> Order:
    """
    Sets one of the farmer-settable statuses, matched case-insensitively.

    Moving to delivered stamps delivered_at. The current status is not
    checked, so any status can be set from any other.
    """
    if not await Order.exists(public_id=order_public_id):
        raise NotFound(f"Order {order_public_id} not found.")

    try:
        new_status = OrderStatus(raw_status.lower())
    except ValueError:
        new_status = None
    if new_status not in FARMER_SETTABLE_STATUSES:
        raise ValidationError("Invalid status")

    return await _set_status(order_public_id, new_status, current_user)


async def cancel_order(order_public_id: str, current_user: AuthUser) -> Order:
    """
    Cancels a pending order on behalf of the buyer who placed it.

    Stock is not returned to the catalog.
    """
    async with in_transaction() as conn:
        order = await Order.get_or_none(public_id=order_public_id, using_db=conn).select_for_update()
        if not order:
            raise NotFound(f"Order {order_public_id} not found.")
        if order.buyer_id != current_user.id:
            raise Forbidden("Only the buyer who placed this order can cancel it.")
        if order.status != OrderStatus.PENDING:
            raise InvalidTransition(
                f"Only pending orders can be cancelled; this order is {OrderStatus(order.status).value}."
            )

        order.status = OrderStatus.CANCELLED
        await order.save(using_db=conn, update_fields=["status"])

    logger.info(f"Order {order_public_id} cancelled by buyer {current_user.public_id}")
    return order


def _to_item_detail_schema(item: OrderItem) -> OrderItemDetailSchema:
    # The product name is read now, so a renamed product shows its new name.
    return OrderItemDetailSchema(
        product_id=item.product.public_id,
        product_name=item.product.name,
        quantity=item.quantity,
        price=item.price,
    )


def _to_order_public_schema(order: Order) -> OrderPublicSchema:
    # Ensure items__product is prefetched before calling this
    return OrderPublicSchema(
        id=order.public_id,
        status=order.status,
        total=order.total,
        shipping_address=order.shipping_address,
        phone=order.phone,
        customer_note=order.customer_note,
        created_at=order.created_at,
        delivered_at=order.delivered_at,
        items=[_to_item_detail_schema(item) for item in order.items],
    )


def _to_received_order_schema(order: Order, farmer: AuthUser) -> ReceivedOrderSchema:
    own_items = [item for item in order.items if item.product.farmer_id == farmer.id]
    return ReceivedOrderSchema(
        id=order.public_id,
        status=order.status,
        total=sum((item.line_total for item in own_items), Decimal("0")),
        shipping_address=order.shipping_address,
        phone=order.phone,
        customer_note=order.customer_note,
        created_at=order.created_at,
        delivered_at=order.delivered_at,
        items=[_to_item_detail_schema(item) for item in own_items],
        buyer_id=order.buyer.public_id,
        buyer_name=order.buyer.name,
        buyer_phone=order.buyer.phone,
    )
