"""Per-order conversation between the buyer and the farmer(s) supplying the order."""
import logging
from typing import List

from ..auth.models import User as AuthUser
from ..orders.access import load_accessible_order
from ..orders.models import Order
from .models import Message
from .schemas import MessageCreateSchema, MessagePublicSchema

logger = logging.getLogger(__name__)


def _to_message_public_schema(message: Message, order: Order, sender: AuthUser) -> MessagePublicSchema:
    return MessagePublicSchema(
        id=message.public_id,
        order_id=order.public_id,
        sender_id=sender.public_id,
        sender_name=sender.name,
        sender_role=sender.role,
        content=message.content,
        created_at=message.created_at,
    )


async def list_messages(order_public_id: str, current_user: AuthUser) -> List[MessagePublicSchema]:
    """
    Lists an order's messages, oldest first.

    Raises:
        NotFound: The order does not exist.
        Forbidden: The requester is neither the buyer nor a farmer on the order.
    """
    order = await load_accessible_order(order_public_id, current_user)
    messages = await Message.filter(order_id=order.id).prefetch_related("sender").order_by("created_at", "id")
    return [_to_message_public_schema(m, order, m.sender) for m in messages]


async def send_message(
    order_public_id: str, message_in: MessageCreateSchema, current_user: AuthUser
) -> MessagePublicSchema:
    """
    Posts a message to an order's thread as the current user.

    Access rules are the same as for list_messages.
    """
    order = await load_accessible_order(order_public_id, current_user)
    message = await Message.create(order=order, sender=current_user, content=message_in.content)
    logger.info(f"User {current_user.public_id} posted message {message.public_id} on order {order.public_id}")
    return _to_message_public_schema(message, order, current_user)
