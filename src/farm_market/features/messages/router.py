from fastapi import APIRouter, status
from typing import List

from .schemas import MessageCreateSchema, MessagePublicSchema
from . import service as message_service
from ..auth.security import CurrentUser

router = APIRouter(
    prefix="/orders/{order_id}/messages",
    tags=["Messages"],
)


@router.get("", response_model=List[MessagePublicSchema])
async def list_order_messages(order_id: str, current_user: CurrentUser):
    return await message_service.list_messages(order_id, current_user)


@router.post("", response_model=MessagePublicSchema, status_code=status.HTTP_201_CREATED)
async def post_order_message(order_id: str, message_in: MessageCreateSchema, current_user: CurrentUser):
    return await message_service.send_message(order_id, message_in, current_user)
