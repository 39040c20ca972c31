from fastapi import APIRouter, Body, status
from typing import List, Annotated

from .schemas import OrderCreateSchema, OrderPublicSchema, ReceivedOrderSchema
from .service import (
    _to_order_public_schema, accept_order, cancel_order, create_orders, get_order,
    list_buyer_orders, list_received_orders, reject_order, update_order_status,
)

# Auth dependencies
from ..auth.security import CurrentFarmer, CurrentUser

router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
)


@router.get("", response_model=List[OrderPublicSchema])
async def list_my_orders(current_user: CurrentUser):
    orders = await list_buyer_orders(current_user)
    return [_to_order_public_schema(order) for order in orders]


@router.get("/received", response_model=List[ReceivedOrderSchema])
async def list_orders_received(current_farmer: CurrentFarmer):
    return await list_received_orders(current_farmer)


@router.get("/{order_id}", response_model=OrderPublicSchema)
async def read_order(order_id: str, current_user: CurrentUser):
    order = await get_order(order_id, current_user)
    return _to_order_public_schema(order)


@router.post("", response_model=List[OrderPublicSchema], status_code=status.HTTP_201_CREATED)
async def place_order(order_data: OrderCreateSchema, current_user: CurrentUser):
    # One order per farmer in the cart
    orders = await create_orders(order_data, current_user)
    return [_to_order_public_schema(order) for order in orders]


@router.post("/{order_id}/accept", status_code=status.HTTP_204_NO_CONTENT)
async def accept(order_id: str, current_farmer: CurrentFarmer):
    await accept_order(order_id, current_farmer)
    return None


@router.post("/{order_id}/reject", status_code=status.HTTP_204_NO_CONTENT)
async def reject(order_id: str, current_farmer: CurrentFarmer):
    await reject_order(order_id, current_farmer)
    return None


@router.post("/{order_id}/cancel", status_code=status.HTTP_204_NO_CONTENT)
async def cancel(order_id: str, current_user: CurrentUser):
    await cancel_order(order_id, current_user)
    return None


@router.put("/{order_id}/status", status_code=status.HTTP_204_NO_CONTENT)
async def set_status(
    order_id: str,
    new_status: Annotated[str, Body(description='Raw JSON string, e.g. "delivered"')],
    current_farmer: CurrentFarmer,
):
    await update_order_status(order_id, new_status, current_farmer)
    return None
