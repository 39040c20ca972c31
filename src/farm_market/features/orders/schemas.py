from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from decimal import Decimal
import datetime

from .models import OrderStatus


# Cart Schemas
class CartItemSchema(BaseModel):
    product_id: str = Field(..., description="Public KSUID of the product")
    quantity: int = Field(..., gt=0, description="Quantity of the product")


class OrderCreateSchema(BaseModel):
    items: List[CartItemSchema] = Field(..., min_length=1)
    shipping_address: Optional[str] = Field(None, description="Where the order should be delivered")
    phone: Optional[str] = Field(None, max_length=50)
    note: Optional[str] = Field(None, description="Free text note for the farmer")


# Order Item Schemas
class OrderItemDetailSchema(BaseModel):
    product_id: str = Field(..., description="Public KSUID of the product")
    product_name: str = Field(..., description="Current catalog name of the product")
    quantity: int
    price: Decimal = Field(..., description="Unit price captured when the order was placed")

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())


# Order Schemas
class OrderPublicSchema(BaseModel):
    id: str = Field(..., description="Public KSUID of the order")
    status: OrderStatus
    total: Decimal
    shipping_address: Optional[str] = None
    phone: Optional[str] = None
    customer_note: Optional[str] = None
    created_at: datetime.datetime
    delivered_at: Optional[datetime.datetime] = None
    items: List[OrderItemDetailSchema]

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())


class ReceivedOrderSchema(OrderPublicSchema):
    """A farmer's view of an order: only their own lines, with a total over those lines."""
    buyer_id: str = Field(..., description="Public id of the buyer")
    buyer_name: str
    buyer_phone: Optional[str] = None
