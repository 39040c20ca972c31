from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from decimal import Decimal
import datetime


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Name of the product")
    description: Optional[str] = Field(None, max_length=1000, description="Optional description")
    price: Decimal = Field(..., gt=0, le=1_000_000, max_digits=10, decimal_places=2, description="Unit price")
    category: str = Field(..., min_length=1, max_length=50, description="Category, e.g. 'vegetables'")
    image: Optional[str] = Field(None, max_length=500, description="Image URL")
    unit: str = Field("kg", min_length=1, max_length=20, description="Selling unit, e.g. 'kg' or 'dozen'")


class ProductCreate(ProductBase):
    stock: int = Field(0, ge=0, le=100_000, description="Initial stock quantity")


class ProductUpdate(ProductBase):
    """Stock and rating are not editable through the catalog."""


class ProductResponse(ProductBase):
    id: str = Field(..., description="Public unique identifier for the product (KSUID)")
    stock: int
    rating: Decimal
    is_active: bool
    farmer_id: str = Field(..., description="Public id of the owning farmer")
    farmer_name: str
    created_at: datetime.datetime

    model_config = ConfigDict(
        from_attributes=True,
        protected_namespaces=(),
    )
