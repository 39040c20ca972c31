"""Data model for the product catalog."""

from decimal import Decimal

from tortoise import fields
from ...common.models import TimestampMixin, generate_ksuid


class Product(TimestampMixin):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )
    name = fields.CharField(max_length=200)
    description = fields.CharField(max_length=1000, null=True)
    price = fields.DecimalField(max_digits=10, decimal_places=2)
    category = fields.CharField(max_length=50, db_index=True)
    image = fields.CharField(max_length=500, null=True)
    unit = fields.CharField(max_length=20, default="kg")
    stock = fields.IntField(default=0)
    rating = fields.DecimalField(max_digits=2, decimal_places=1, default=Decimal("0"))
    is_active = fields.BooleanField(default=True)  # Soft delete flag

    # Set once at creation; the catalog never reassigns it.
    farmer: fields.ForeignKeyRelation["User"] = fields.ForeignKeyField(
        "models.User", related_name="products", on_delete=fields.CASCADE
    )

    order_items: fields.ReverseRelation["OrderItem"]

    def __str__(self):
        return f"{self.name} (Stock: {self.stock}, Price: {self.price})"

    class Meta:
        table = "products"
