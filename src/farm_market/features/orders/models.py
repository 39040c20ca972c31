from decimal import Decimal
from enum import Enum

from tortoise import fields
from ...common.models import TimestampMixin, generate_ksuid


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Order(TimestampMixin):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )

    status = fields.CharEnumField(OrderStatus, max_length=20, default=OrderStatus.PENDING)
    total = fields.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    shipping_address = fields.TextField(null=True)
    phone = fields.CharField(max_length=50, null=True)
    customer_note = fields.TextField(null=True)
    delivered_at = fields.DatetimeField(null=True, default=None)

    buyer: fields.ForeignKeyRelation["User"] = fields.ForeignKeyField(
        "models.User", related_name="orders", on_delete=fields.CASCADE
    )

    items: fields.ReverseRelation["OrderItem"]  # Local forward reference
    messages: fields.ReverseRelation["Message"]

    def __str__(self):
        return f"Order {self.public_id} - Status: {self.status}"

    class Meta:
        table = "orders"


class OrderItem(TimestampMixin):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )

    order: fields.ForeignKeyRelation[Order] = fields.ForeignKeyField(
        "models.Order",
        related_name="items",
        on_delete=fields.CASCADE,
    )
    product: fields.ForeignKeyRelation["Product"] = fields.ForeignKeyField(
        "models.Product",
        related_name="order_items",
        on_delete=fields.RESTRICT,
    )

    quantity = fields.IntField()
    # Unit price copied from the catalog when the order was placed.
    price = fields.DecimalField(max_digits=10, decimal_places=2)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def __str__(self):
        return f"{self.quantity} x product {self.product_id} @ {self.price}"

    class Meta:
        table = "order_items"
        unique_together = (("order", "product"),)
