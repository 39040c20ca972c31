from enum import Enum

from tortoise import fields

from ...common.models import TimestampMixin, generate_ksuid


class Role(str, Enum):
    BUYER = "buyer"
    FARMER = "farmer"


class User(TimestampMixin):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(max_length=27, unique=True, default=generate_ksuid, db_index=True)
    name = fields.CharField(max_length=100)
    email = fields.CharField(max_length=255, unique=True, db_index=True)
    hashed_password = fields.CharField(max_length=255)
    role = fields.CharEnumField(Role, max_length=20, default=Role.BUYER)
    phone = fields.CharField(max_length=50, null=True)
    address = fields.TextField(null=True)
    avatar = fields.CharField(max_length=500, null=True)

    products: fields.ReverseRelation["farm_market.features.products.models.Product"]
    orders: fields.ReverseRelation["farm_market.features.orders.models.Order"]

    @property
    def is_farmer(self) -> bool:
        return self.role == Role.FARMER

    def __str__(self):
        return f"{self.name} <{self.email}> ({Role(self.role).value})"

    class Meta:
        table = "users"
