from tortoise import fields, models
from ...common.models import generate_ksuid


class Message(models.Model):  # No TimestampMixin; messages are never edited
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )

    order: fields.ForeignKeyRelation["Order"] = fields.ForeignKeyField(
        "models.Order", related_name="messages", on_delete=fields.CASCADE
    )
    sender: fields.ForeignKeyRelation["User"] = fields.ForeignKeyField(
        "models.User", related_name="messages", on_delete=fields.CASCADE
    )

    content = fields.CharField(max_length=1000)
    created_at = fields.DatetimeField(auto_now_add=True)

    def __str__(self):
        return f"Message {self.public_id} on order {self.order_id} from {self.sender_id}"

    class Meta:
        table = "messages"
        ordering = ["created_at", "id"]
