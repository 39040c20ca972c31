from pydantic import BaseModel, Field
import datetime

from ..auth.models import Role


class MessageCreateSchema(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000, description="Message text")


class MessagePublicSchema(BaseModel):
    id: str = Field(..., description="Public KSUID of the message")
    order_id: str = Field(..., description="Public KSUID of the order")
    sender_id: str = Field(..., description="Public id of the sender")
    sender_name: str
    sender_role: Role
    content: str
    created_at: datetime.datetime
