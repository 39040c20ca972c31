"""Shared model pieces.

Every table exposes a KSUID `public_id` in URLs instead of its integer
primary key, and most tables carry created/updated timestamps.
"""

from tortoise import fields, models
from ksuid import ksuid


def generate_ksuid():
    """Returns a new 27 character, time-ordered, URL-safe KSUID string."""
    return str(ksuid.Ksuid())


class TimestampMixin(models.Model):
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        abstract = True
