"""User lookups and account creation used by the auth routes and token checks."""
from typing import Optional
from . import models


async def get_user_by_public_id(public_id: str) -> Optional[models.User]:
    """Looks a user up by the KSUID carried in a token's `sub` claim.

    Returns:
        The matching User, or None when the account no longer exists.
    """
    return await models.User.get_or_none(public_id=public_id)


async def get_user_by_email(email: str) -> Optional[models.User]:
    """Looks a user up by login email.

    Returns:
        The matching User, or None if nobody registered with that email.
    """
    return await models.User.get_or_none(email=email)


async def create_user(user_in: dict, hashed_password_val: str) -> models.User:
    """Stores a new buyer or farmer account.

    Args:
        user_in: Registration fields (name, email, role, phone, address), password excluded.
        hashed_password_val: bcrypt hash of the chosen password.
    """
    return await models.User.create(**user_in, hashed_password=hashed_password_val)
