import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Annotated

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import ValidationError
import bcrypt

from ...core.config import (
    SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ISSUER, JWT_AUDIENCE
)
from ...core.exceptions import Forbidden, Unauthenticated
from . import schemas, service as auth_service
from . import models

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
    return hashed.decode('utf-8')


def create_access_token(user: models.User, expires_delta: Optional[timedelta] = None) -> str:
    """Issues a signed token carrying the user's public id, email, name and role."""
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": user.public_id,
        "email": user.email,
        "name": user.name,
        "role": models.Role(user.role).value,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "exp": expire,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> schemas.TokenData:
    try:
        payload = jwt.decode(
            token, SECRET_KEY, algorithms=[ALGORITHM],
            audience=JWT_AUDIENCE, issuer=JWT_ISSUER,
        )
        token_data = schemas.TokenData.model_validate(payload)
    except JWTError as e:
        logger.error(f"JWT decoding error: {e}")
        raise Unauthenticated()
    except ValidationError as e:
        logger.error(f"Token data validation error: {e}")
        raise Unauthenticated()
    if token_data.sub is None:
        logger.warning("Token sub (user id) is missing.")
        raise Unauthenticated()
    return token_data


async def get_current_user(token: Annotated[str, Depends(oauth2_scheme)]) -> models.User:
    token_data = decode_access_token(token)
    user = await auth_service.get_user_by_public_id(token_data.sub)
    if user is None:
        logger.warning(f"User not found for id: {token_data.sub}")
        raise Unauthenticated()
    return user


async def get_current_farmer(current_user: Annotated[models.User, Depends(get_current_user)]) -> models.User:
    if not current_user.is_farmer:
        raise Forbidden("Only farmers can perform this action.")
    return current_user


CurrentUser = Annotated[models.User, Depends(get_current_user)]
CurrentFarmer = Annotated[models.User, Depends(get_current_farmer)]
