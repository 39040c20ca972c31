"""API routes for user authentication: registration, login and the current profile."""
import logging
from fastapi import APIRouter, status
from tortoise.exceptions import IntegrityError

from ...core.exceptions import Unauthenticated, ValidationError
from . import models, schemas
from . import security as auth_security
from . import service as auth_service

logger = logging.getLogger(__name__)
router = APIRouter(
    tags=["Authentication"],
    prefix="/auth"
)


def _auth_response(user: models.User) -> schemas.AuthResponse:
    return schemas.AuthResponse(
        id=user.public_id,
        name=user.name,
        email=user.email,
        role=user.role,
        token=auth_security.create_access_token(user),
    )


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_user(user_in: schemas.UserRegister):
    if await auth_service.get_user_by_email(email=user_in.email):
        raise ValidationError("Email already exists")
    hashed_password = auth_security.get_password_hash(user_in.password)
    user_data_dict = user_in.model_dump(exclude={"password"})
    try:
        new_user = await auth_service.create_user(
            user_in=user_data_dict,
            hashed_password_val=hashed_password
        )
    except IntegrityError:
        # Another registration took the email between the check and the insert
        logger.warning(f"Duplicate registration for {user_in.email} rejected by unique index")
        raise ValidationError("Email already exists")
    logger.info(f"Registered {models.Role(new_user.role).value} {new_user.public_id}")
    return _auth_response(new_user)


@router.post("/login", response_model=schemas.AuthResponse)
async def login(credentials: schemas.UserLogin):
    user = await auth_service.get_user_by_email(email=credentials.email)
    if not user or not auth_security.verify_password(credentials.password, user.hashed_password):
        raise Unauthenticated("Invalid email or password")
    return _auth_response(user)


@router.get("/me", response_model=schemas.UserProfile)
async def read_current_user(current_user: auth_security.CurrentUser):
    return schemas.UserProfile.model_validate(current_user)
