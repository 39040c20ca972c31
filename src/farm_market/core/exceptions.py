"""Domain errors raised by the service layer.

Each error is an HTTPException with a fixed status code, so services can
raise them directly and FastAPI turns them into responses. The handler
registered in main.py renders them as {"message": ...}.
"""

from typing import Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse


class DomainError(HTTPException):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request could not be processed."

    def __init__(self, message: Optional[str] = None, headers: Optional[dict[str, str]] = None):
        super().__init__(
            status_code=self.status_code,
            detail=message or self.default_message,
            headers=headers,
        )

    @property
    def message(self) -> str:
        return self.detail


class ValidationError(DomainError):
    default_message = "Invalid input."


class RoleNotPermitted(DomainError):
    default_message = "Operation not permitted for this user role."


class InvalidTransition(DomainError):
    default_message = "Order cannot change to the requested status."


class ProductNotFound(DomainError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class InsufficientStock(DomainError):
    def __init__(self, product_id: str, requested: int, available: int, product_name: Optional[str] = None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        label = product_name or product_id
        super().__init__(
            f"Not enough stock for {label}: requested {requested}, available {available}"
        )


class Unauthenticated(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to perform this action."


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found."


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=exc.headers,
    )
