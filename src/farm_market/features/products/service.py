import logging
from typing import Optional, List

from ...core.exceptions import Forbidden, NotFound
from ..auth.models import User as AuthUser
from .models import Product
from .schemas import ProductCreate, ProductUpdate, ProductResponse

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 6


def _to_product_response(product: Product) -> ProductResponse:
    """Converts a Product model instance (with farmer fetched) to a ProductResponse schema."""
    return ProductResponse(
        id=product.public_id,
        name=product.name,
        description=product.description,
        price=product.price,
        category=product.category,
        image=product.image,
        unit=product.unit,
        stock=product.stock,
        rating=product.rating,
        is_active=product.is_active,
        farmer_id=product.farmer.public_id,
        farmer_name=product.farmer.name,
        created_at=product.created_at,
    )


async def _get_owned_product(product_public_id: str, current_user: AuthUser) -> Product:
    product = await Product.get_or_none(public_id=product_public_id).prefetch_related("farmer")
    if not product:
        raise NotFound("Product not found")
    if product.farmer_id != current_user.id:
        logger.warning(
            f"User {current_user.public_id} tried to modify product {product_public_id} they do not own"
        )
        raise Forbidden("You can only manage your own products.")
    return product


async def list_active_products(
    category: Optional[str] = None, search: Optional[str] = None
) -> List[ProductResponse]:
    """
    Lists active products, optionally filtered.

    Args:
        category: Exact category match, case-insensitive.
        search: Case-insensitive substring of the product name.

    Returns:
        The matching products, ordered by creation.
    """
    query = Product.filter(is_active=True)
    if category:
        query = query.filter(category__iexact=category)
    if search:
        query = query.filter(name__icontains=search)
    products = await query.prefetch_related("farmer").order_by("id")
    return [_to_product_response(p) for p in products]


async def get_product(product_public_id: str) -> ProductResponse:
    """
    Gets a product by id.

    Inactive products are still returned so that historical orders can
    resolve them.
    """
    product = await Product.get_or_none(public_id=product_public_id).prefetch_related("farmer")
    if not product:
        raise NotFound("Product not found")
    return _to_product_response(product)


async def list_categories() -> List[str]:
    """Distinct categories across active products, sorted alphabetically."""
    categories = await (
        Product.filter(is_active=True)
        .distinct()
        .order_by("category")
        .values_list("category", flat=True)
    )
    return list(categories)


async def list_featured_products() -> List[ProductResponse]:
    """The top rated active products."""
    products = (
        await Product.filter(is_active=True)
        .prefetch_related("farmer")
        .order_by("-rating", "id")
        .limit(FEATURED_LIMIT)
    )
    return [_to_product_response(p) for p in products]


async def list_farmer_products(current_user: AuthUser) -> List[ProductResponse]:
    products = (
        await Product.filter(farmer_id=current_user.id, is_active=True)
        .prefetch_related("farmer")
        .order_by("id")
    )
    return [_to_product_response(p) for p in products]


async def create_product(product_in: ProductCreate, current_user: AuthUser) -> ProductResponse:
    """
    Creates a product owned by the requesting farmer.

    Args:
        product_in: The data for the new product, including its initial stock.
        current_user: The farmer who will own the product.

    Returns:
        The created product.
    """
    product = await Product.create(**product_in.model_dump(), farmer=current_user)
    await product.fetch_related("farmer")
    logger.info(f"Farmer {current_user.public_id} listed product {product.public_id}")
    return _to_product_response(product)


async def update_product(
    product_public_id: str, product_in: ProductUpdate, current_user: AuthUser
) -> None:
    """
    Updates the descriptive fields and price of a product the requester owns.

    Stock, rating and owner are left untouched.
    """
    product = await _get_owned_product(product_public_id, current_user)
    update_data = product_in.model_dump()
    for key, value in update_data.items():
        setattr(product, key, value)
    await product.save(update_fields=list(update_data.keys()))


async def delete_product(product_public_id: str, current_user: AuthUser) -> None:
    """
    Soft deletes a product the requester owns.
    """
    product = await _get_owned_product(product_public_id, current_user)
    product.is_active = False
    await product.save(update_fields=["is_active"])
    return None
