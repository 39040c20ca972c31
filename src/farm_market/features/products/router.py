"""API routes for browsing the catalog and for farmers managing their products."""
from fastapi import APIRouter, status, Query
from typing import Optional, List

from .schemas import ProductCreate, ProductUpdate, ProductResponse
from . import service

from ..auth.security import CurrentFarmer

router = APIRouter(
    prefix="/products",
    tags=["Products"],
    responses={404: {"description": "Not found"}},
)


@router.get(
    "",
    response_model=List[ProductResponse],
    summary="List active products",
)
async def list_products(
    category: Optional[str] = Query(None, description="Category to filter by (case-insensitive)"),
    search: Optional[str] = Query(None, description="Text to look for in product names"),
):
    return await service.list_active_products(category, search)


@router.get(
    "/categories",
    response_model=List[str],
    summary="List categories of active products",
)
async def list_categories():
    return await service.list_categories()


@router.get(
    "/featured",
    response_model=List[ProductResponse],
    summary="List the top rated products",
)
async def list_featured_products():
    return await service.list_featured_products()


@router.get(
    "/mine",
    response_model=List[ProductResponse],
    summary="List the current farmer's products",
)
async def list_my_products(current_farmer: CurrentFarmer):
    return await service.list_farmer_products(current_farmer)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get a specific product",
)
async def get_product(product_id: str):
    return await service.get_product(product_id)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
)
async def create_product(product_in: ProductCreate, current_farmer: CurrentFarmer):
    return await service.create_product(product_in, current_farmer)


@router.put(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update a product",
)
async def update_product(product_id: str, product_in: ProductUpdate, current_farmer: CurrentFarmer):
    await service.update_product(product_id, product_in, current_farmer)
    return None


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Soft delete a product",
)
async def delete_product(product_id: str, current_farmer: CurrentFarmer):
    await service.delete_product(product_id, current_farmer)
    return None
