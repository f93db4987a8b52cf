"""
Product catalog API endpoints.
"""
from typing import Optional
from fastapi import APIRouter, Depends, status, Query

from smartshop.api.v1.deps import get_context
from smartshop.context import AppContext
from smartshop.inventory import create_product, restock_product, update_product
from smartshop.match import search_products
from smartshop.schemas.product import Product, ProductCreate, ProductUpdate, RestockRequest

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=list[Product])
async def list_products(
    q: Optional[str] = Query(None, description="Accent-insensitive search on name or id"),
    ctx: AppContext = Depends(get_context)
):
    """
    List products, newest first.

    - **q**: optional search text; "sua" matches "Sữa"
    """
    products = await ctx.catalog.get_all()
    return search_products(products, q)


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def add_product(
    product_data: ProductCreate,
    ctx: AppContext = Depends(get_context)
):
    """Create a product from manual entry or an AI-suggested name."""
    return await create_product(ctx, product_data)


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: str,
    ctx: AppContext = Depends(get_context)
):
    """Get a specific product."""
    return await ctx.catalog.get(product_id)


@router.put("/{product_id}", response_model=Product)
async def edit_product(
    product_id: str,
    product_data: ProductUpdate,
    ctx: AppContext = Depends(get_context)
):
    """Edit a product. Only provided fields change."""
    return await update_product(ctx, product_id, product_data)


@router.post("/{product_id}/restock", response_model=Product)
async def restock(
    product_id: str,
    restock_data: RestockRequest,
    ctx: AppContext = Depends(get_context)
):
    """Add received units to a product's stock."""
    return await restock_product(ctx, product_id, restock_data.quantity)
