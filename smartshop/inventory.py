# smartshop/inventory.py
"""Catalog mutations outside of sales: create, edit, restock."""

from smartshop.core.exceptions import InvalidQuantity
from smartshop.logging_config import get_logger
from smartshop.schemas.product import Product, ProductCreate, ProductUpdate

logger = get_logger("inventory")

# Fields a product cannot be without; an explicit null for these is ignored
REQUIRED_FIELDS = {"name", "description", "purchase_price", "selling_price", "stock", "image_url"}


async def create_product(ctx, data: ProductCreate) -> Product:
    product = Product(**data.model_dump())
    await ctx.catalog.upsert_one(product)
    logger.info(f"[PRODUCT] Created {product.id} '{product.name}' with stock {product.stock}")
    return product


async def update_product(ctx, product_id: str, data: ProductUpdate) -> Product:
    """
    Apply the provided fields; id and createdAt never change.

    An explicit null clears an optional field such as brand or unit.
    """
    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field not in REQUIRED_FIELDS
    }
    async with ctx.sale_lock:
        product = await ctx.catalog.get(product_id)
        updated = Product.model_validate({**product.model_dump(), **changes})
        await ctx.catalog.upsert_one(updated)
    logger.info(f"[PRODUCT] Updated {product_id}: {sorted(changes)}")
    return updated


async def restock_product(ctx, product_id: str, quantity: int) -> Product:
    if quantity < 1:
        raise InvalidQuantity(quantity)
    async with ctx.sale_lock:
        product = await ctx.catalog.get(product_id)
        updated = product.model_copy(update={"stock": product.stock + quantity})
        await ctx.catalog.upsert_one(updated)
    logger.info(f"[PRODUCT] Restocked {product_id}: {product.stock} -> {updated.stock}")
    return updated
