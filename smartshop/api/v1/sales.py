"""
Sales API endpoints.
"""
from fastapi import APIRouter, Depends, status

from smartshop.api.v1.deps import get_context
from smartshop.context import AppContext
from smartshop.schemas.sale import Sale, SaleCreate

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.post("", response_model=Sale, status_code=status.HTTP_201_CREATED)
async def sell(
    sale_data: SaleCreate,
    ctx: AppContext = Depends(get_context)
):
    """
    Sell a product.

    - **productId**: product to sell
    - **quantity**: units, between 1 and the product's stock
    - **customer**: optional; omitted or blank name means a walk-in sale

    Returns as soon as the sale is stored locally.
    """
    transactor = ctx.transactor()
    await transactor.begin(sale_data.product_id)
    return await transactor.commit(
        sale_data.quantity,
        customer=sale_data.customer,
        status=sale_data.status
    )


@router.get("", response_model=list[Sale])
async def list_sales(ctx: AppContext = Depends(get_context)):
    """All sales, newest first."""
    return await ctx.ledger.get_all()
