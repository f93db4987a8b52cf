"""
Sale transactor: turns a confirmed quantity into a ledger entry and a stock decrement.
"""
from enum import Enum
from typing import Optional

from smartshop.core.exceptions import InvalidQuantity, QuantityExceedsStock, SaleStateError
from smartshop.logging_config import get_logger
from smartshop.schemas.product import Product
from smartshop.schemas.sale import CustomerInfo, Sale, SaleStatus
from smartshop.utils import new_id, now_millis

logger = get_logger("transactor")


class SaleState(str, Enum):
    IDLE = "idle"
    CONFIRMING = "confirming"
    COMMITTED = "committed"


class SaleTransactor:
    """
    idle -> confirming -> committed, or back to idle on cancel.

    The product is re-read at commit time so the stock check sees the
    latest local state. Both records are written in one local transaction;
    remote mirroring happens afterwards and never blocks the sale.
    """

    def __init__(self, ctx):
        self.ctx = ctx
        self.state = SaleState.IDLE
        self.product: Optional[Product] = None
        self.sale: Optional[Sale] = None

    async def begin(self, product_id: str) -> Product:
        if self.state != SaleState.IDLE:
            raise SaleStateError("begin", self.state.value)
        self.product = await self.ctx.catalog.get(product_id)
        self.state = SaleState.CONFIRMING
        return self.product

    def cancel(self) -> None:
        if self.state == SaleState.COMMITTED:
            raise SaleStateError("cancel", self.state.value)
        self.state = SaleState.IDLE
        self.product = None

    async def commit(
        self,
        quantity: int,
        customer: Optional[CustomerInfo] = None,
        status: SaleStatus = SaleStatus.SUCCESS
    ) -> Sale:
        if self.state != SaleState.CONFIRMING:
            raise SaleStateError("commit", self.state.value)
        if quantity < 1:
            raise InvalidQuantity(quantity)

        async with self.ctx.sale_lock:
            product = await self.ctx.catalog.get(self.product.id)
            if quantity > product.stock:
                logger.info(
                    f"[SALE] Rejected {quantity} x {product.id}: only {product.stock} in stock"
                )
                raise QuantityExceedsStock(product.id, quantity, product.stock)

            sale = Sale(
                id=new_id(),
                product_id=product.id,
                product_name=product.name,
                quantity=quantity,
                selling_price=product.selling_price,
                purchase_price=product.purchase_price,
                total_amount=product.selling_price * quantity,
                timestamp=now_millis(),
                customer=customer.model_copy() if customer else None,
                status=status
            )
            updated = product.model_copy(update={"stock": product.stock - quantity})

            async with self.ctx.local.session() as session:
                await self.ctx.ledger.append(sale, session=session)
                await self.ctx.catalog.upsert_one(updated, session=session)

        self.ctx.ledger.mirror([sale])
        self.ctx.catalog.mirror([updated])

        self.product = updated
        self.sale = sale
        self.state = SaleState.COMMITTED
        logger.info(
            f"[SALE] {sale.id}: {quantity} x {product.name} = {sale.total_amount} "
            f"({sale.customer_name}), stock {product.stock} -> {updated.stock}"
        )
        return sale
