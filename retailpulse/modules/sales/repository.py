"""
Loads sale records of a store and maps them to report transactions.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from retailpulse.modules.reports.exceptions import TransactionFetchError
from retailpulse.modules.reports.schemas import CashierRef, CustomerRef, LineItem, Transaction
from retailpulse.modules.sales.models import Product, Sale, SaleItem

logger = logging.getLogger(__name__)


def _str_or_none(value) -> Optional[str]:
    return str(value) if value is not None else None


def sale_to_transaction(sale: Sale) -> Transaction:
    """Map a loaded Sale row, with its relationships, to a Transaction"""
    items = []
    for item in sale.items:
        product = item.product
        items.append(LineItem(
            product_id=_str_or_none(item.product_id),
            product_name=product.name if product else None,
            product_sku=product.sku if product else None,
            category_name=product.category.name if product and product.category else None,
            quantity=item.quantity,
            unit_price=item.unit_price,
            total_price=item.total_price,
            discount_amount=item.discount_amount
        ))

    customer = None
    if sale.customer is not None:
        customer = CustomerRef(
            id=str(sale.customer.id),
            name=sale.customer.name,
            phone=sale.customer.phone,
            email=sale.customer.email
        )

    cashier = None
    if sale.cashier is not None:
        cashier = CashierRef(
            id=str(sale.cashier.id),
            name=sale.cashier.name,
            username=sale.cashier.username
        )

    status = sale.status.value if hasattr(sale.status, "value") else sale.status

    return Transaction(
        id=str(sale.id),
        receipt_number=sale.receipt_number,
        transaction_date=sale.transaction_date,
        created_at=sale.created_at,
        updated_at=sale.updated_at,
        status=status,
        payment_method=sale.payment_method,
        subtotal=sale.subtotal,
        discount_amount=sale.discount_amount,
        tax_amount=sale.tax_amount,
        total_amount=sale.total_amount,
        cash_received=sale.cash_received,
        change_given=sale.change_given,
        customer_id=_str_or_none(sale.customer_id),
        customer=customer,
        cashier_id=_str_or_none(sale.cashier_id),
        cashier=cashier,
        store_id=_str_or_none(sale.store_id),
        store_name=sale.store.name if sale.store else None,
        items=items
    )


class SalesRepository:
    """Fetches the transactions of one store, optionally within a date range"""

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    def _build_query(self, store_id: UUID, date_from: Optional[datetime], date_to: Optional[datetime]):
        # Same effective date as the report filters
        sale_date = func.coalesce(Sale.transaction_date, Sale.created_at)
        stmt = (
            select(Sale)
            .options(
                selectinload(Sale.items).selectinload(SaleItem.product).selectinload(Product.category),
                selectinload(Sale.customer),
                selectinload(Sale.cashier),
                selectinload(Sale.store)
            )
            .where(Sale.store_id == store_id)
            .order_by(sale_date.desc(), Sale.receipt_number)
        )
        if date_from is not None:
            stmt = stmt.where(sale_date >= date_from)
        if date_to is not None:
            stmt = stmt.where(sale_date <= date_to)
        return stmt

    async def fetch_transactions(
        self,
        store_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None
    ) -> List[Transaction]:
        try:
            store_uuid = UUID(str(store_id))
        except ValueError:
            raise ValueError(f"Invalid store id '{store_id}'")

        # One session per call so concurrent store fetches never share state
        try:
            async with self.session_factory() as session:
                result = await session.execute(self._build_query(store_uuid, date_from, date_to))
                sales = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Sales query failed for store {store_id}: {e}")
            raise TransactionFetchError(str(store_id), e)

        logger.debug(f"Fetched {len(sales)} sales for store {store_id}")
        return [sale_to_transaction(sale) for sale in sales]
