"""
Sales statistics aggregation

Turns a (filtered) list of transactions into the StatisticsBundle shown by
the sales report: totals, top products and categories, payment method
breakdown, daily revenue series and per-store summary.

Rankings sort by revenue descending with a stable sort, so equal revenues
keep the order in which their key was first seen.
"""

from datetime import tzinfo
from typing import Dict, List, Optional, Sequence

from ..schemas import (
    CategoryPerformance,
    DailyRevenuePoint,
    PaymentMethodBreakdown,
    ProductPerformance,
    StatisticsBundle,
    StoreSummary,
    Transaction,
)
from .filters import to_business_time

DEFAULT_TOP_N = 10
UNCATEGORIZED = "Uncategorized"
UNKNOWN_PRODUCT = "Unknown"
UNKNOWN_SKU = "N/A"
UNKNOWN_METHOD = "unknown"
UNKNOWN_STORE = "Unknown Store"
CASH = "cash"


def _top_products(transactions: Sequence[Transaction], top_n: int) -> List[ProductPerformance]:
    stats: Dict[Optional[str], dict] = {}
    for t in transactions:
        for item in t.items:
            entry = stats.get(item.product_id)
            if entry is None:
                entry = stats[item.product_id] = {
                    "product_id": item.product_id,
                    "name": item.product_name or UNKNOWN_PRODUCT,
                    "sku": item.product_sku or UNKNOWN_SKU,
                    "quantity": 0,
                    "revenue": 0.0,
                }
            entry["quantity"] += item.quantity
            entry["revenue"] += item.total_price

    ranked = sorted(stats.values(), key=lambda e: e["revenue"], reverse=True)
    return [ProductPerformance(**e) for e in ranked[:top_n]]


def _top_categories(transactions: Sequence[Transaction], top_n: int) -> List[CategoryPerformance]:
    stats: Dict[str, dict] = {}
    for t in transactions:
        for item in t.items:
            name = item.category_name or UNCATEGORIZED
            entry = stats.setdefault(name, {"name": name, "quantity": 0, "revenue": 0.0})
            entry["quantity"] += item.quantity
            entry["revenue"] += item.total_price

    ranked = sorted(stats.values(), key=lambda e: e["revenue"], reverse=True)
    return [CategoryPerformance(**e) for e in ranked[:top_n]]


def _payment_breakdown(
    transactions: Sequence[Transaction],
    total_revenue: float
) -> List[PaymentMethodBreakdown]:
    groups: Dict[str, dict] = {}
    for t in transactions:
        method = t.payment_method or UNKNOWN_METHOD
        group = groups.get(method)
        if group is None:
            group = groups[method] = {"count": 0, "amount": 0.0}
            if method == CASH:
                group["cash_received"] = 0.0
                group["change_given"] = 0.0
        group["count"] += 1
        group["amount"] += t.total_amount
        if method == CASH:
            group["cash_received"] += t.cash_received or 0.0
            group["change_given"] += t.change_given or 0.0

    total_count = len(transactions)
    breakdown = []
    for method, group in groups.items():
        breakdown.append(PaymentMethodBreakdown(
            method=method,
            count=group["count"],
            amount=group["amount"],
            percentage=group["count"] / total_count * 100 if total_count > 0 else 0.0,
            revenue_share=group["amount"] / total_revenue * 100 if total_revenue else 0.0,
            cash_received=group.get("cash_received"),
            change_given=group.get("change_given")
        ))
    return breakdown


def _daily_revenue(
    transactions: Sequence[Transaction],
    tz: Optional[tzinfo]
) -> List[DailyRevenuePoint]:
    days: Dict = {}
    for t in transactions:
        effective = t.effective_date
        if effective is None:
            continue
        day = to_business_time(effective, tz).date() if tz else effective.date()
        entry = days.setdefault(day, {"revenue": 0.0, "orders": 0})
        entry["revenue"] += t.total_amount
        entry["orders"] += 1

    return [
        DailyRevenuePoint(date=day, revenue=entry["revenue"], orders=entry["orders"])
        for day, entry in sorted(days.items())
    ]


def _store_breakdown(transactions: Sequence[Transaction]) -> List[StoreSummary]:
    stores: Dict[Optional[str], dict] = {}
    for t in transactions:
        entry = stores.get(t.store_id)
        if entry is None:
            entry = stores[t.store_id] = {
                "store_id": t.store_id,
                "store_name": t.store_name or UNKNOWN_STORE,
                "total_sales": 0.0,
                "transaction_count": 0,
            }
        entry["total_sales"] += t.total_amount
        entry["transaction_count"] += 1
    return [StoreSummary(**e) for e in stores.values()]


def aggregate(
    transactions: Sequence[Transaction],
    top_n: int = DEFAULT_TOP_N,
    tz: Optional[tzinfo] = None
) -> StatisticsBundle:
    """
    Compute the statistics bundle of a transaction list.

    Args:
        transactions: Already filtered transactions
        top_n: Maximum number of ranked products and categories
        tz: Business timezone used to bucket the daily revenue series.
            Aware timestamps are converted to it; naive timestamps are
            taken as local time.

    Returns:
        StatisticsBundle; the zero-valued bundle for an empty input
    """
    if top_n < 1:
        raise ValueError("top_n must be at least 1")

    transactions = list(transactions)
    if not transactions:
        return StatisticsBundle()

    count = len(transactions)
    total_revenue = sum(t.total_amount for t in transactions)
    total_discounts = sum(t.discount_amount for t in transactions)
    total_tax = sum(t.tax_amount for t in transactions)
    unique_customers = len({t.customer_id for t in transactions if t.customer_id})

    return StatisticsBundle(
        total_orders=count,
        total_revenue=total_revenue,
        total_discounts=total_discounts,
        total_tax=total_tax,
        average_order_value=total_revenue / count,
        unique_customers=unique_customers,
        top_products=_top_products(transactions, top_n),
        top_categories=_top_categories(transactions, top_n),
        payment_method_breakdown=_payment_breakdown(transactions, total_revenue),
        daily_revenue=_daily_revenue(transactions, tz),
        store_breakdown=_store_breakdown(transactions)
    )
