"""
Pydantic schemas for Reports module

Defines the in-memory transaction view consumed by the analytics engine,
the filter specification, the statistics bundle it produces, and the
request/response models of the report endpoints.
"""

import math
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


ALL = "All"
SALE_STATUSES = ("completed", "pending", "refunded", "cancelled")


def coerce_amount(value: Any) -> float:
    """Missing or malformed amounts count as zero."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount):
        return 0.0
    return amount


def coerce_quantity(value: Any) -> int:
    return int(coerce_amount(value))


# Transaction view
class CustomerRef(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class CashierRef(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    username: Optional[str] = None

    @property
    def label(self) -> Optional[str]:
        return self.username or self.name


class LineItem(BaseModel):
    """A product line of a sale, with product data denormalized at read time"""
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    product_sku: Optional[str] = None
    category_name: Optional[str] = None
    quantity: int = 0
    unit_price: float = 0.0
    total_price: float = 0.0
    discount_amount: float = 0.0

    @field_validator("unit_price", "total_price", "discount_amount", mode="before")
    @classmethod
    def parse_amount(cls, v):
        return coerce_amount(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def parse_quantity(cls, v):
        return coerce_quantity(v)


class Transaction(BaseModel):
    """Read-only view of a sale as loaded from a store"""
    id: str
    receipt_number: str = ""
    transaction_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    status: Optional[str] = None
    payment_method: Optional[str] = None
    subtotal: float = 0.0
    discount_amount: float = 0.0
    tax_amount: float = 0.0
    total_amount: float = 0.0
    cash_received: Optional[float] = None
    change_given: Optional[float] = None
    customer_id: Optional[str] = None
    customer: Optional[CustomerRef] = None
    cashier_id: Optional[str] = None
    cashier: Optional[CashierRef] = None
    store_id: Optional[str] = None
    store_name: Optional[str] = None
    items: List[LineItem] = Field(default_factory=list)

    @field_validator("subtotal", "discount_amount", "tax_amount", "total_amount", mode="before")
    @classmethod
    def parse_amount(cls, v):
        return coerce_amount(v)

    @field_validator("cash_received", "change_given", mode="before")
    @classmethod
    def parse_optional_amount(cls, v):
        if v is None:
            return None
        return coerce_amount(v)

    @field_validator("items", mode="before")
    @classmethod
    def parse_items(cls, v):
        return v or []

    @property
    def effective_date(self) -> Optional[datetime]:
        return self.transaction_date or self.created_at


# Filters
class FilterSpec(BaseModel):
    """Compound, immutable set of constraints narrowing a transaction list.

    Every field defaults to its no-op value: ``All`` for the exact-match
    fields, an empty search term, no date bounds and amount bounds of
    ``[0, +inf)`` (``max_amount=None``).
    """
    model_config = ConfigDict(frozen=True)

    date_from: Optional[datetime] = Field(None, description="Inclusive lower bound of the sale date")
    date_to: Optional[datetime] = Field(None, description="Inclusive upper bound of the sale date")
    payment_method: str = Field(ALL, description="Payment method code or 'All'")
    status: str = Field(ALL, description="Sale status or 'All'")
    cashier: str = Field(ALL, description="Cashier username/name or 'All'")
    search_term: str = Field("", description="Receipt, customer or product search")
    min_amount: float = Field(0.0, description="Inclusive minimum total amount")
    max_amount: Optional[float] = Field(None, description="Inclusive maximum total amount, unbounded when empty")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v != ALL and v not in SALE_STATUSES:
            raise ValueError(f"status must be 'All' or one of: {', '.join(SALE_STATUSES)}")
        return v

    @field_validator("payment_method", "cashier", mode="before")
    @classmethod
    def default_all(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return ALL
        return v

    @field_validator("search_term", mode="before")
    @classmethod
    def default_search(cls, v):
        return v or ""

    @model_validator(mode="after")
    def validate_ranges(self):
        if self.date_from and self.date_to:
            if (self.date_from.tzinfo is None) != (self.date_to.tzinfo is None):
                raise ValueError("date_from and date_to must both include a timezone offset or both omit it")
            if self.date_to < self.date_from:
                raise ValueError("date_to must be greater than or equal to date_from")
        if self.max_amount is not None and self.max_amount < self.min_amount:
            raise ValueError("max_amount must be greater than or equal to min_amount")
        return self


# Statistics bundle
class ProductPerformance(BaseModel):
    product_id: Optional[str]
    name: str
    sku: str
    quantity: int
    revenue: float


class CategoryPerformance(BaseModel):
    name: str
    quantity: int
    revenue: float


class PaymentMethodBreakdown(BaseModel):
    method: str
    count: int
    amount: float
    percentage: float = Field(description="Share of the transaction count, 0-100")
    revenue_share: float = Field(description="Share of total revenue, 0-100")
    cash_received: Optional[float] = Field(None, description="Only set for cash")
    change_given: Optional[float] = Field(None, description="Only set for cash")


class DailyRevenuePoint(BaseModel):
    date: date
    revenue: float
    orders: int


class StoreSummary(BaseModel):
    store_id: Optional[str]
    store_name: str
    total_sales: float
    transaction_count: int


class StatisticsBundle(BaseModel):
    total_orders: int = 0
    total_revenue: float = 0.0
    total_discounts: float = 0.0
    total_tax: float = 0.0
    average_order_value: float = 0.0
    unique_customers: int = 0
    top_products: List[ProductPerformance] = Field(default_factory=list)
    top_categories: List[CategoryPerformance] = Field(default_factory=list)
    payment_method_breakdown: List[PaymentMethodBreakdown] = Field(default_factory=list)
    daily_revenue: List[DailyRevenuePoint] = Field(default_factory=list)
    store_breakdown: List[StoreSummary] = Field(default_factory=list)


class FilterOptions(BaseModel):
    """Distinct values available to populate the report filters"""
    cashiers: List[str] = Field(default_factory=list)
    payment_methods: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)


# Service results
class TransactionSet(BaseModel):
    """Transactions loaded for one report scope"""
    store_ids: List[str]
    transactions: List[Transaction]
    version: str


class SalesStatisticsReport(BaseModel):
    generated_at: datetime
    store_ids: List[str]
    version: str
    top_n: int
    statistics: StatisticsBundle


class SalesTransactionsPage(BaseModel):
    store_ids: List[str]
    transactions: List[Transaction]
    total: int
    pagination: Dict[str, Any]


class FilterOptionsResponse(BaseModel):
    store_ids: List[str]
    options: FilterOptions


class ReportJobResponse(BaseModel):
    task_id: str
    status: str
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
