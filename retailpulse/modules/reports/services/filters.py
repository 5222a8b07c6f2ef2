"""
Filter evaluation for sales reports

Pure functions narrowing a transaction list with a FilterSpec. Predicates
are combined with AND; a predicate left at its no-op value is skipped.
"""

from datetime import datetime, timezone, tzinfo
from typing import Callable, Iterable, List, Optional

from ..schemas import ALL, FilterOptions, FilterSpec, Transaction

Predicate = Callable[[Transaction], bool]


def to_business_time(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Return an aware datetime expressed in ``tz``.

    Naive values are taken to be local to ``tz`` already (UTC when no
    timezone is given).
    """
    target = tz or timezone.utc
    if value.tzinfo is None:
        return value.replace(tzinfo=target)
    return value.astimezone(target)


def _contains(value: Optional[str], term: str) -> bool:
    return bool(value) and term in value.lower()


def _date_predicate(spec: FilterSpec, tz: Optional[tzinfo]) -> Optional[Predicate]:
    if spec.date_from is None and spec.date_to is None:
        return None
    lower = to_business_time(spec.date_from, tz) if spec.date_from else None
    upper = to_business_time(spec.date_to, tz) if spec.date_to else None

    def matches(t: Transaction) -> bool:
        effective = t.effective_date
        if effective is None:
            return False
        when = to_business_time(effective, tz)
        if lower is not None and when < lower:
            return False
        if upper is not None and when > upper:
            return False
        return True

    return matches


def _payment_method_predicate(spec: FilterSpec) -> Optional[Predicate]:
    if spec.payment_method == ALL:
        return None
    return lambda t: t.payment_method == spec.payment_method


def _status_predicate(spec: FilterSpec) -> Optional[Predicate]:
    if spec.status == ALL:
        return None
    return lambda t: t.status == spec.status


def _cashier_predicate(spec: FilterSpec) -> Optional[Predicate]:
    if spec.cashier == ALL:
        return None

    def matches(t: Transaction) -> bool:
        if t.cashier is None:
            return False
        return spec.cashier in (t.cashier.username, t.cashier.name)

    return matches


def _amount_predicate(spec: FilterSpec) -> Optional[Predicate]:
    if spec.min_amount == 0 and spec.max_amount is None:
        return None

    def matches(t: Transaction) -> bool:
        if t.total_amount < spec.min_amount:
            return False
        if spec.max_amount is not None and t.total_amount > spec.max_amount:
            return False
        return True

    return matches


def _search_predicate(spec: FilterSpec) -> Optional[Predicate]:
    term = spec.search_term.strip().lower()
    if not term:
        return None

    def matches(t: Transaction) -> bool:
        if _contains(t.receipt_number, term):
            return True
        customer = t.customer
        if customer and (
            _contains(customer.name, term)
            or _contains(customer.phone, term)
            or _contains(customer.email, term)
        ):
            return True
        return any(
            _contains(item.product_name, term) or _contains(item.product_sku, term)
            for item in t.items
        )

    return matches


def build_predicates(spec: FilterSpec, tz: Optional[tzinfo] = None) -> List[Predicate]:
    """Return the active predicates of ``spec``"""
    candidates = [
        _date_predicate(spec, tz),
        _payment_method_predicate(spec),
        _status_predicate(spec),
        _cashier_predicate(spec),
        _amount_predicate(spec),
        _search_predicate(spec),
    ]
    return [p for p in candidates if p is not None]


def filter_transactions(
    transactions: Iterable[Transaction],
    spec: FilterSpec,
    tz: Optional[tzinfo] = None
) -> List[Transaction]:
    """
    Keep the transactions matching every active criterion of ``spec``.

    Input order is preserved and no transaction is modified.
    """
    predicates = build_predicates(spec, tz)
    if not predicates:
        return list(transactions)
    return [t for t in transactions if all(p(t) for p in predicates)]


def extract_filter_options(transactions: Iterable[Transaction]) -> FilterOptions:
    """Collect distinct cashiers, payment methods and categories, first-seen order"""
    cashiers = {}
    payment_methods = {}
    categories = {}
    for t in transactions:
        if t.cashier and t.cashier.label:
            cashiers.setdefault(t.cashier.label, None)
        if t.payment_method:
            payment_methods.setdefault(t.payment_method, None)
        for item in t.items:
            if item.category_name:
                categories.setdefault(item.category_name, None)

    return FilterOptions(
        cashiers=list(cashiers),
        payment_methods=list(payment_methods),
        categories=list(categories)
    )
