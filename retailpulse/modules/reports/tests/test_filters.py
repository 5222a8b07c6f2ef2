"""
Tests for the filter evaluator
"""
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from retailpulse.modules.reports.schemas import CashierRef, CustomerRef, FilterSpec
from retailpulse.modules.reports.services.filters import (
    build_predicates,
    extract_filter_options,
    filter_transactions,
    to_business_time,
)

from .conftest import make_item, make_transaction


class TestFilterSpec:

    def test_defaults_are_no_op(self):
        spec = FilterSpec()
        assert spec.payment_method == "All"
        assert spec.status == "All"
        assert spec.cashier == "All"
        assert spec.search_term == ""
        assert spec.min_amount == 0
        assert spec.max_amount is None
        assert build_predicates(spec) == []

    def test_blank_values_fall_back_to_all(self):
        spec = FilterSpec(payment_method="  ", cashier=None, search_term=None)
        assert spec.payment_method == "All"
        assert spec.cashier == "All"
        assert spec.search_term == ""

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            FilterSpec(status="shipped")

    def test_inverted_amount_range_rejected(self):
        with pytest.raises(ValidationError):
            FilterSpec(min_amount=50, max_amount=10)

    def test_inverted_date_range_rejected(self):
        with pytest.raises(ValidationError):
            FilterSpec(date_from=datetime(2024, 2, 1), date_to=datetime(2024, 1, 1))

    def test_mixed_naive_and_aware_bounds_rejected(self):
        with pytest.raises(ValidationError):
            FilterSpec(date_from=datetime(2024, 1, 1), date_to=datetime(2024, 1, 2, tzinfo=timezone.utc))

    def test_aware_bounds_in_different_zones_compared_by_instant(self):
        spec = FilterSpec(
            date_from=datetime(2024, 1, 1, 0, 30, tzinfo=ZoneInfo("Africa/Lagos")),
            date_to=datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)
        )
        assert spec.date_to > spec.date_from

    def test_is_hashable_and_immutable(self):
        assert hash(FilterSpec(status="completed")) == hash(FilterSpec(status="completed"))
        with pytest.raises(ValidationError):
            FilterSpec().status = "pending"


class TestFilterTransactions:

    def test_no_op_spec_returns_everything_in_order(self):
        transactions = [make_transaction(5.0), make_transaction(1.0), make_transaction(3.0)]
        result = filter_transactions(transactions, FilterSpec())
        assert [t.id for t in result] == [t.id for t in transactions]

    def test_min_amount_excludes_smaller_totals(self):
        t = make_transaction(15.0)
        assert filter_transactions([t], FilterSpec(min_amount=20)) == []

    def test_default_bounds_include_any_positive_total(self):
        t = make_transaction(15.0)
        assert filter_transactions([t], FilterSpec(min_amount=0, max_amount=999999)) == [t]
        assert filter_transactions([t], FilterSpec()) == [t]

    def test_amount_bounds_are_inclusive(self):
        t = make_transaction(20.0)
        assert filter_transactions([t], FilterSpec(min_amount=20, max_amount=20)) == [t]

    def test_payment_method_exact_match(self):
        cash = make_transaction(payment_method="cash")
        card = make_transaction(payment_method="card")
        assert filter_transactions([cash, card], FilterSpec(payment_method="cash")) == [cash]

    def test_status_exact_match(self):
        done = make_transaction(status="completed")
        refunded = make_transaction(status="refunded")
        assert filter_transactions([done, refunded], FilterSpec(status="refunded")) == [refunded]

    def test_cashier_matches_username_or_name(self):
        ana = make_transaction(cashier=CashierRef(name="Ana Gomez", username="ana"))
        luis = make_transaction(cashier=CashierRef(name="Luis"))
        anonymous = make_transaction(cashier=None)
        transactions = [ana, luis, anonymous]

        assert filter_transactions(transactions, FilterSpec(cashier="ana")) == [ana]
        assert filter_transactions(transactions, FilterSpec(cashier="Luis")) == [luis]

    def test_date_bounds_are_inclusive(self):
        day = datetime(2024, 1, 10, tzinfo=timezone.utc)
        early = make_transaction(transaction_date=day - timedelta(seconds=1))
        start = make_transaction(transaction_date=day)
        end = make_transaction(transaction_date=day + timedelta(days=1))
        late = make_transaction(transaction_date=day + timedelta(days=1, seconds=1))

        spec = FilterSpec(date_from=day, date_to=day + timedelta(days=1))
        assert filter_transactions([early, start, end, late], spec) == [start, end]

    def test_open_ended_date_bound(self):
        old = make_transaction(transaction_date=datetime(2023, 1, 1, tzinfo=timezone.utc))
        new = make_transaction(transaction_date=datetime(2024, 6, 1, tzinfo=timezone.utc))
        spec = FilterSpec(date_from=datetime(2024, 1, 1, tzinfo=timezone.utc))
        assert filter_transactions([old, new], spec) == [new]

    def test_date_falls_back_to_created_at(self):
        t = make_transaction(transaction_date=None, created_at=datetime(2024, 3, 5, tzinfo=timezone.utc))
        spec = FilterSpec(date_from=datetime(2024, 3, 1, tzinfo=timezone.utc))
        assert filter_transactions([t], spec) == [t]

    def test_undated_transaction_excluded_by_date_filter(self):
        t = make_transaction(transaction_date=None, created_at=None)
        spec = FilterSpec(date_to=datetime(2030, 1, 1, tzinfo=timezone.utc))
        assert filter_transactions([t], spec) == []
        assert filter_transactions([t], FilterSpec()) == [t]

    def test_naive_bounds_read_in_business_timezone(self):
        bogota = ZoneInfo("America/Bogota")
        # 2024-01-02 03:00 UTC is still 2024-01-01 in Bogota
        t = make_transaction(transaction_date=datetime(2024, 1, 2, 3, 0, tzinfo=timezone.utc))
        spec = FilterSpec(date_from=datetime(2024, 1, 1), date_to=datetime(2024, 1, 1, 23, 59, 59))
        assert filter_transactions([t], spec, tz=bogota) == [t]
        assert filter_transactions([t], spec) == []

    def test_search_receipt_customer_and_product(self):
        by_receipt = make_transaction(receipt_number="INV-0042")
        by_phone = make_transaction(customer=CustomerRef(name="Maria", phone="310-555-0101"))
        by_sku = make_transaction(items=[make_item(name="Tea", sku="TEA-7")])
        other = make_transaction(receipt_number="X-1", items=[make_item(name="Milk", sku="MLK-1")])
        transactions = [by_receipt, by_phone, by_sku, other]

        assert filter_transactions(transactions, FilterSpec(search_term="inv-00")) == [by_receipt]
        assert filter_transactions(transactions, FilterSpec(search_term="555-01")) == [by_phone]
        assert filter_transactions(transactions, FilterSpec(search_term=" tea-7 ")) == [by_sku]

    def test_search_ignores_missing_fields(self):
        t = make_transaction(receipt_number="", customer=None, items=[])
        assert filter_transactions([t], FilterSpec(search_term="abc")) == []

    def test_criteria_are_combined(self):
        match = make_transaction(50.0, payment_method="cash", status="completed")
        wrong_method = make_transaction(50.0, payment_method="card", status="completed")
        too_small = make_transaction(5.0, payment_method="cash", status="completed")
        spec = FilterSpec(payment_method="cash", status="completed", min_amount=10)
        assert filter_transactions([match, wrong_method, too_small], spec) == [match]

    def test_input_is_not_modified(self):
        transactions = [make_transaction(1.0), make_transaction(2.0)]
        snapshot = [t.model_dump() for t in transactions]
        filter_transactions(transactions, FilterSpec(min_amount=2))
        assert [t.model_dump() for t in transactions] == snapshot


class TestBusinessTime:

    def test_naive_value_gets_timezone(self):
        value = to_business_time(datetime(2024, 1, 1, 8), ZoneInfo("Europe/Madrid"))
        assert value.hour == 8
        assert value.utcoffset() == timedelta(hours=1)

    def test_aware_value_is_converted(self):
        value = to_business_time(datetime(2024, 1, 1, 8, tzinfo=timezone.utc), ZoneInfo("Europe/Madrid"))
        assert value.hour == 9


class TestFilterOptions:

    def test_distinct_values_in_first_seen_order(self):
        transactions = [
            make_transaction(payment_method="card", cashier=CashierRef(username="ana"),
                             items=[make_item(category="Drinks"), make_item(category=None)]),
            make_transaction(payment_method="cash", cashier=CashierRef(name="Luis"),
                             items=[make_item(category="Bakery")]),
            make_transaction(payment_method="card", cashier=None, items=[make_item(category="Drinks")]),
        ]
        options = extract_filter_options(transactions)
        assert options.cashiers == ["ana", "Luis"]
        assert options.payment_methods == ["card", "cash"]
        assert options.categories == ["Drinks", "Bakery"]

    def test_empty_input(self):
        options = extract_filter_options([])
        assert options.cashiers == []
        assert options.payment_methods == []
        assert options.categories == []
