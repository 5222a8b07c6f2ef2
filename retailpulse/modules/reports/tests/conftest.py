"""
Shared fixtures for the sales reports tests
"""
import os

os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"

from datetime import datetime, timezone
from itertools import count

import pytest

from retailpulse.modules.reports.schemas import CashierRef, CustomerRef, LineItem, Transaction


STORE_A = "11111111-1111-1111-1111-111111111111"
STORE_B = "22222222-2222-2222-2222-222222222222"
BUSINESS = "99999999-9999-9999-9999-999999999999"

_ids = count(1)


def make_item(product_id="p1", name="Coffee", sku="COF-1", category="Drinks",
              quantity=1, unit_price=10.0, total_price=None):
    return LineItem(
        product_id=product_id,
        product_name=name,
        product_sku=sku,
        category_name=category,
        quantity=quantity,
        unit_price=unit_price,
        total_price=unit_price * quantity if total_price is None else total_price
    )


def make_transaction(total=10.0, **overrides) -> Transaction:
    n = next(_ids)
    data = {
        "id": f"t{n}",
        "receipt_number": f"R-{n:04d}",
        "transaction_date": datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
        "status": "completed",
        "payment_method": "card",
        "subtotal": total,
        "total_amount": total,
        "store_id": STORE_A,
        "store_name": "Downtown",
        "cashier": CashierRef(id="u1", name="Ana Gomez", username="ana"),
        "items": [make_item(total_price=total)],
    }
    data.update(overrides)
    return Transaction(**data)


class FakeStoreDirectory:
    def __init__(self, stores=None):
        self.stores = stores or {}
        self.calls = []

    async def list_stores(self, business_id):
        self.calls.append(business_id)
        return list(self.stores.get(business_id, []))


class FakeTransactionSource:
    def __init__(self, transactions=None, failing=None):
        self.transactions = transactions or {}
        self.failing = set(failing or [])
        self.calls = []

    async def fetch_transactions(self, store_id, date_from=None, date_to=None):
        self.calls.append((store_id, date_from, date_to))
        if store_id in self.failing:
            raise ConnectionError(f"store {store_id} unavailable")
        return list(self.transactions.get(store_id, []))


@pytest.fixture
def transaction_factory():
    return make_transaction


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def three_sales():
    """$10 cash plus $20 and $30 card, all completed on 2024-01-01"""
    return [
        make_transaction(10.0, payment_method="cash", cash_received=60.0, change_given=0.0,
                         customer_id="c1", customer=CustomerRef(id="c1", name="Maria Lopez")),
        make_transaction(20.0, customer_id="c2"),
        make_transaction(30.0, customer_id="c1"),
    ]


@pytest.fixture
def directory():
    return FakeStoreDirectory({BUSINESS: [STORE_A, STORE_B]})


@pytest.fixture
def source():
    return FakeTransactionSource({
        STORE_A: [make_transaction(10.0), make_transaction(20.0)],
        STORE_B: [make_transaction(30.0, store_id=STORE_B, store_name="Airport",
                                   cashier=CashierRef(id="u2", name="Luis", username="luis"))],
    })
