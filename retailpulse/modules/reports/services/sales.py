"""
Sales Reports Service

Orchestrates a sales report request: resolves the caller's scope, loads the
transactions of every store in scope concurrently, then filters and
aggregates them through the statistics cache.
"""

import asyncio
import hashlib
import logging
from datetime import datetime, timezone, tzinfo
from typing import Dict, List, Optional, Protocol

from retailpulse.modules.auth.schemas import AuthContext

from ..exceptions import TransactionFetchError
from ..schemas import (
    FilterOptionsResponse,
    FilterSpec,
    SalesStatisticsReport,
    SalesTransactionsPage,
    Transaction,
    TransactionSet,
)
from .aggregator import DEFAULT_TOP_N, aggregate
from .cache import StatisticsCache
from .filters import extract_filter_options, filter_transactions, to_business_time
from .scope import ScopeResolver, StoreDirectory

logger = logging.getLogger(__name__)


class TransactionSource(Protocol):
    async def fetch_transactions(
        self,
        store_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None
    ) -> List[Transaction]:
        ...


def compute_version(store_ids: List[str], transactions: List[Transaction]) -> str:
    """Fingerprint of a loaded transaction set, used as cache key"""
    digest = hashlib.sha256()
    digest.update(",".join(store_ids).encode())
    for t in transactions:
        stamp = t.updated_at.isoformat() if t.updated_at else ""
        digest.update(f"|{t.id}:{stamp}".encode())
    return digest.hexdigest()


class SalesReportService:
    """Service for generating sales analytics reports"""

    def __init__(
        self,
        repository: TransactionSource,
        directory: StoreDirectory,
        cache: Optional[StatisticsCache] = None,
        top_n: int = DEFAULT_TOP_N,
        tz: Optional[tzinfo] = None,
        allow_partial: bool = False
    ):
        self.repository = repository
        self.scope_resolver = ScopeResolver(directory)
        self.cache = cache
        self.top_n = top_n
        self.tz = tz
        self.allow_partial = allow_partial

    def restrict_filters(self, auth: AuthContext, filters: FilterSpec) -> FilterSpec:
        """Cashiers only ever see their own sales"""
        if auth.role == "cashier":
            return filters.model_copy(update={"cashier": auth.username or auth.user_id})
        return filters

    async def load_transactions(
        self,
        auth: AuthContext,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None
    ) -> TransactionSet:
        """
        Load the transactions visible to the caller.

        Stores are fetched concurrently and their results concatenated in
        scope order. A failed store aborts the load unless partial results
        are allowed, in which case it is logged and skipped.
        """
        store_ids = await self.scope_resolver.resolve(auth.role, auth.business_id, auth.store_id)
        if not store_ids:
            logger.info(f"No stores in scope for business {auth.business_id}")
            return TransactionSet(store_ids=[], transactions=[], version=compute_version([], []))

        # Stores compare aware timestamps; naive bounds are business time
        if date_from is not None:
            date_from = to_business_time(date_from, self.tz)
        if date_to is not None:
            date_to = to_business_time(date_to, self.tz)

        results = await asyncio.gather(
            *(self.repository.fetch_transactions(store_id, date_from, date_to) for store_id in store_ids),
            return_exceptions=True
        )

        transactions: List[Transaction] = []
        loaded_store_ids: List[str] = []
        failures: List[TransactionFetchError] = []
        for store_id, result in zip(store_ids, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                if not isinstance(result, TransactionFetchError):
                    result = TransactionFetchError(store_id, result)
                failures.append(result)
                continue
            loaded_store_ids.append(store_id)
            transactions.extend(result)

        if failures:
            if not self.allow_partial:
                raise failures[0]
            for failure in failures:
                logger.warning(f"Skipping store {failure.store_id} in partial report: {failure.cause}")

        logger.debug(f"Loaded {len(transactions)} transactions from {len(loaded_store_ids)} stores")
        return TransactionSet(
            store_ids=loaded_store_ids,
            transactions=transactions,
            version=compute_version(loaded_store_ids, transactions)
        )

    async def get_statistics(
        self,
        auth: AuthContext,
        filters: FilterSpec,
        top_n: Optional[int] = None
    ) -> SalesStatisticsReport:
        """Generate the statistics bundle for the caller's scope and filters"""
        top_n = self.top_n if top_n is None else top_n
        filters = self.restrict_filters(auth, filters)
        transaction_set = await self.load_transactions(auth, filters.date_from, filters.date_to)

        def compute():
            filtered = filter_transactions(transaction_set.transactions, filters, self.tz)
            return aggregate(filtered, top_n=top_n, tz=self.tz)

        if self.cache is not None:
            bundle = self.cache.get_or_compute(transaction_set.version, filters, top_n, compute)
        else:
            bundle = compute()

        return SalesStatisticsReport(
            generated_at=datetime.now(timezone.utc),
            store_ids=transaction_set.store_ids,
            version=transaction_set.version,
            top_n=top_n,
            statistics=bundle
        )

    async def get_transactions(
        self,
        auth: AuthContext,
        filters: FilterSpec,
        limit: int = 100,
        offset: int = 0
    ) -> SalesTransactionsPage:
        """Return one page of the filtered transactions, in load order"""
        filters = self.restrict_filters(auth, filters)
        transaction_set = await self.load_transactions(auth, filters.date_from, filters.date_to)
        filtered = filter_transactions(transaction_set.transactions, filters, self.tz)
        total = len(filtered)

        pagination: Dict = {
            "limit": limit,
            "offset": offset,
            "total": total,
            "has_more": (offset + limit) < total
        }
        return SalesTransactionsPage(
            store_ids=transaction_set.store_ids,
            transactions=filtered[offset:offset + limit],
            total=total,
            pagination=pagination
        )

    async def get_filter_options(
        self,
        auth: AuthContext,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None
    ) -> FilterOptionsResponse:
        transaction_set = await self.load_transactions(auth, date_from, date_to)
        return FilterOptionsResponse(
            store_ids=transaction_set.store_ids,
            options=extract_filter_options(transaction_set.transactions)
        )
