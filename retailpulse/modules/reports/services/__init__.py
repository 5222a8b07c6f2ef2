"""
Services package for Reports module

Exports the analytics engine (scope resolution, filtering, aggregation),
the statistics cache and the report orchestration service.
"""

from .scope import ScopeResolver, SINGLE_STORE_ROLES, BUSINESS_WIDE_ROLES
from .filters import filter_transactions, extract_filter_options, build_predicates
from .aggregator import aggregate, DEFAULT_TOP_N
from .cache import StatisticsCache
from .sales import SalesReportService, compute_version

__all__ = [
    "ScopeResolver",
    "SINGLE_STORE_ROLES",
    "BUSINESS_WIDE_ROLES",
    "filter_transactions",
    "extract_filter_options",
    "build_predicates",
    "aggregate",
    "DEFAULT_TOP_N",
    "StatisticsCache",
    "SalesReportService",
    "compute_version"
]
