
from retailpulse.core.config import settings
from retailpulse.database.database import AsyncSessionLocal
from retailpulse.modules.reports.services import SalesReportService, StatisticsCache
from retailpulse.modules.sales.repository import SalesRepository
from retailpulse.modules.stores.service import StoreDirectory

# Shared across requests of one process
statistics_cache = StatisticsCache(max_entries=settings.REPORT_CACHE_MAX_ENTRIES)


def build_sales_report_service() -> SalesReportService:
    """Wire the report service to the database-backed collaborators."""
    return SalesReportService(
        repository=SalesRepository(AsyncSessionLocal),
        directory=StoreDirectory(AsyncSessionLocal),
        cache=statistics_cache,
        top_n=settings.REPORT_TOP_N,
        tz=settings.report_timezone,
        allow_partial=settings.REPORT_ALLOW_PARTIAL_RESULTS
    )


def get_sales_report_service() -> SalesReportService:
    return build_sales_report_service()
