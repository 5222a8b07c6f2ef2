"""
Background tasks for sales reports
"""
import asyncio
import logging
from typing import Any, Dict, Optional

from retailpulse.core.celery import celery_app
from retailpulse.dependencies.reportDependencies import build_sales_report_service
from retailpulse.modules.auth.schemas import AuthContext

from .exceptions import ScopeError, TransactionFetchError
from .schemas import FilterSpec

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def generate_sales_report(
    self,
    auth_payload: Dict[str, Any],
    filters_payload: Dict[str, Any],
    top_n: Optional[int] = None
):
    """
    Generate a sales statistics report outside the request cycle.

    Returns the JSON-mode dump of the SalesStatisticsReport.
    """
    auth = AuthContext(**auth_payload)
    filters = FilterSpec(**filters_payload)
    service = build_sales_report_service()

    try:
        report = asyncio.run(service.get_statistics(auth, filters, top_n=top_n))
    except ScopeError as exc:
        logger.warning(f"Report job rejected for user {auth.user_id}: {exc}")
        return {"status": "failed", "error": str(exc), "requested_by": auth.user_id}
    except TransactionFetchError as exc:
        logger.error(f"Report job fetch failed for store {exc.store_id}: {exc.cause}")
        if self.request.retries < self.max_retries:
            raise self.retry(exc=exc, countdown=30 * (2 ** self.request.retries))
        return {"status": "failed", "error": str(exc), "requested_by": auth.user_id}

    logger.info(
        f"Sales report generated for user {auth.user_id}: "
        f"{report.statistics.total_orders} orders across {len(report.store_ids)} stores"
    )
    return {
        "status": "success",
        "report": report.model_dump(mode="json"),
        "requested_by": auth.user_id
    }
