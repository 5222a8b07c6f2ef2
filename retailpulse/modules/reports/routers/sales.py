"""
Sales Reports Router

FastAPI router for the sales analytics endpoints: statistics bundle,
filtered transaction list, filter options and background report jobs.
"""

import logging
from datetime import date, datetime
from typing import Optional

from celery.result import AsyncResult
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError

from retailpulse.core.celery import celery_app
from retailpulse.core.config import settings
from retailpulse.dependencies.reportDependencies import get_sales_report_service
from retailpulse.modules.auth.dependencies import AuthDependencies
from retailpulse.modules.auth.schemas import AuthContext

from ..exceptions import ScopeError, TransactionFetchError
from ..schemas import (
    FilterOptionsResponse,
    FilterSpec,
    ReportJobResponse,
)
from ..services import SalesReportService
from ..tasks import generate_sales_report
from ..utils import (
    CSV_HEADERS,
    STATISTICS_CSV_SECTIONS,
    create_csv_response,
    prepare_transactions_csv,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports/sales", tags=["Reports"])


def get_filter_spec(
    date_from: Optional[datetime] = Query(None, description="Inclusive start of the sale date range"),
    date_to: Optional[datetime] = Query(None, description="Inclusive end of the sale date range"),
    payment_method: str = Query("All", description="Payment method code or 'All'"),
    sale_status: str = Query(
        "All",
        alias="status",
        pattern="^(All|completed|pending|refunded|cancelled)$",
        description="Sale status or 'All'"
    ),
    cashier: str = Query("All", description="Cashier username or name, or 'All'"),
    search: str = Query("", max_length=100, description="Receipt, customer or product search"),
    min_amount: float = Query(0.0, description="Minimum total amount"),
    max_amount: Optional[float] = Query(None, description="Maximum total amount"),
) -> FilterSpec:
    """Build the FilterSpec from query parameters"""
    try:
        return FilterSpec(
            date_from=date_from,
            date_to=date_to,
            payment_method=payment_method,
            status=sale_status,
            cashier=cashier,
            search_term=search,
            min_amount=min_amount,
            max_amount=max_amount
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _http_error(e: Exception) -> HTTPException:
    """Translate report errors to HTTP errors"""
    if isinstance(e, ScopeError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    if isinstance(e, TransactionFetchError):
        logger.error(str(e))
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to load sales data")
    if isinstance(e, ValueError):
        return HTTPException(status_code=422, detail=str(e))
    logger.exception("Error generating sales report")
    return HTTPException(status_code=500, detail=f"Error generating report: {str(e)}")


@router.get("/statistics", response_model=None)
async def get_sales_statistics(
    filters: FilterSpec = Depends(get_filter_spec),
    top_n: Optional[int] = Query(None, ge=1, le=100, description="Number of ranked products and categories"),
    export: Optional[str] = Query(None, pattern="^(csv)$", description="Export format: csv"),
    section: str = Query(
        "summary",
        pattern="^(summary|top_products|top_categories|payment_methods|daily_revenue|stores)$",
        description="Bundle section exported as CSV"
    ),
    auth_context: AuthContext = Depends(AuthDependencies.require_report_access()),
    service: SalesReportService = Depends(get_sales_report_service)
):
    """
    Generate the sales statistics bundle.

    Returns totals, top products and categories, payment method breakdown,
    daily revenue and per-store summary for the caller's scope.
    Can export one section as CSV.
    """
    try:
        report = await service.get_statistics(auth_context, filters, top_n=top_n)

        if export == "csv":
            csv_data = STATISTICS_CSV_SECTIONS[section](report.statistics)
            filename = f"sales_{section}_{date.today().isoformat()}.csv"
            return create_csv_response(
                data=csv_data,
                filename=filename,
                headers=CSV_HEADERS[section]
            )

        return report

    except HTTPException:
        raise
    except Exception as e:
        raise _http_error(e)


@router.get("/transactions", response_model=None)
async def get_sales_transactions(
    filters: FilterSpec = Depends(get_filter_spec),
    limit: int = Query(100, ge=1, le=settings.REPORT_MAX_PAGE_SIZE, description="Number of records per page"),
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    export: Optional[str] = Query(None, pattern="^(csv)$", description="Export format: csv"),
    auth_context: AuthContext = Depends(AuthDependencies.require_report_access()),
    service: SalesReportService = Depends(get_sales_report_service)
):
    """
    List the transactions matching the filters.

    CSV export contains every matching transaction, not just one page.
    """
    try:
        if export == "csv":
            page = await service.get_transactions(auth_context, filters, limit=2 ** 31, offset=0)
            filename = f"sales_transactions_{date.today().isoformat()}.csv"
            return create_csv_response(
                data=prepare_transactions_csv(page.transactions),
                filename=filename,
                headers=CSV_HEADERS["transactions"]
            )

        page = await service.get_transactions(auth_context, filters, limit=limit, offset=offset)
        return page

    except HTTPException:
        raise
    except Exception as e:
        raise _http_error(e)


@router.get("/filter-options", response_model=FilterOptionsResponse)
async def get_sales_filter_options(
    date_from: Optional[datetime] = Query(None, description="Inclusive start of the sale date range"),
    date_to: Optional[datetime] = Query(None, description="Inclusive end of the sale date range"),
    auth_context: AuthContext = Depends(AuthDependencies.require_report_access()),
    service: SalesReportService = Depends(get_sales_report_service)
):
    """Distinct cashiers, payment methods and categories in the caller's scope."""
    try:
        return await service.get_filter_options(auth_context, date_from, date_to)
    except HTTPException:
        raise
    except Exception as e:
        raise _http_error(e)


@router.post("/jobs", response_model=ReportJobResponse, status_code=status.HTTP_202_ACCEPTED)
async def create_sales_report_job(
    filters: FilterSpec = Depends(get_filter_spec),
    top_n: Optional[int] = Query(None, ge=1, le=100, description="Number of ranked products and categories"),
    auth_context: AuthContext = Depends(AuthDependencies.require_report_access())
):
    """Queue the statistics report for background generation."""
    task = generate_sales_report.delay(
        auth_context.model_dump(),
        filters.model_dump(mode="json"),
        top_n
    )
    logger.info(f"Queued sales report job {task.id} for user {auth_context.user_id}")
    return ReportJobResponse(task_id=task.id, status="PENDING")


@router.get("/jobs/{task_id}", response_model=ReportJobResponse)
async def get_sales_report_job(
    task_id: str,
    auth_context: AuthContext = Depends(AuthDependencies.require_report_access())
):
    """Status, and result once finished, of a background report job."""
    result = AsyncResult(task_id, app=celery_app)

    if not result.ready():
        return ReportJobResponse(task_id=task_id, status=result.state)

    # Crashed tasks carry no owner, so their error text stays in the logs
    if result.failed():
        logger.error(f"Report job {task_id} failed: {result.result}")
        return ReportJobResponse(task_id=task_id, status=result.state, error="Report generation failed")

    payload = result.result or {}
    if payload.get("requested_by") != auth_context.user_id:
        raise HTTPException(status_code=404, detail="Report job not found")

    if payload.get("status") != "success":
        return ReportJobResponse(task_id=task_id, status="FAILURE", error=payload.get("error"))

    return ReportJobResponse(task_id=task_id, status=result.state, result=payload["report"])
