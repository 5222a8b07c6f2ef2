"""
Reports Module - RetailPulse

Sales analytics over the transactions of one store or of every store of
a business. No tables of its own: transactions are loaded from the sales
module and aggregated in memory.

Main features:
- Scope resolution by role (single store or business-wide)
- Compound filters (dates, payment method, status, cashier, search, amount range)
- Statistics bundle (totals, top products/categories, payment methods, daily revenue, stores)
- Version-keyed statistics cache
- CSV export and background report jobs

Architecture Pattern: Service Layer
- routers/ -> FastAPI endpoints with validation
- services/ -> Scope, filter, aggregation and orchestration logic
- schemas/ -> Pydantic models for the transaction view, filters and responses
- utils/ -> CSV export helpers
"""

__version__ = "1.0.0"
__description__ = "Sales analytics module for multi-store businesses"
