from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import logging

# Import database components
from retailpulse.database.database import create_tables

# Import middleware
from retailpulse.common.middleware import ProcessTimeMiddleware, SecurityHeadersMiddleware

# Import routers
from retailpulse.modules.reports.routers import sales_router as sales_reports_router

# Import models for table creation
import retailpulse.modules.stores.models
import retailpulse.modules.sales.models

from retailpulse.core.config import settings

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.ENVIRONMENT == "production" else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(
    title="RetailPulse API",
    description="Multi-store sales analytics API built with FastAPI and PostgreSQL",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None
)

# Add middleware (order matters!)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(ProcessTimeMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Add your frontend URLs
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(sales_reports_router, prefix="/api/v1")


@app.get("/")
async def read_root():
    return {
        "message": "RetailPulse API is running",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}


@app.on_event("startup")
async def startup_event():
    logger.info("RetailPulse API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")
    logger.info(f"Report timezone: {settings.REPORT_TIMEZONE}")

    # Create database tables (only for development - use migrations in production)
    if settings.ENVIRONMENT == "development":
        await create_tables()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("RetailPulse API shutting down...")
