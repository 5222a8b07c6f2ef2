from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from retailpulse.core.config import settings
import logging

logger = logging.getLogger(__name__)

# Tests never hold pooled connections between event loops
if settings.ENVIRONMENT == "test":
    _engine_options = {"poolclass": NullPool}
else:
    _engine_options = {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}

# Async engine for application use
async_engine = create_async_engine(
    settings.async_database_url,
    echo=settings.DEBUG,
    **_engine_options
)

# Async session factory. Each per-store fetch opens its own session from it.
AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

Base = declarative_base()


async def create_tables():
    """Create read-model tables (development only, no migrations)."""
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Read-model tables created")
