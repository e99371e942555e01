# WORKFLOW: Database engine, session and price store lifecycle.
# Used by: Routers (via dependency injection), application startup, health checks
# Functions:
# 1. get_engine() / get_session_factory() - Lazily built, process-wide pool and factory
# 2. get_price_store() - Dependency returning the shared PriceStore handle
# 3. wait_for_db() - Bounded wait-and-retry until the database answers
# 4. init_db() - Create the prices table if it is missing
# 5. check_db_connection() - Health check for database connectivity
# 6. dispose_engine() - Release pooled connections on shutdown
#
# Database lifecycle:
# Startup: wait_for_db() -> init_db() -> serve requests
# Runtime: get_price_store() -> PriceStore -> one Session per request/transaction
# Shutdown: dispose_engine()

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_fixed

from core.config import settings
from db.gateway import PriceStore

logger = logging.getLogger(__name__)

# Lazy-loaded database engine, session factory and store
_engine = None
_SessionLocal = None
_price_store = None


def get_engine():
    """Get database engine (lazy-loaded)."""
    global _engine
    if _engine is None:
        options = {"pool_pre_ping": True, "echo": settings.debug}
        if settings.database_url.startswith("postgresql"):
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                connect_args={"options": "-c timezone=utc"},
            )
        _engine = create_engine(settings.database_url, **options)
    return _engine


def get_session_factory():
    """Get session factory (lazy-loaded)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def get_price_store() -> PriceStore:
    """
    Dependency returning the process-wide price store.
    The same handle is shared by every request; each call it serves opens its own session.
    """
    global _price_store
    if _price_store is None:
        _price_store = PriceStore(get_session_factory())
    return _price_store


def wait_for_db() -> None:
    """
    Block until the database accepts connections.

    Retries settings.db_connect_attempts times, settings.db_connect_interval seconds apart,
    and re-raises the last error when the database never comes up.
    """
    retryer = Retrying(
        stop=stop_after_attempt(settings.db_connect_attempts),
        wait=wait_fixed(settings.db_connect_interval),
        retry=retry_if_exception_type(SQLAlchemyError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    for attempt in retryer:
        with attempt:
            with get_engine().connect() as conn:
                conn.execute(text("SELECT 1"))
    logger.info("Database is ready")


def init_db():
    """
    Initialize database tables.
    """
    from db.models import Base

    try:
        Base.metadata.create_all(bind=get_engine())
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


def check_db_connection() -> bool:
    """
    Check if database connection is working.
    """
    return get_price_store().ping()


def dispose_engine() -> None:
    global _engine, _SessionLocal, _price_store
    if _engine is not None:
        _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None
    _SessionLocal = None
    _price_store = None
