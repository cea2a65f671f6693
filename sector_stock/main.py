"""
Main FastAPI application.
- Preflight database test
- Shared report cache and stock ledger created once per process
- Generic 500 for unhandled failures, details only in the log
"""
from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text
from contextlib import asynccontextmanager
import logging

from sector_stock.config import settings
from sector_stock.database import engine, get_db, test_connection
from sector_stock import models
from sector_stock.dependencies import get_report_cache
from sector_stock.ledger import StockLedger
from sector_stock.routers import admin_router, auth_router, inventory_router
from sector_stock.utils.report_cache import ReportCache, create_report_cache

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Starting {settings.APP_NAME} {settings.APP_VERSION}")

    logger.info("Running preflight database test...")
    success, message = test_connection()
    if not success:
        logger.error(f"Preflight test failed: {message}")
    else:
        logger.info(f"Preflight test passed: {message}")

    # Create tables if they don't exist
    try:
        models.Base.metadata.create_all(bind=engine)
        logger.info("Database tables verified")
    except SQLAlchemyError as e:
        logger.warning(f"Database table creation: {e}")

    report_cache = create_report_cache(settings)
    app.state.report_cache = report_cache
    app.state.stock_ledger = StockLedger(report_cache)

    yield

    # Shutdown
    report_cache.close()
    logger.info(f"Shutting down {settings.APP_NAME}")


app = FastAPI(
    title=settings.APP_NAME,
    description="Sector stock ledger and aggregate reporting",
    version=settings.APP_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(inventory_router)
app.include_router(admin_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/health")
def health_check(
    db: Session = Depends(get_db),
    cache: ReportCache = Depends(get_report_cache)
):
    """
    System health check.
    Reports database and cache status without failing when either is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError as e:
        db_status = "error"
        logger.warning(f"Health check database error: {e}")

    return {
        "status": "healthy",
        "service": "sector-stock",
        "database": db_status,
        "cache": "connected" if cache.is_available() else "unavailable",
        "version": settings.APP_VERSION,
    }
