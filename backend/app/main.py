"""Landlord Ledger - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.core.database import SessionLocal, create_tables, engine
from app.core.env_validation import validate_environment
from app.core.exceptions import InternalError, LandlordLedgerError
from app.routers import (
    landlords_router,
    reviews_router,
    contributions_router,
    search_router,
)
from app.services.owner_lookup import close_owner_lookup
from app.services.seed import seed_database

# CRITICAL: Validate environment before proceeding
# This will hard-fail (exit 1) if required configuration is missing
validate_environment()

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    if settings.create_tables_on_startup:
        await create_tables()
    if settings.seed_sample_data:
        async with SessionLocal() as session:
            await seed_database(session)
    yield
    # Shutdown: the owner-lookup session is the only long-lived external resource
    await close_owner_lookup()
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Tenant reviews of landlords and property managers: multi-category ratings, helpfulness votes, and crowd-sourced ownership corrections.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS - Dynamically configured from ALLOWED_ORIGINS environment variable
# In production, wildcard (*) is blocked by env_validation.py
allowed_origins = [origin.strip() for origin in settings.allowed_origins.split(",")]

logger.info(f"CORS configured with origins: {allowed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LandlordLedgerError)
async def domain_error_handler(request: Request, exc: LandlordLedgerError):
    """Map domain errors to their HTTP status."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400 with field-level detail."""
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"message": "Invalid input data", "errors": errors}),
    )


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    """Unexpected store failures."""
    logger.exception(f"Store failure on {request.method} {request.url.path}")
    error = InternalError("Internal server error")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# API routers
app.include_router(landlords_router, prefix=settings.api_prefix)
app.include_router(reviews_router, prefix=settings.api_prefix)
app.include_router(contributions_router, prefix=settings.api_prefix)
app.include_router(search_router, prefix=settings.api_prefix)  # Enhanced search with owner lookup


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs" if settings.debug else "Disabled in production",
    }
