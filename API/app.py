"""
Society Maintenance Billing - Main Application

Multi-society billing API with path-based society routing:
- /api/v1/{society_slug}/...      → Society-scoped API
- /api/v1/society/{slug}/info     → Public society info
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Path, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.orm import Session

from database import init_db, db, get_db
from database.seed import seed_all
from database.models import Society
from core.config import settings
from core.society import setup_society_events
from schemas.settings import SocietyPublicInfo

from routers import (
    settings_router, master_data_router, flats_router,
    bills_router, payments_router, expenses_router, reports_router
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {settings.app_name}...")

    try:
        init_db()

        setup_society_events()
        logger.info("Society events registered")

        # Default society (first run only)
        with db.get_session() as session:
            seed_all(session)

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    logger.info(f"{settings.app_name} started successfully")

    yield

    logger.info(f"Shutting down {settings.app_name}...")


app = FastAPI(
    title=settings.app_name,
    description="""
    Monthly maintenance billing for housing societies.

    ## Society API: /api/v1/{society_slug}/...
    * **Settings** - Society profile, billing day, due days, prefixes
    * **Master data** - Buildings, flat types, charge types
    * **Flats** - Owners, tenants, vehicles
    * **Bills** - Monthly bill generation
    * **Payments** - Receipts against bills
    * **Expenses** - Society expense vouchers
    * **Reports** - Outstanding, collection, ledger, fee position, income & expense
    """,
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "detail": str(exc) if settings.debug else None
        }
    )


# ==================== HEALTH & PUBLIC ENDPOINTS ====================

@app.get("/", tags=["Health"])
async def root():
    return {
        "message": settings.app_name,
        "version": settings.app_version,
        "status": "running"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    from sqlalchemy import text
    try:
        with db.get_session() as session:
            session.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "disconnected", "error": str(e)}
        )


@app.get(
    "/api/v1/society/{slug}/info",
    response_model=SocietyPublicInfo,
    tags=["Public"]
)
async def get_society_public_info(
    slug: str = Path(..., description="Society slug"),
    db_session: Session = Depends(get_db)
):
    """
    Public society info (name and address).
    No billing data is returned.
    """
    society = db_session.query(Society).filter(
        Society.slug == slug,
        Society.is_active == True
    ).first()

    if not society:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Society not found"
        )

    return SocietyPublicInfo(
        name=society.name,
        slug=society.slug,
        address=society.address
    )


# ==================== SOCIETY-SCOPED ROUTES ====================
# All society routes include {society_slug} in the path
# The resolve_society dependency in each router handles society resolution

SOCIETY_PREFIX = "/api/v1/{society_slug}"

app.include_router(settings_router, prefix=f"{SOCIETY_PREFIX}/settings", tags=["Settings"])
app.include_router(master_data_router, prefix=f"{SOCIETY_PREFIX}/master-data", tags=["Master Data"])
app.include_router(flats_router, prefix=f"{SOCIETY_PREFIX}/flats", tags=["Flats"])
app.include_router(bills_router, prefix=f"{SOCIETY_PREFIX}/bills", tags=["Bills"])
app.include_router(payments_router, prefix=f"{SOCIETY_PREFIX}/payments", tags=["Payments"])
app.include_router(expenses_router, prefix=f"{SOCIETY_PREFIX}/expenses", tags=["Expenses"])
app.include_router(reports_router, prefix=f"{SOCIETY_PREFIX}/reports", tags=["Reports"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
