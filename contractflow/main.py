import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from contractflow.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def _create_tables() -> None:
    """Create any missing table on the configured database."""
    import contractflow.models  # noqa: F401  (registers every mapper on Base)
    from contractflow.database import Base, engine

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready (%d tables).", len(Base.metadata.tables))


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: schema, then the alert scan job
    _create_tables()

    scheduler = None
    if settings.ALERT_SCAN_ENABLED:
        from contractflow.database import SessionLocal
        from contractflow.services.alert_scheduler import AlertScheduler

        scheduler = AlertScheduler(
            SessionLocal,
            interval_seconds=settings.ALERT_SCAN_INTERVAL_SECONDS,
            lookahead_days=settings.ALERT_LOOKAHEAD_DAYS,
            deduplicate=settings.ALERT_DEDUPLICATE,
        )
        scheduler.start()
    else:
        logger.info("Alert scan job disabled (ALERT_SCAN_ENABLED=false).")
    app.state.alert_scheduler = scheduler

    yield

    # Shutdown: let the current scan finish
    if scheduler is not None:
        await scheduler.stop()


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed requests are answered with 400 instead of FastAPI's 422."""
    logger.debug("%s %s rejected: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error."},
    )


@app.get("/api/health")
def health_check():
    return {"status": "ok", "app": settings.APP_NAME}


# ---------------------------------------------------------------------------
# Routers (all mounted under /api; each router declares its full paths)
# ---------------------------------------------------------------------------

from contractflow.routers import (  # noqa: E402
    alerts,
    attachments,
    contracts,
    deliverables,
    evidences,
    master_data,
    non_compliances,
    obligations,
    reports,
)

# Contract aggregate
app.include_router(contracts.router, prefix=settings.API_PREFIX)
app.include_router(obligations.router, prefix=settings.API_PREFIX)
app.include_router(deliverables.router, prefix=settings.API_PREFIX)
app.include_router(non_compliances.router, prefix=settings.API_PREFIX)

# Files
app.include_router(attachments.router, prefix=settings.API_PREFIX)
app.include_router(evidences.router, prefix=settings.API_PREFIX)

# Master data
app.include_router(master_data.router, prefix=settings.API_PREFIX)

# Reports (JSON + Excel export)
app.include_router(reports.router, prefix=settings.API_PREFIX)

# Alerts
app.include_router(alerts.router, prefix=settings.API_PREFIX)
