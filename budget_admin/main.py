import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from budget_admin.config import get_settings
from budget_admin.exceptions import (
    BudgetAdminError,
    DestroyGuardError,
    FeatureDisabled,
    RecordNotFound,
    ValidationFailed,
    WinnersCalculationUnavailable,
)
from budget_admin.schemas.common import ErrorResponse

settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: make sure the tables exist on development databases
    from budget_admin import models  # noqa: F401
    from budget_admin.database import Base, engine

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready (%s)", settings.DATABASE_URL.split("://")[0])
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# No calculator ships with this service; deployments register their own.
app.state.winner_calculator = None


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

_STATUS_BY_ERROR: list[tuple[type[BudgetAdminError], int]] = [
    (FeatureDisabled, status.HTTP_403_FORBIDDEN),
    (RecordNotFound, status.HTTP_404_NOT_FOUND),
    (ValidationFailed, 422),
    (DestroyGuardError, status.HTTP_409_CONFLICT),
    (WinnersCalculationUnavailable, status.HTTP_409_CONFLICT),
]


@app.exception_handler(BudgetAdminError)
async def budget_admin_error_handler(request: Request, exc: BudgetAdminError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in _STATUS_BY_ERROR if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    body = ErrorResponse(
        code=exc.code,
        message=exc.message,
        errors=exc.errors if isinstance(exc, ValidationFailed) else None,
    )
    log = logger.warning if status_code < 500 else logger.error
    log("%s %s -> %d %s", request.method, request.url.path, status_code, exc.code)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.get("/api/health")
def health_check():
    return {"status": "ok", "app": settings.APP_NAME}


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

from budget_admin.routers import budgets  # noqa: E402

app.include_router(
    budgets.router,
    prefix=f"{settings.API_PREFIX}/admin/budgets",
)
