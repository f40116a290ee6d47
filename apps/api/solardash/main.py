from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from solardash.core.config import settings
from solardash.core.errors import (
    calculation_input_exception_handler,
    global_exception_handler,
    http_exception_handler,
)
from solardash.core.sentry import init_sentry
from solardash.middleware.security import (
    RequestBodySizeLimitMiddleware,
    SecurityHeadersMiddleware,
)
from solardash.modules.grid_connection.calculator import GridChargeInputError
from solardash.modules.grid_connection.router import router as grid_connection_router
from solardash.modules.profit_analysis.engine import AnalysisInputError
from solardash.modules.profit_analysis.router import router as profit_analysis_router

# ── Sentry: must be initialised BEFORE FastAPI app is created ─────────────────
init_sentry(settings.SENTRY_DSN, settings.SENTRY_ENVIRONMENT, settings.APP_VERSION)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Starting SolarDash API", env=settings.APP_ENV)
    yield
    logger.info("Shutting down SolarDash API")


_is_prod = settings.APP_ENV == "production"

app = FastAPI(
    title="SolarDash API",
    description="Profit and financing analysis for solar PV installation quotations.",
    version="0.1.0",
    docs_url=None if _is_prod else "/docs",
    redoc_url=None if _is_prod else "/redoc",
    openapi_url=None if _is_prod else "/openapi.json",
    lifespan=lifespan,
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(AnalysisInputError, calculation_input_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(GridChargeInputError, calculation_input_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
)
# Security middleware (added last = outermost = first to see requests)
app.add_middleware(
    RequestBodySizeLimitMiddleware,  # type: ignore[arg-type]
    max_bytes=settings.MAX_REQUEST_BODY_BYTES,
)
app.add_middleware(
    SecurityHeadersMiddleware,  # type: ignore[arg-type]
    is_production=_is_prod,
)


# ── X-API-Version response header ────────────────────────────────────────────


@app.middleware("http")
async def add_version_header(request: Request, call_next) -> Response:
    response = await call_next(request)
    response.headers["X-API-Version"] = "v1"
    return response


# ── Health check (root-level, not under /v1) ─────────────────────────────────


@app.get("/health")
async def health_check() -> dict:
    """Liveness check. The API has no backing services to probe."""
    return {"status": "healthy", "service": "solardash-api"}


# ── /v1 versioned router ──────────────────────────────────────────────────────

api_v1 = APIRouter(prefix="/v1")

api_v1.include_router(profit_analysis_router)
api_v1.include_router(grid_connection_router)

app.include_router(api_v1)
