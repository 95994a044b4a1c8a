"""
Verification Service - Main Application
========================================

FastAPI application for order proof verification and nullifier tracking.

Version: 1.0.0
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from services.verification import __version__
from services.verification.routes import admin, ledger, verification
from shared.config import settings
from shared.logging import get_logger, setup_logging
from shared.models.common import ErrorResponse, HealthResponse
from shared.zk import (
    AdminRoleError,
    CurveArithmeticError,
    InvalidProofError,
    NullifierReusedError,
    ProofValidationError,
    VerificationError,
    VerifyingKeyError,
    get_verification_service,
)


# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="verification",
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "verification_service_starting",
        environment=settings.environment.value,
        port=settings.ports.verification,
    )

    # Startup
    try:
        service = get_verification_service()
        logger.info(
            "verifying_key_loaded",
            provisional=service.key_store.provisional,
            public_inputs=service.key_store.public_input_count,
            ledger=service.ledger.health_check().get("backend"),
        )
    except Exception as e:
        logger.error("startup_failed", error=str(e))
        raise

    yield

    # Shutdown
    logger.info("verification_service_shutting_down")
    get_verification_service().ledger.close()


# Create FastAPI application
app = FastAPI(
    title="Shadowpool Verification Service",
    description="Groth16 order proof verification with at-most-once nullifier consumption",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Returns health status of the verifier and its replay ledger.
    """
    verifier_health = get_verification_service().health_check()
    components: dict[str, dict[str, Any]] = {
        "ledger": verifier_health.pop("ledger"),
        "verifier": verifier_health,
    }

    all_healthy = all(c.get("status") == "healthy" for c in components.values())

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        service="verification",
        version=__version__,
        components=components,
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Shadowpool Verification Service",
        "version": __version__,
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    verification.router,
    prefix="/api/v1/verify",
    tags=["Verification"],
)

app.include_router(
    ledger.router,
    prefix="/api/v1/ledger",
    tags=["Replay Ledger"],
)

app.include_router(
    admin.router,
    prefix="/api/v1/admin",
    tags=["Administration"],
)


# ============================================================================
# Error Handlers
# ============================================================================


def error_response(status_code: int, error: str, error_code: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            error_code=error_code,
            status_code=status_code,
        ).model_dump(mode="json"),
    )


def verification_status(exc: VerificationError) -> int:
    """Map a rejected verification to its HTTP status."""
    if isinstance(exc, ProofValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NullifierReusedError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, InvalidProofError):
        return 422
    return status.HTTP_400_BAD_REQUEST


@app.exception_handler(VerificationError)
async def verification_exception_handler(request: Request, exc: VerificationError) -> JSONResponse:
    """Handle rejected proofs."""
    status_code = verification_status(exc)
    logger.info(
        "verification_rejected",
        error_code=exc.code,
        status_code=status_code,
        path=request.url.path,
    )
    return error_response(status_code, str(exc), exc.code)


@app.exception_handler(AdminRoleError)
async def admin_exception_handler(request: Request, exc: AdminRoleError) -> JSONResponse:
    """Handle administrative calls from non-administrators."""
    return error_response(status.HTTP_403_FORBIDDEN, str(exc), "not_admin")


@app.exception_handler(VerifyingKeyError)
async def verifying_key_exception_handler(
    request: Request, exc: VerifyingKeyError
) -> JSONResponse:
    """Handle verifying keys that do not fit the circuit."""
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc), "invalid_verifying_key")


@app.exception_handler(CurveArithmeticError)
async def curve_exception_handler(request: Request, exc: CurveArithmeticError) -> JSONResponse:
    """Handle points rejected by the curve backend."""
    logger.error(
        "curve_arithmetic_fault",
        error=str(exc),
        path=request.url.path,
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Curve arithmetic fault",
        "curve_arithmetic_error",
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request bodies that do not decode into a proof."""
    logger.warning("request_validation_failed", errors=len(exc.errors()), path=request.url.path)
    return error_response(status.HTTP_400_BAD_REQUEST, "Malformed request body", "validation_error")


@app.exception_handler(ValueError)
async def value_exception_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Handle invalid arguments."""
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc), "invalid_argument")


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    response = error_response(exc.status_code, exc.detail)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.verification.main:app",
        host="0.0.0.0",
        port=settings.ports.verification,
        reload=settings.is_development,
        log_level=settings.log_level.value.lower(),
    )
