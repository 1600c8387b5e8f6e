"""API Gateway - FastAPI application for the risk-gated login surface."""

import logging, os, threading
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from riskgate.api.context import client_ip, device_fingerprint, location_from_headers
from riskgate.api.identity import InMemoryCredentialVerifier, StoreSessionIssuer
from riskgate.api.schemas import (
    BlockedResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    VerifyChallengeRequest,
    VerifyChallengeResponse,
)
from riskgate.api.service import LoginService, RequestContext, ServiceResult
from riskgate.common.config import RiskPolicy, get_config, load_policy
from riskgate.common.exceptions import ValidationError
from riskgate.common.logging import configure_logging
from riskgate.integrations.turnstile import ChallengeVerifier
from riskgate.orchestration.risk_engine import RiskEngine
from riskgate.scoring.risk_calculator import RiskCalculator
from riskgate.storage import build_store

logger = logging.getLogger("riskgate_api")


def build_service() -> LoginService:
    """Wire a LoginService from the global configuration."""
    config = get_config()
    configure_logging(config.log_level.value)

    try:
        policy = load_policy(config.policy_file)
    except FileNotFoundError:
        logger.warning(
            "Risk policy file not found, using default weights",
            extra={"policy_file": str(config.policy_file)},
        )
        policy = RiskPolicy()

    store = build_store(config)
    engine = RiskEngine(store, calculator=RiskCalculator.from_policy(policy))
    verifier = ChallengeVerifier(
        secret=config.turnstile_secret,
        verify_url=config.turnstile_verify_url,
        timeout=config.challenge_verify_timeout_seconds,
    )
    logger.info(
        "Login service wired",
        extra={"store_backend": config.store_backend.value, "policy_version": policy.version},
    )
    return LoginService(
        store=store,
        engine=engine,
        verifier=verifier,
        credentials=InMemoryCredentialVerifier(),
        sessions=StoreSessionIssuer(store),
    )


class ServiceManager:
    """Thread-safe service singleton manager."""

    _instance: Optional[LoginService] = None
    _lock = threading.Lock()
    _initialized = False

    @classmethod
    def get_service(cls) -> LoginService:
        """Get or create the login service instance (thread-safe)."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = build_service()
                    cls._initialized = True
                    logger.info("LoginService initialized")
        return cls._instance

    @classmethod
    def set_service(cls, service: LoginService) -> None:
        """Install a pre-built service (host applications, tests)."""
        with cls._lock:
            cls._instance = service
            cls._initialized = True

    @classmethod
    def shutdown(cls) -> None:
        """Shutdown the service and release resources."""
        with cls._lock:
            if cls._instance is not None:
                cls._instance = None
                cls._initialized = False
                logger.info("LoginService shutdown complete")


def get_service() -> LoginService:
    """Get the login service instance."""
    return ServiceManager.get_service()


# =============================================================================
# CORS CONFIGURATION
# =============================================================================

def get_cors_origins() -> List[str]:
    """Get allowed CORS origins from environment.

    In production, set RISKGATE_CORS_ORIGINS environment variable
    to a comma-separated list of allowed origins.

    Example: RISKGATE_CORS_ORIGINS="https://app.example.com,https://admin.example.com"
    """
    origins_env = os.environ.get("RISKGATE_CORS_ORIGINS", "")

    if origins_env:
        return [origin.strip() for origin in origins_env.split(",") if origin.strip()]

    if os.environ.get("RISKGATE_ENVIRONMENT", "development") == "production":
        logger.warning(
            "RISKGATE_CORS_ORIGINS not set in production. "
            "CORS will be disabled. Set RISKGATE_CORS_ORIGINS for cross-origin access."
        )
        return []

    logger.warning("Running in development mode with permissive CORS (allow_origins=['*'])")
    return ["*"]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("RiskGate API Gateway starting up...")
    get_service()  # Pre-initialize service
    logger.info("RiskGate API Gateway ready")

    yield

    logger.info("RiskGate API Gateway shutting down...")
    ServiceManager.shutdown()
    logger.info("RiskGate API Gateway shutdown complete")


environment = os.environ.get("RISKGATE_ENVIRONMENT", "development")
enable_docs_default = "false" if environment == "production" else "true"
enable_docs = os.environ.get("RISKGATE_ENABLE_DOCS", enable_docs_default).lower() == "true"

app = FastAPI(
    title="RiskGate API Gateway",
    description="Adaptive authentication risk scoring for login flows.",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if enable_docs else None,
    redoc_url="/redoc" if enable_docs else None,
)


cors_origins = get_cors_origins()
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["POST", "GET"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

def _error_response(status_code: int, error: str, message: str, request_id: Optional[str]) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            message=message,
            request_id=request_id,
        ).model_dump(by_alias=True),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or incomplete request bodies are a 400, not a 422."""
    request_id = getattr(request.state, "request_id", None)
    logger.warning(
        "Malformed request",
        extra={"request_id": request_id, "error_count": len(exc.errors())},
    )
    return _error_response(400, "invalid_request", "Request contains invalid or missing fields", request_id)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle validation errors."""
    request_id = getattr(request.state, "request_id", None)
    logger.warning(
        "Validation error",
        extra={"request_id": request_id, "error": exc.message}
    )
    return _error_response(400, "validation_error", exc.message, request_id)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors.

    Logs full exception for debugging but returns sanitized message to client.
    """
    request_id = getattr(request.state, "request_id", None)
    logger.exception(
        "Unexpected error",
        extra={"request_id": request_id, "error_type": type(exc).__name__}
    )
    return _error_response(500, "internal_error", "An unexpected error occurred", request_id)


# =============================================================================
# MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add request ID to each request for tracing."""
    request_id = f"req_{uuid4().hex[:12]}"
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# =============================================================================
# ENDPOINTS
# =============================================================================

def _request_context(request: Request) -> RequestContext:
    ip_address = client_ip(request)
    user_agent = request.headers.get("user-agent", "Unknown")
    return RequestContext(
        ip_address=ip_address,
        user_agent=user_agent,
        device_fingerprint=device_fingerprint(user_agent, ip_address),
        location=location_from_headers(request.headers),
    )


def _to_response(result: ServiceResult) -> JSONResponse:
    return JSONResponse(
        status_code=result.status_code,
        content=result.body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


@app.post(
    "/api/login",
    responses={
        200: {"description": "Logged in, or a challenge is required", "model": LoginResponse},
        400: {"description": "Invalid request", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": LoginResponse},
        403: {"description": "Blocked as critical risk", "model": BlockedResponse},
        500: {"description": "Internal server error", "model": ErrorResponse},
    },
    summary="Risk-gated login",
)
async def login(body: LoginRequest, request: Request) -> JSONResponse:
    """Assess the attempt, demand a challenge when needed, then log in."""
    context = _request_context(request)
    logger.info(
        "Login request",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "ip_address": context.ip_address,
        },
    )
    result = await get_service().login(body, context)
    return _to_response(result)


@app.post(
    "/api/verify-challenge",
    responses={
        200: {"description": "Verification outcome", "model": VerifyChallengeResponse},
        400: {"description": "No challenge response provided", "model": VerifyChallengeResponse},
    },
    summary="Verify a challenge token",
)
async def verify_challenge(body: VerifyChallengeRequest, request: Request) -> JSONResponse:
    result = await get_service().verify_challenge(body, _request_context(request))
    return _to_response(result)


@app.get("/api/metrics", summary="Daily login metrics")
async def metrics(
    date: Optional[str] = Query(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$"),
) -> dict:
    """Metrics for a UTC date (today by default); {} when none recorded."""
    daily = get_service().get_metrics(date)
    if daily is None:
        return {}
    return daily.model_dump(mode="json", by_alias=True)


@app.get("/api/metrics/top-ips", summary="Highest-risk IPs for a day")
async def top_risk_ips(
    date: Optional[str] = Query(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$"),
    limit: int = Query(default=10, ge=1, le=100),
) -> List[dict]:
    """IPs ordered by cumulative risk score; [] when none recorded."""
    return [
        row.model_dump(mode="json", by_alias=True)
        for row in get_service().get_top_risk_ips(date, limit)
    ]


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy", "service": "riskgate-gateway"}


@app.get("/ready")
async def readiness_check() -> dict:
    """Readiness check endpoint.

    Returns 503 until the service singleton is initialized.
    """
    if not ServiceManager._initialized:
        raise HTTPException(status_code=503, detail="not_ready")
    return {"status": "ready", "service": "riskgate-gateway"}
