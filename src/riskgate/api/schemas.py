"""API Schemas - Request/Response models for the login gateway.

Wire names are camelCase; Python attributes stay snake_case.
"""

from typing import Optional

from pydantic import Field

from riskgate.core.types import ChallengeType
from riskgate.data.schemas.base import CamelModel


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class LoginRequest(CamelModel):
    """Request body for POST /api/login."""
    email: str = Field(..., min_length=1, description="Account email")
    password: str = Field(..., min_length=1, description="Account password")
    turnstile_token: Optional[str] = Field(
        default=None, description="Challenge token, when a challenge was solved"
    )


class VerifyChallengeRequest(CamelModel):
    """Request body for POST /api/verify-challenge."""
    turnstile_token: Optional[str] = None
    managed_response: Optional[str] = None

    @property
    def token(self) -> Optional[str]:
        return self.turnstile_token or self.managed_response


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class LoginResponse(CamelModel):
    """200 body of POST /api/login; unset optionals are omitted."""
    success: bool
    message: str
    token: Optional[str] = None
    require_challenge: Optional[bool] = None
    challenge_type: Optional[ChallengeType] = None
    challenge_difficulty: Optional[str] = None
    challenge_timeout: Optional[int] = None
    risk_score: Optional[float] = None


class BlockedResponse(CamelModel):
    """403 body when an attempt is blocked as critical risk."""
    message: str = "Access denied due to high risk"
    risk_score: float


class VerifyChallengeResponse(CamelModel):
    success: bool
    message: str


class TopRiskIP(CamelModel):
    """One row of GET /api/metrics/top-ips."""
    ip_address: str
    score: float
    attempts: int
    average_score: float


class ErrorResponse(CamelModel):
    """Error response body."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    request_id: Optional[str] = Field(
        default=None, description="Request ID for tracing"
    )
