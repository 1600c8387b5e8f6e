"""API module - HTTP surface and login flow."""

from riskgate.api.schemas import (
    LoginRequest,
    VerifyChallengeRequest,
    LoginResponse,
    BlockedResponse,
    VerifyChallengeResponse,
    ErrorResponse,
)
from riskgate.api.service import LoginService, RequestContext, ServiceResult
from riskgate.api.identity import (
    CredentialVerifier,
    SessionIssuer,
    InMemoryCredentialVerifier,
    StoreSessionIssuer,
)

__all__ = [
    "LoginRequest",
    "VerifyChallengeRequest",
    "LoginResponse",
    "BlockedResponse",
    "VerifyChallengeResponse",
    "ErrorResponse",
    "LoginService",
    "RequestContext",
    "ServiceResult",
    "CredentialVerifier",
    "SessionIssuer",
    "InMemoryCredentialVerifier",
    "StoreSessionIssuer",
]
