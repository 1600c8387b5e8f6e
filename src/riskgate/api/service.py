"""Login Service - the risk-gated login flow behind the HTTP surface.

Flow for POST /api/login:
1. Build the pending attempt from request context and assess it
2. Critical risk is blocked outright (403)
3. Any other non-low risk needs a verified challenge token
4. Credentials are verified and the resolved attempt is assessed again
5. Success resets the brute-force window, records the login and issues a session

Every outcome is returned as a status code plus a response model; the
gateway only serializes.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel

from riskgate.api.identity import CredentialVerifier, SessionIssuer
from riskgate.api.schemas import (
    BlockedResponse,
    LoginRequest,
    LoginResponse,
    TopRiskIP,
    VerifyChallengeRequest,
    VerifyChallengeResponse,
)
from riskgate.common.constants import AnalyticsConstants, StorageConstants
from riskgate.common.exceptions import StoreError
from riskgate.core.types import RiskLevel
from riskgate.data.schemas.last_login import LastLogin
from riskgate.data.schemas.location import Location
from riskgate.data.schemas.login_attempt import LoginAttempt
from riskgate.data.schemas.metrics import DailyMetrics
from riskgate.integrations.turnstile import ChallengeVerifier
from riskgate.orchestration.risk_engine import RiskEngine
from riskgate.storage.base import KeyValueStore
from riskgate.storage.records import load_record, save_record

logger = logging.getLogger(__name__)


@dataclass
class ServiceResult:
    """HTTP status and body for one request."""
    status_code: int
    body: BaseModel


@dataclass
class RequestContext:
    """What the gateway extracted from the HTTP request."""
    ip_address: str
    user_agent: str
    device_fingerprint: str
    location: Optional[Location] = None


class LoginService:
    """Service for risk-gated login and challenge verification.

    Error Handling:
    - Detector and analytics store failures degrade inside the engine
    - A failed last-login read is treated as no history
    - Challenge verification fails closed
    """

    def __init__(
        self,
        store: KeyValueStore,
        engine: RiskEngine,
        verifier: ChallengeVerifier,
        credentials: CredentialVerifier,
        sessions: SessionIssuer,
    ):
        self.store = store
        self.engine = engine
        self.verifier = verifier
        self.credentials = credentials
        self.sessions = sessions

    # -------------------------------------------------------------------------
    # Login
    # -------------------------------------------------------------------------

    async def login(self, request: LoginRequest, context: RequestContext) -> ServiceResult:
        identity = self.credentials.resolve_identity(request.email)
        last_known = self._load_last_login(identity)

        attempt = LoginAttempt(
            timestamp=datetime.now(timezone.utc),
            ip_address=context.ip_address,
            username=request.email,
            user_id=identity,
            user_agent=context.user_agent,
            location=context.location,
            device_fingerprint=context.device_fingerprint,
        )

        factors = self.engine.assess_risk(attempt, identity=identity, last_known=last_known)
        router = self.engine.challenge_router

        if factors.level == RiskLevel.CRITICAL:
            self.engine.record_blocked_attempt(attempt.ip_address, factors.dominant_signal())
            return ServiceResult(403, BlockedResponse(risk_score=factors.composite))

        challenge_passed: Optional[bool] = None
        if router.should_require_challenge(factors.level):
            challenge = router.get_challenge_for_risk(factors.level)

            if not request.turnstile_token:
                self.engine.record_challenge_issued(attempt.ip_address)
                return ServiceResult(
                    200,
                    LoginResponse(
                        success=False,
                        message="Challenge required",
                        require_challenge=True,
                        challenge_type=challenge.challenge_type,
                        challenge_difficulty=challenge.difficulty,
                        challenge_timeout=challenge.timeout,
                        risk_score=factors.composite,
                    ),
                )

            result = await self.verifier.verify(request.turnstile_token, attempt.ip_address)
            self.engine.record_challenge_completed(attempt.ip_address, result.success)

            if not result.success:
                self.engine.assess_risk(
                    attempt.resolve(success=False),
                    identity=identity,
                    last_known=last_known,
                    challenge_passed=False,
                )
                return ServiceResult(
                    200,
                    LoginResponse(
                        success=False,
                        message="Challenge failed",
                        require_challenge=True,
                        challenge_type=challenge.challenge_type,
                        challenge_difficulty=challenge.difficulty,
                        challenge_timeout=challenge.timeout,
                    ),
                )
            challenge_passed = True

        if not self.credentials.verify(request.email, request.password):
            self.engine.assess_risk(
                attempt.resolve(success=False),
                identity=identity,
                last_known=last_known,
                challenge_passed=challenge_passed,
            )
            logger.info(
                "Login rejected: invalid credentials",
                extra={"attempt_id": attempt.attempt_id, "ip_address": attempt.ip_address},
            )
            return ServiceResult(
                401, LoginResponse(success=False, message="Invalid credentials")
            )

        resolved = attempt.resolve(success=True, user_id=identity)
        final = self.engine.assess_risk(
            resolved,
            identity=identity,
            last_known=last_known,
            challenge_passed=challenge_passed,
        )
        self.engine.reset_brute_force(resolved)
        self._save_last_login(identity, resolved)
        token = self.sessions.issue(identity, resolved)

        return ServiceResult(
            200,
            LoginResponse(
                success=True,
                message="Login successful",
                token=token,
                risk_score=final.composite,
            ),
        )

    def _load_last_login(self, identity: Optional[str]) -> Optional[LastLogin]:
        if not identity:
            return None
        try:
            return load_record(self.store, self._last_login_key(identity), LastLogin)
        except StoreError as e:
            logger.warning(
                "Last login unavailable, skipping geo-velocity",
                extra={"user_id": identity, "error": e.message},
            )
            return None

    def _save_last_login(self, identity: str, attempt: LoginAttempt) -> None:
        record = LastLogin(location=attempt.location, last_login=attempt.timestamp)
        try:
            save_record(
                self.store,
                self._last_login_key(identity),
                record,
                StorageConstants.LAST_LOGIN_TTL_SECONDS,
            )
        except StoreError as e:
            logger.warning(
                "Failed to record last login",
                extra={"user_id": identity, "error": e.message},
            )

    @staticmethod
    def _last_login_key(identity: str) -> str:
        return f"{StorageConstants.LAST_LOGIN_PREFIX}{identity}"

    # -------------------------------------------------------------------------
    # Challenge verification and metrics
    # -------------------------------------------------------------------------

    async def verify_challenge(
        self, request: VerifyChallengeRequest, context: RequestContext
    ) -> ServiceResult:
        token = request.token
        if not token:
            return ServiceResult(
                400,
                VerifyChallengeResponse(success=False, message="No challenge response provided"),
            )

        result = await self.verifier.verify(token, context.ip_address)
        self.engine.record_challenge_completed(context.ip_address, result.success)

        try:
            self.engine.device_reputation.record_challenge(
                context.device_fingerprint, result.success
            )
        except StoreError as e:
            logger.warning(
                "Failed to record challenge outcome on device",
                extra={"fingerprint": context.device_fingerprint, "error": e.message},
            )

        if result.success:
            return ServiceResult(
                200, VerifyChallengeResponse(success=True, message="Challenge verified")
            )
        return ServiceResult(
            200, VerifyChallengeResponse(success=False, message="Challenge verification failed")
        )

    def get_metrics(self, day: Optional[str] = None) -> Optional[DailyMetrics]:
        return self.engine.analytics.get_metrics(day)

    def get_top_risk_ips(
        self,
        day: Optional[str] = None,
        limit: int = AnalyticsConstants.TOP_RISK_IP_LIMIT,
    ) -> List[TopRiskIP]:
        return [
            TopRiskIP(
                ip_address=ip,
                score=risk.score,
                attempts=risk.attempts,
                average_score=risk.average_score,
            )
            for ip, risk in self.engine.analytics.get_top_risk_ips(day, limit)
        ]
