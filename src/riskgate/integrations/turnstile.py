"""Challenge verification client for Cloudflare Turnstile siteverify.

Fails closed: any transport problem, timeout or unparseable reply is
reported as an unsuccessful verification with the "network-error" code.
"""

import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from riskgate.common.config.settings import TURNSTILE_VERIFY_URL

logger = logging.getLogger(__name__)


NETWORK_ERROR = "network-error"
MISSING_INPUT_SECRET = "missing-input-secret"
MISSING_INPUT_RESPONSE = "missing-input-response"


class VerificationResult(BaseModel):
    """Siteverify reply."""
    success: bool = False
    error_codes: List[str] = Field(default_factory=list, alias="error-codes")
    hostname: Optional[str] = None
    challenge_ts: Optional[str] = None
    action: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def failure(cls, *codes: str) -> "VerificationResult":
        return cls(success=False, error_codes=list(codes))


class ChallengeVerifier:
    """Async siteverify client.

    Args:
        secret: Site secret key
        verify_url: Siteverify endpoint
        timeout: Seconds before the call is abandoned
        transport: Optional httpx transport, used by tests
    """

    def __init__(
        self,
        secret: Optional[str],
        verify_url: str = TURNSTILE_VERIFY_URL,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.secret = secret
        self.verify_url = verify_url
        self.timeout = timeout
        self._transport = transport

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> VerificationResult:
        if not self.secret:
            logger.error("Challenge verification attempted without a secret")
            return VerificationResult.failure(MISSING_INPUT_SECRET)
        if not token:
            return VerificationResult.failure(MISSING_INPUT_RESPONSE)

        form = {"secret": self.secret, "response": token}
        if remote_ip:
            form["remoteip"] = remote_ip

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.verify_url, data=form)
                payload = response.json()
            result = VerificationResult.model_validate(payload)
        except (httpx.HTTPError, ValueError, PydanticValidationError) as e:
            logger.warning(
                "Challenge verification call failed",
                extra={"error_type": type(e).__name__, "remote_ip": remote_ip},
            )
            return VerificationResult.failure(NETWORK_ERROR)

        if not result.success:
            logger.info(
                "Challenge token rejected",
                extra={"error_codes": result.error_codes, "remote_ip": remote_ip},
            )
        return result
