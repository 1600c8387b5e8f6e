"""LoginAttempt schema - the unit of work flowing through the pipeline."""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import Field, field_validator

from riskgate.core.types import AssessmentPhase, AuthMethod
from riskgate.data.schemas.base import CamelModel
from riskgate.data.schemas.location import Location


class LoginAttempt(CamelModel):
    """A single logical login attempt.

    Frozen once built. The post-authentication pass uses resolve() to get a
    new attempt carrying the real outcome and the RESOLVED phase; the
    attempt_id is shared by both passes.
    """
    attempt_id: str = Field(
        default_factory=lambda: f"att_{uuid4().hex[:12]}",
        description="Identifier shared by both assessment passes"
    )
    timestamp: datetime = Field(..., description="When the attempt was made (UTC)")
    ip_address: str = Field(..., description="Client IP address")
    success: bool = Field(default=False, description="Whether credentials verified")
    username: Optional[str] = Field(default=None, description="Submitted identity")
    user_id: Optional[str] = Field(default=None, description="Resolved account id")
    user_agent: str = Field(default="Unknown")
    location: Optional[Location] = Field(default=None)
    device_fingerprint: str = Field(..., description="Hashed device identifier")
    auth_method: AuthMethod = Field(default=AuthMethod.FORM)
    phase: AssessmentPhase = Field(default=AssessmentPhase.PENDING)

    model_config = {"frozen": True}

    @field_validator("timestamp")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def is_resolved(self) -> bool:
        return self.phase == AssessmentPhase.RESOLVED

    @property
    def hour(self) -> int:
        """UTC hour of day of the attempt."""
        return self.timestamp.hour

    def resolve(self, success: bool, user_id: Optional[str] = None) -> "LoginAttempt":
        """Return the same logical attempt with its final outcome."""
        return self.model_copy(
            update={
                "success": success,
                "user_id": user_id if user_id is not None else self.user_id,
                "phase": AssessmentPhase.RESOLVED,
            }
        )
