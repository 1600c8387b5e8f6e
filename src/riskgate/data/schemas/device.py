"""DeviceReputation schema - one record per device fingerprint."""

from datetime import datetime

from pydantic import Field

from riskgate.common.constants import ReputationConstants
from riskgate.data.schemas.base import CamelModel


class DeviceReputation(CamelModel):
    """Running reputation of a device fingerprint (higher is better)."""
    fingerprint: str
    reputation_score: float = Field(
        default=ReputationConstants.NEUTRAL_SCORE, ge=0.0, le=100.0
    )
    total_attempts: int = Field(default=0, ge=0)
    successful_attempts: int = Field(default=0, ge=0)
    failed_attempts: int = Field(default=0, ge=0)
    challenge_passes: int = Field(default=0, ge=0)
    challenge_fails: int = Field(default=0, ge=0)
    last_seen: datetime
