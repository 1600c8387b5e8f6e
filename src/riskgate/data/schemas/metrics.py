"""DailyMetrics schema - one aggregation bucket per UTC date."""

from typing import Dict

from pydantic import Field

from riskgate.core.types import RiskLevel
from riskgate.data.schemas.base import CamelModel


class HourlyBucket(CamelModel):
    attempts: int = 0
    blocked: int = 0


class IPRisk(CamelModel):
    score: float = 0.0
    attempts: int = 0

    @property
    def average_score(self) -> float:
        return self.score / self.attempts if self.attempts else 0.0


def _empty_distribution() -> Dict[str, int]:
    return {level.value: 0 for level in RiskLevel}


class DailyMetrics(CamelModel):
    """Running counters and histograms for one day."""
    total_attempts: int = 0
    successful_logins: int = 0
    failed_logins: int = 0
    blocked_attempts: int = 0
    challenges_issued: int = 0
    challenge_completions: int = 0
    risk_score_distribution: Dict[str, int] = Field(default_factory=_empty_distribution)
    attack_types: Dict[str, int] = Field(default_factory=dict)
    top_risk_ips: Dict[str, IPRisk] = Field(default_factory=dict, alias="topRiskIPs")
    hourly_attempts: Dict[int, HourlyBucket] = Field(default_factory=dict)
