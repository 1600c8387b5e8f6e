"""Challenge Router - maps a risk level to the challenge the caller must pass."""

from dataclasses import dataclass
from typing import Dict

from riskgate.core.types import ChallengeType, RiskLevel


@dataclass(frozen=True)
class ChallengeConfig:
    """Challenge presented to the client for one risk level."""
    risk_level: RiskLevel
    challenge_type: ChallengeType
    difficulty: str
    timeout: int  # seconds the client has to complete it

    def to_dict(self) -> dict:
        return {
            "riskLevel": self.risk_level.value,
            "challengeType": self.challenge_type.value,
            "difficulty": self.difficulty,
            "timeout": self.timeout,
        }


CHALLENGE_CONFIGS: Dict[RiskLevel, ChallengeConfig] = {
    RiskLevel.LOW: ChallengeConfig(RiskLevel.LOW, ChallengeType.TURNSTILE, "easy", 300),
    RiskLevel.MEDIUM: ChallengeConfig(RiskLevel.MEDIUM, ChallengeType.TURNSTILE, "medium", 600),
    RiskLevel.HIGH: ChallengeConfig(RiskLevel.HIGH, ChallengeType.MANAGED, "medium", 900),
    RiskLevel.CRITICAL: ChallengeConfig(RiskLevel.CRITICAL, ChallengeType.MANAGED, "hard", 1200),
}


class ChallengeRouter:
    """Stateless level -> challenge mapping.

    Low risk passes without a challenge; everything above it is challenged.
    Blocking critical attempts is the caller's decision, not the router's.
    """

    def should_require_challenge(self, level: RiskLevel) -> bool:
        return level != RiskLevel.LOW

    def get_challenge_type(self, level: RiskLevel) -> ChallengeType:
        return CHALLENGE_CONFIGS[level].challenge_type

    def get_challenge_for_risk(self, level: RiskLevel) -> ChallengeConfig:
        return CHALLENGE_CONFIGS[level]
