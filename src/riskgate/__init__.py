"""RiskGate - adaptive authentication risk engine."""

__version__ = "0.1.0"

from riskgate.core.types import RiskLevel, AssessmentPhase, ChallengeType
from riskgate.data.schemas import LoginAttempt, Location, RiskFactors
from riskgate.orchestration import RiskEngine, ChallengeRouter

__all__ = [
    "RiskLevel",
    "AssessmentPhase",
    "ChallengeType",
    "LoginAttempt",
    "Location",
    "RiskFactors",
    "RiskEngine",
    "ChallengeRouter",
]
