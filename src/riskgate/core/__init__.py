"""Core module - shared enums."""

from riskgate.core.types import (
    RiskLevel,
    AssessmentPhase,
    ChallengeType,
    AuthMethod,
)

__all__ = [
    "RiskLevel",
    "AssessmentPhase",
    "ChallengeType",
    "AuthMethod",
]
