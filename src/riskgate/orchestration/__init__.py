"""Orchestration - risk engine and challenge routing."""

from riskgate.orchestration.router import ChallengeRouter, ChallengeConfig, CHALLENGE_CONFIGS
from riskgate.orchestration.risk_engine import RiskEngine

__all__ = [
    "ChallengeRouter",
    "ChallengeConfig",
    "CHALLENGE_CONFIGS",
    "RiskEngine",
]
