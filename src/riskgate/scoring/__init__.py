"""Scoring - device reputation and composite risk."""

from riskgate.scoring.device_reputation import (
    DeviceReputationTracker,
    new_reputation,
    apply_login,
    apply_challenge,
)
from riskgate.scoring.risk_calculator import RiskCalculator

__all__ = [
    "DeviceReputationTracker",
    "new_reputation",
    "apply_login",
    "apply_challenge",
    "RiskCalculator",
]
