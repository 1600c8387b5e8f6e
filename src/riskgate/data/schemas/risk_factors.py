"""RiskFactors schema - result of one risk assessment."""

from typing import Dict

from pydantic import Field

from riskgate.core.types import RiskLevel
from riskgate.data.schemas.base import CamelModel


class RiskFactors(CamelModel):
    """Detector sub-scores, composite score and level.

    Produced fresh per assessment and never mutated.
    """
    brute_force: float = Field(..., ge=0.0, le=100.0)
    credential_stuffing: float = Field(..., ge=0.0, le=100.0)
    geo_velocity: float = Field(..., ge=0.0, le=100.0)
    anomaly: float = Field(..., ge=0.0, le=100.0)
    device_reputation: float = Field(..., ge=0.0, le=100.0)
    composite: float = Field(..., ge=0.0, le=100.0)
    level: RiskLevel

    model_config = {"frozen": True}

    def subscores(self) -> Dict[str, float]:
        return {
            "brute_force": self.brute_force,
            "credential_stuffing": self.credential_stuffing,
            "geo_velocity": self.geo_velocity,
            "anomaly": self.anomaly,
            "device_reputation": self.device_reputation,
        }

    def dominant_signal(self) -> str:
        """Name of the highest sub-score; first declared wins ties."""
        scores = self.subscores()
        return max(scores, key=lambda name: scores[name])
