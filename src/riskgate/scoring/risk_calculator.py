"""Risk calculator - weighted composite of detector sub-scores."""

import logging
from typing import Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from riskgate.common.config.policy import LevelThresholds, RiskPolicy, RiskWeights
from riskgate.common.constants import RiskConstants
from riskgate.common.exceptions import ValidationError
from riskgate.core.types import RiskLevel
from riskgate.data.schemas.risk_factors import RiskFactors

logger = logging.getLogger(__name__)


def _clamp(score: float) -> float:
    return max(RiskConstants.SCORE_MIN, min(RiskConstants.SCORE_MAX, float(score)))


class RiskCalculator:
    """Combines five sub-scores into a composite and a RiskLevel.

    Pure given its weights and thresholds. Weights need not sum to 1; the
    composite is clamped either way.
    """

    def __init__(
        self,
        weights: Optional[RiskWeights] = None,
        thresholds: Optional[LevelThresholds] = None,
    ):
        self._weights = weights or RiskWeights()
        self._thresholds = thresholds or LevelThresholds()

    @classmethod
    def from_policy(cls, policy: RiskPolicy) -> "RiskCalculator":
        return cls(weights=policy.weights, thresholds=policy.thresholds)

    def calculate(
        self,
        brute_force: float,
        credential_stuffing: float,
        geo_velocity: float,
        anomaly: float,
        device_reputation: float,
    ) -> RiskFactors:
        subscores = {
            "brute_force": _clamp(brute_force),
            "credential_stuffing": _clamp(credential_stuffing),
            "geo_velocity": _clamp(geo_velocity),
            "anomaly": _clamp(anomaly),
            "device_reputation": _clamp(device_reputation),
        }
        weights = self._weights.model_dump()
        composite = _clamp(
            sum(subscores[name] * weights[name] for name in subscores)
        )

        return RiskFactors(
            **subscores,
            composite=composite,
            level=self.get_risk_level(composite),
        )

    def get_risk_level(self, score: float) -> RiskLevel:
        if score >= self._thresholds.critical:
            return RiskLevel.CRITICAL
        if score >= self._thresholds.high:
            return RiskLevel.HIGH
        if score >= self._thresholds.medium:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def update_weights(self, partial: Dict[str, float]) -> RiskWeights:
        """Merge partial weights into the current ones.

        Raises:
            ValidationError: Unknown detector name or negative weight
        """
        unknown = set(partial) - set(RiskWeights.model_fields)
        if unknown:
            raise ValidationError(
                f"Unknown detector weights: {', '.join(sorted(unknown))}",
                details={"field": "weights", "unknown": sorted(unknown)},
            )

        merged = {**self._weights.model_dump(), **partial}
        try:
            self._weights = RiskWeights.model_validate(merged)
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid detector weights",
                details={"field": "weights", "error_count": e.error_count()},
            ) from e

        logger.info("Risk weights updated", extra={"weights": merged})
        return self._weights

    def get_weights(self) -> Dict[str, float]:
        return self._weights.model_dump()

    @property
    def thresholds(self) -> LevelThresholds:
        return self._thresholds
