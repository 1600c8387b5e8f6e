"""Risk policy - detector weights and level thresholds loaded from YAML."""

from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, Field, model_validator

from riskgate.common.constants import RiskConstants


class RiskWeights(BaseModel):
    """Weight of each detector in the composite score."""
    brute_force: float = Field(default=RiskConstants.WEIGHT_BRUTE_FORCE, ge=0.0)
    credential_stuffing: float = Field(default=RiskConstants.WEIGHT_CREDENTIAL_STUFFING, ge=0.0)
    geo_velocity: float = Field(default=RiskConstants.WEIGHT_GEO_VELOCITY, ge=0.0)
    anomaly: float = Field(default=RiskConstants.WEIGHT_ANOMALY, ge=0.0)
    device_reputation: float = Field(default=RiskConstants.WEIGHT_DEVICE_REPUTATION, ge=0.0)

    model_config = {"frozen": True}

    @property
    def total(self) -> float:
        return (
            self.brute_force
            + self.credential_stuffing
            + self.geo_velocity
            + self.anomaly
            + self.device_reputation
        )


class LevelThresholds(BaseModel):
    """Lower bound (inclusive) of each non-low risk level."""
    medium: float = Field(default=RiskConstants.LEVEL_MEDIUM, ge=0.0, le=100.0)
    high: float = Field(default=RiskConstants.LEVEL_HIGH, ge=0.0, le=100.0)
    critical: float = Field(default=RiskConstants.LEVEL_CRITICAL, ge=0.0, le=100.0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_ordering(self) -> "LevelThresholds":
        if not (self.medium < self.high < self.critical):
            raise ValueError(
                "level thresholds must satisfy medium < high < critical"
            )
        return self


class PolicyMetadata(BaseModel):
    version: str = "1.0.0"
    description: str = ""


class RiskPolicy(BaseModel):
    """Validated contents of risk_policy.yaml."""
    metadata: PolicyMetadata = Field(default_factory=PolicyMetadata)
    weights: RiskWeights = Field(default_factory=RiskWeights)
    thresholds: LevelThresholds = Field(default_factory=LevelThresholds)

    @property
    def version(self) -> str:
        return self.metadata.version


def load_policy(policy_file: Union[str, Path]) -> RiskPolicy:
    """Load and validate a risk policy from a YAML file.

    Args:
        policy_file: Path to the policy YAML

    Returns:
        Validated RiskPolicy

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the contents are invalid
    """
    path = Path(policy_file)
    if not path.exists():
        raise FileNotFoundError(f"Policy file not found: {path}")

    with open(path, "r") as f:
        raw_config = yaml.safe_load(f) or {}

    return RiskPolicy.model_validate(raw_config)
