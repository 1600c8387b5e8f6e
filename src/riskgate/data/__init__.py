"""Data layer - schemas for attempts, records and metrics."""

from riskgate.data.schemas import (
    Location,
    LoginAttempt,
    RiskFactors,
    DeviceReputation,
    UserBaseline,
    WindowEntry,
    DailyMetrics,
    LastLogin,
)

__all__ = [
    "Location",
    "LoginAttempt",
    "RiskFactors",
    "DeviceReputation",
    "UserBaseline",
    "WindowEntry",
    "DailyMetrics",
    "LastLogin",
]
