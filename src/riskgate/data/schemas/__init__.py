"""Data schemas - canonical definitions."""

from riskgate.data.schemas.base import CamelModel
from riskgate.data.schemas.location import Location
from riskgate.data.schemas.login_attempt import LoginAttempt
from riskgate.data.schemas.risk_factors import RiskFactors
from riskgate.data.schemas.device import DeviceReputation
from riskgate.data.schemas.baseline import UserBaseline
from riskgate.data.schemas.window import WindowEntry, AttemptWindow
from riskgate.data.schemas.metrics import DailyMetrics, HourlyBucket, IPRisk
from riskgate.data.schemas.last_login import LastLogin

__all__ = [
    "CamelModel",
    "Location",
    "LoginAttempt",
    "RiskFactors",
    "DeviceReputation",
    "UserBaseline",
    "WindowEntry",
    "AttemptWindow",
    "DailyMetrics",
    "HourlyBucket",
    "IPRisk",
    "LastLogin",
]
