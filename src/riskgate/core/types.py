"""Core types and enums."""

from enum import Enum


class RiskLevel(str, Enum):
    """Risk levels, ordered low < medium < high < critical."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_LEVEL_RANK = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.CRITICAL: 3,
}


class AssessmentPhase(str, Enum):
    """Where a login attempt is in the two-pass assessment.

    PENDING: credentials not yet verified, outcome unknown.
    RESOLVED: credentials verified (or rejected), outcome known.
    """
    PENDING = "pending"
    RESOLVED = "resolved"


class ChallengeType(str, Enum):
    """Kinds of challenge the login flow can demand."""
    TURNSTILE = "turnstile"
    MANAGED = "managed"


class AuthMethod(str, Enum):
    """How the login attempt was authenticated."""
    FORM = "form"
    API_KEY = "api_key"
    SESSION = "session"

