"""WindowEntry schema - one record in a brute-force or stuffing window."""

from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import Field

from riskgate.data.schemas.base import CamelModel
from riskgate.data.schemas.login_attempt import LoginAttempt


class WindowEntry(CamelModel):
    attempt_id: str
    timestamp: datetime
    ip_address: str
    username: Optional[str] = None
    success: Optional[bool] = Field(
        default=None, description="None while the attempt is pending"
    )

    @property
    def is_failure(self) -> bool:
        return self.success is False

    @classmethod
    def from_attempt(cls, attempt: LoginAttempt) -> "WindowEntry":
        return cls(
            attempt_id=attempt.attempt_id,
            timestamp=attempt.timestamp,
            ip_address=attempt.ip_address,
            username=attempt.username,
            success=attempt.success if attempt.is_resolved else None,
        )


class AttemptWindow(CamelModel):
    """Time-bounded log of recent attempts under one key, oldest first."""
    entries: List[WindowEntry] = Field(default_factory=list)

    def pruned(self, now: datetime, window_seconds: int) -> "AttemptWindow":
        cutoff = now - timedelta(seconds=window_seconds)
        return AttemptWindow(entries=[e for e in self.entries if e.timestamp > cutoff])

    def upsert(self, entry: WindowEntry) -> "AttemptWindow":
        """Replace the entry with the same attempt_id, or append."""
        entries = [e for e in self.entries if e.attempt_id != entry.attempt_id]
        entries.append(entry)
        entries.sort(key=lambda e: e.timestamp)
        return AttemptWindow(entries=entries)

    def failures(self) -> List[WindowEntry]:
        return [e for e in self.entries if e.is_failure]
