"""Brute-force detection - failures per identity (or IP) in a sliding window."""

import logging

from riskgate.common.constants import DetectionConstants, StorageConstants
from riskgate.common.exceptions import StoreError
from riskgate.data.schemas.login_attempt import LoginAttempt
from riskgate.data.schemas.window import AttemptWindow, WindowEntry
from riskgate.storage.base import KeyValueStore
from riskgate.storage.records import read_modify_write

logger = logging.getLogger(__name__)


class BruteForceDetector:
    """Counts failed attempts against one account, or one IP when anonymous.

    Keying prefers the username: an attacker rotating usernames is tracked
    per IP, a distributed attack on one account is tracked per account.
    """

    WINDOW_SECONDS = DetectionConstants.BRUTE_FORCE_WINDOW_SECONDS
    POINTS_PER_FAILURE = DetectionConstants.BRUTE_FORCE_POINTS_PER_FAILURE
    TTL_SECONDS = WINDOW_SECONDS + StorageConstants.WINDOW_TTL_SLACK_SECONDS

    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def key_for(attempt: LoginAttempt) -> str:
        if attempt.username:
            return f"{StorageConstants.BRUTE_FORCE_PREFIX}{attempt.username}"
        return f"{StorageConstants.BRUTE_FORCE_PREFIX}ip:{attempt.ip_address}"

    def detect(self, attempt: LoginAttempt) -> float:
        """Record the attempt in its window and score the window.

        Args:
            attempt: Current login attempt (pending or resolved)

        Returns:
            min(100, 20 x failures in the window); 0 if the store is down
        """
        key = self.key_for(attempt)
        entry = WindowEntry.from_attempt(attempt)

        try:
            window = read_modify_write(
                self.store,
                key,
                AttemptWindow,
                AttemptWindow,
                lambda w: w.pruned(attempt.timestamp, self.WINDOW_SECONDS).upsert(entry),
                ttl_seconds=self.TTL_SECONDS,
            )
        except StoreError as e:
            logger.warning(
                "Brute-force window unavailable, scoring as empty",
                extra={"key": key, "error": e.message},
            )
            return 0.0

        return self.score_window(window)

    @classmethod
    def score_window(cls, window: AttemptWindow) -> float:
        return float(min(100, cls.POINTS_PER_FAILURE * len(window.failures())))

    def reset(self, key: str) -> None:
        """Clear a window after a confirmed non-malicious resolution."""
        try:
            self.store.delete(key)
        except StoreError as e:
            logger.warning("Brute-force reset failed", extra={"key": key, "error": e.message})

    def reset_for(self, attempt: LoginAttempt) -> None:
        self.reset(self.key_for(attempt))
