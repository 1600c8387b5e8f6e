"""Credential-stuffing detection - many identities tried from one IP."""

import logging
from datetime import timedelta

from riskgate.common.constants import DetectionConstants, StorageConstants
from riskgate.common.exceptions import StoreError
from riskgate.data.schemas.login_attempt import LoginAttempt
from riskgate.data.schemas.window import AttemptWindow, WindowEntry
from riskgate.storage.base import KeyValueStore
from riskgate.storage.records import load_record, read_modify_write

logger = logging.getLogger(__name__)


class CredentialStuffingDetector:
    """Scores the fan-out of identities attempted from a single source IP.

    Brute force is one identity from possibly many sources; stuffing is many
    identities from one source.
    """

    WINDOW_SECONDS = DetectionConstants.STUFFING_WINDOW_SECONDS
    TTL_SECONDS = WINDOW_SECONDS + StorageConstants.WINDOW_TTL_SLACK_SECONDS

    DISTINCT_USERS_THRESHOLD = DetectionConstants.STUFFING_DISTINCT_USERS_THRESHOLD
    FAILED_ATTEMPTS_THRESHOLD = (
        DetectionConstants.STUFFING_DISTINCT_USERS_THRESHOLD
        * DetectionConstants.STUFFING_ATTEMPTS_PER_USER_THRESHOLD
    )
    RAPID_WINDOW_SECONDS = DetectionConstants.STUFFING_RAPID_WINDOW_SECONDS
    RAPID_ATTEMPTS_THRESHOLD = DetectionConstants.STUFFING_RAPID_ATTEMPTS_THRESHOLD

    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def key_for(ip_address: str) -> str:
        return f"{StorageConstants.STUFFING_PREFIX}{ip_address}"

    def record_attempt(self, attempt: LoginAttempt) -> None:
        """Upsert the attempt into its IP's window. Call before detect()."""
        key = self.key_for(attempt.ip_address)
        entry = WindowEntry.from_attempt(attempt)
        try:
            read_modify_write(
                self.store,
                key,
                AttemptWindow,
                AttemptWindow,
                lambda w: w.pruned(attempt.timestamp, self.WINDOW_SECONDS).upsert(entry),
                ttl_seconds=self.TTL_SECONDS,
            )
        except StoreError as e:
            logger.warning(
                "Stuffing window unavailable, attempt not recorded",
                extra={"key": key, "error": e.message},
            )

    def detect(self, attempt: LoginAttempt) -> float:
        if not attempt.username:
            return 0.0

        key = self.key_for(attempt.ip_address)
        try:
            window = load_record(self.store, key, AttemptWindow) or AttemptWindow()
        except StoreError as e:
            logger.warning(
                "Stuffing window unavailable, scoring as empty",
                extra={"key": key, "error": e.message},
            )
            return 0.0

        return self.score_window(
            window.pruned(attempt.timestamp, self.WINDOW_SECONDS), attempt
        )

    @classmethod
    def score_window(cls, window: AttemptWindow, attempt: LoginAttempt) -> float:
        entries = window.entries
        score = 0

        distinct_users = {e.username for e in entries if e.username}
        if len(distinct_users) >= cls.DISTINCT_USERS_THRESHOLD:
            score += DetectionConstants.STUFFING_DISTINCT_USERS_POINTS

        if len(window.failures()) >= cls.FAILED_ATTEMPTS_THRESHOLD:
            score += DetectionConstants.STUFFING_FAILED_ATTEMPTS_POINTS

        rapid_cutoff = attempt.timestamp - timedelta(seconds=cls.RAPID_WINDOW_SECONDS)
        rapid = [e for e in entries if e.timestamp > rapid_cutoff]
        if len(rapid) > cls.RAPID_ATTEMPTS_THRESHOLD:
            score += DetectionConstants.STUFFING_RAPID_FIRE_POINTS

        return float(min(100, score))
