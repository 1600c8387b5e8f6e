"""Device reputation - per-fingerprint trust built from login outcomes."""

import logging
from datetime import datetime, timezone
from typing import Optional

from riskgate.common.constants import ReputationConstants, StorageConstants
from riskgate.common.exceptions import StoreError
from riskgate.data.schemas.device import DeviceReputation
from riskgate.storage.base import KeyValueStore
from riskgate.storage.records import load_record, read_modify_write

logger = logging.getLogger(__name__)


def _clamp(score: float) -> float:
    return max(0.0, min(100.0, score))


def new_reputation(fingerprint: str, now: datetime) -> DeviceReputation:
    """Neutral record for a device seen for the first time."""
    return DeviceReputation(fingerprint=fingerprint, last_seen=now)


def apply_challenge(
    reputation: DeviceReputation, passed: bool, now: datetime
) -> DeviceReputation:
    delta = (
        ReputationConstants.CHALLENGE_PASS_DELTA
        if passed
        else ReputationConstants.CHALLENGE_FAIL_DELTA
    )
    return reputation.model_copy(
        update={
            "reputation_score": _clamp(reputation.reputation_score + delta),
            "challenge_passes": reputation.challenge_passes + (1 if passed else 0),
            "challenge_fails": reputation.challenge_fails + (0 if passed else 1),
            "last_seen": now,
        }
    )


def apply_login(
    reputation: DeviceReputation,
    success: bool,
    now: datetime,
    challenge_passed: Optional[bool] = None,
) -> DeviceReputation:
    """Fold one resolved login (and its challenge, if any) into a reputation.

    Args:
        reputation: Current record
        success: Whether credentials verified
        now: Time of the login
        challenge_passed: Challenge outcome, None when no challenge was taken

    Returns:
        New DeviceReputation; the input is not modified
    """
    delta = (
        ReputationConstants.SUCCESS_DELTA
        if success
        else ReputationConstants.FAILURE_DELTA
    )
    updated = reputation.model_copy(
        update={
            "reputation_score": _clamp(reputation.reputation_score + delta),
            "total_attempts": reputation.total_attempts + 1,
            "successful_attempts": reputation.successful_attempts + (1 if success else 0),
            "failed_attempts": reputation.failed_attempts + (0 if success else 1),
            "last_seen": now,
        }
    )
    if challenge_passed is not None:
        updated = apply_challenge(updated, challenge_passed, now)
    return updated


class DeviceReputationTracker:
    """Store-backed device reputations under device:<fingerprint>.

    Records never expire; a device that comes back after months keeps its
    history.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def key_for(fingerprint: str) -> str:
        return f"{StorageConstants.DEVICE_PREFIX}{fingerprint}"

    def get_reputation(self, fingerprint: str) -> Optional[DeviceReputation]:
        return load_record(self.store, self.key_for(fingerprint), DeviceReputation)

    def update_reputation(
        self,
        fingerprint: str,
        success: bool,
        challenge_passed: Optional[bool] = None,
        now: Optional[datetime] = None,
    ) -> DeviceReputation:
        now = now or datetime.now(timezone.utc)
        return read_modify_write(
            self.store,
            self.key_for(fingerprint),
            DeviceReputation,
            lambda: new_reputation(fingerprint, now),
            lambda rep: apply_login(rep, success, now, challenge_passed),
        )

    def record_challenge(
        self, fingerprint: str, passed: bool, now: Optional[datetime] = None
    ) -> DeviceReputation:
        """Apply a challenge outcome that is not tied to a resolved login."""
        now = now or datetime.now(timezone.utc)
        return read_modify_write(
            self.store,
            self.key_for(fingerprint),
            DeviceReputation,
            lambda: new_reputation(fingerprint, now),
            lambda rep: apply_challenge(rep, passed, now),
        )

    def get_risk_score(self, fingerprint: str) -> float:
        """100 - reputation; neutral 50 for unseen devices or when the store is down."""
        try:
            reputation = self.get_reputation(fingerprint)
        except StoreError as e:
            logger.warning(
                "Device reputation unavailable, using neutral risk",
                extra={"fingerprint": fingerprint, "error": e.message},
            )
            return 100.0 - ReputationConstants.NEUTRAL_SCORE

        if reputation is None:
            return 100.0 - ReputationConstants.NEUTRAL_SCORE
        return _clamp(100.0 - reputation.reputation_score)
