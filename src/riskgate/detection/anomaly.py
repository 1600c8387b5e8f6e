"""Behavioral anomaly detection against a per-identity baseline.

Answers "does this look like the usual sign-in for this account?" using
three coarse signals: location, hour of day and device. The baseline adapts
slowly (at most one fold per refresh period) so a single odd session cannot
rewrite the profile.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from riskgate.common.constants import DetectionConstants, StorageConstants
from riskgate.common.exceptions import StoreError
from riskgate.data.schemas.baseline import UserBaseline
from riskgate.data.schemas.login_attempt import LoginAttempt
from riskgate.detection.geo_velocity import is_new_location
from riskgate.storage.base import KeyValueStore
from riskgate.storage.records import load_record, save_record

logger = logging.getLogger(__name__)


REFRESH_PERIOD = timedelta(days=DetectionConstants.BASELINE_REFRESH_DAYS)


def score_against(baseline: UserBaseline, attempt: LoginAttempt) -> float:
    """Additive deviation score of attempt from baseline.

    An empty baseline gives 0: no history means no anomaly signal.
    """
    if baseline.is_empty:
        return 0.0

    score = 0
    if attempt.location is not None and baseline.typical_locations:
        if is_new_location(
            attempt.location,
            baseline.typical_locations,
            DetectionConstants.LOCATION_TOLERANCE_KM,
        ):
            score += DetectionConstants.ANOMALY_NEW_LOCATION_POINTS

    if attempt.hour not in baseline.typical_time_of_day:
        score += DetectionConstants.ANOMALY_UNUSUAL_HOUR_POINTS

    if attempt.device_fingerprint not in baseline.typical_devices:
        score += DetectionConstants.ANOMALY_NEW_DEVICE_POINTS

    return float(min(100, score))


def refresh_due(baseline: UserBaseline, now: datetime) -> bool:
    if baseline.last_updated is None:
        return True
    return now - baseline.last_updated > REFRESH_PERIOD


def fold_attempt(baseline: UserBaseline, attempt: LoginAttempt) -> UserBaseline:
    """New baseline with the attempt's location, hour and device folded in."""
    locations = list(baseline.typical_locations)
    if attempt.location is not None:
        locations.append(attempt.location)
        locations = locations[-DetectionConstants.BASELINE_MAX_LOCATIONS:]

    hours = sorted(set(baseline.typical_time_of_day) | {attempt.hour})

    devices = list(baseline.typical_devices)
    if attempt.device_fingerprint not in devices:
        devices.append(attempt.device_fingerprint)

    return UserBaseline(
        typical_locations=locations,
        typical_time_of_day=hours,
        typical_devices=devices,
        last_updated=attempt.timestamp,
    )


class AnomalyDetector:
    """Scores deviation from the identity's stored baseline.

    Baselines live in the keyed store under baseline:<identity> so every
    instance sees the same profile. Only resolved, successful attempts are
    folded in.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def key_for(identity: str) -> str:
        return f"{StorageConstants.BASELINE_PREFIX}{identity}"

    def get_baseline(self, identity: str) -> Optional[UserBaseline]:
        return load_record(self.store, self.key_for(identity), UserBaseline)

    def detect(self, attempt: LoginAttempt, identity: Optional[str] = None) -> float:
        if not identity:
            return 0.0

        key = self.key_for(identity)
        try:
            stored = load_record(self.store, key, UserBaseline)
        except StoreError as e:
            logger.warning(
                "Baseline unavailable, skipping anomaly signal",
                extra={"key": key, "error": e.message},
            )
            return 0.0

        baseline = stored if stored is not None else UserBaseline()
        score = score_against(baseline, attempt)

        updated = None
        if attempt.is_resolved and attempt.success and refresh_due(baseline, attempt.timestamp):
            updated = fold_attempt(baseline, attempt)
        elif stored is None:
            updated = baseline

        if updated is not None:
            try:
                save_record(self.store, key, updated)
            except StoreError as e:
                logger.warning(
                    "Baseline write failed",
                    extra={"key": key, "error": e.message},
                )

        return score
