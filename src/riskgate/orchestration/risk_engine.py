"""Risk Engine - runs every detector for an attempt and produces RiskFactors.

Execution model:
1. Brute-force and credential-stuffing windows are updated and scored
2. Geo-velocity is computed against the last known login
3. Behavioral anomaly is scored (the baseline may fold on resolved success)
4. Device reputation is read (pending) or updated (resolved)
5. The calculator combines the sub-scores; analytics records the result

Detectors run sequentially in a fixed order. Each owns its store keys, so
ordering never changes a score.
"""

import logging
from typing import Optional

from riskgate.analytics.collector import AnalyticsCollector
from riskgate.common.exceptions import StoreError
from riskgate.data.schemas.last_login import LastLogin
from riskgate.data.schemas.login_attempt import LoginAttempt
from riskgate.data.schemas.risk_factors import RiskFactors
from riskgate.detection.anomaly import AnomalyDetector
from riskgate.detection.brute_force import BruteForceDetector
from riskgate.detection.credential_stuffing import CredentialStuffingDetector
from riskgate.detection.geo_velocity import GeoVelocityScorer
from riskgate.orchestration.router import ChallengeRouter
from riskgate.scoring.device_reputation import DeviceReputationTracker
from riskgate.scoring.risk_calculator import RiskCalculator
from riskgate.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class RiskEngine:
    """Facade over the detectors, calculator, router and analytics.

    Collaborators are injectable for testing; defaults are built on the
    shared store.
    """

    def __init__(
        self,
        store: KeyValueStore,
        calculator: Optional[RiskCalculator] = None,
        analytics: Optional[AnalyticsCollector] = None,
        challenge_router: Optional[ChallengeRouter] = None,
        brute_force: Optional[BruteForceDetector] = None,
        credential_stuffing: Optional[CredentialStuffingDetector] = None,
        anomaly: Optional[AnomalyDetector] = None,
        device_reputation: Optional[DeviceReputationTracker] = None,
    ):
        self.store = store
        self.calculator = calculator or RiskCalculator()
        self._analytics = analytics or AnalyticsCollector(store)
        self._challenge_router = challenge_router or ChallengeRouter()
        self.brute_force = brute_force or BruteForceDetector(store)
        self.credential_stuffing = credential_stuffing or CredentialStuffingDetector(store)
        self.anomaly = anomaly or AnomalyDetector(store)
        self.device_reputation = device_reputation or DeviceReputationTracker(store)

    @property
    def challenge_router(self) -> ChallengeRouter:
        return self._challenge_router

    @property
    def analytics(self) -> AnalyticsCollector:
        return self._analytics

    def assess_risk(
        self,
        attempt: LoginAttempt,
        identity: Optional[str] = None,
        last_known: Optional[LastLogin] = None,
        challenge_passed: Optional[bool] = None,
    ) -> RiskFactors:
        """Assess one pass of a login attempt.

        Args:
            attempt: The attempt; its phase selects pending or resolved handling
            identity: Stable account identity for the behavioral baseline
            last_known: Previous successful login, for geo-velocity
            challenge_passed: Challenge outcome for this attempt, if one was taken

        Returns:
            RiskFactors for this pass
        """
        brute_force_score = self.brute_force.detect(attempt)

        self.credential_stuffing.record_attempt(attempt)
        stuffing_score = self.credential_stuffing.detect(attempt)

        geo_score = self._geo_velocity(attempt, last_known)

        anomaly_score = self.anomaly.detect(attempt, identity)

        device_score = self._device_risk(attempt, challenge_passed)

        factors = self.calculator.calculate(
            brute_force=brute_force_score,
            credential_stuffing=stuffing_score,
            geo_velocity=geo_score,
            anomaly=anomaly_score,
            device_reputation=device_score,
        )

        self._analytics.record_attempt(attempt, factors)

        logger.info(
            "Risk assessed",
            extra={
                "attempt_id": attempt.attempt_id,
                "phase": attempt.phase.value,
                "composite": factors.composite,
                "level": factors.level.value,
            },
        )
        return factors

    def _geo_velocity(
        self, attempt: LoginAttempt, last_known: Optional[LastLogin]
    ) -> float:
        if last_known is None or last_known.location is None:
            return 0.0

        hours_elapsed = (
            attempt.timestamp - last_known.last_login
        ).total_seconds() / 3600.0
        return GeoVelocityScorer.score(
            attempt.location, last_known.location, hours_elapsed
        )

    def _device_risk(
        self, attempt: LoginAttempt, challenge_passed: Optional[bool]
    ) -> float:
        if not attempt.is_resolved:
            return self.device_reputation.get_risk_score(attempt.device_fingerprint)

        try:
            reputation = self.device_reputation.update_reputation(
                attempt.device_fingerprint,
                attempt.success,
                challenge_passed=challenge_passed,
                now=attempt.timestamp,
            )
        except StoreError as e:
            logger.warning(
                "Device reputation update failed, using neutral risk",
                extra={"fingerprint": attempt.device_fingerprint, "error": e.message},
            )
            return self.device_reputation.get_risk_score(attempt.device_fingerprint)

        return 100.0 - reputation.reputation_score

    def record_challenge_issued(self, ip_address: str) -> None:
        self._analytics.record_challenge_issued(ip_address)

    def record_challenge_completed(self, ip_address: str, success: bool) -> None:
        self._analytics.record_challenge_completed(ip_address, success)

    def record_blocked_attempt(self, ip_address: str, reason: str) -> None:
        self._analytics.record_blocked_attempt(ip_address, reason)

    def reset_brute_force(self, attempt: LoginAttempt) -> None:
        self.brute_force.reset_for(attempt)

