"""Analytics collector - daily aggregate metrics in the keyed store.

Every recorder is best effort: a store failure is logged and swallowed so
analytics can never fail a login.
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable, List, Optional, Tuple, Union

from riskgate.common.constants import AnalyticsConstants, StorageConstants
from riskgate.common.exceptions import StoreError
from riskgate.data.schemas.login_attempt import LoginAttempt
from riskgate.data.schemas.metrics import DailyMetrics, HourlyBucket, IPRisk
from riskgate.data.schemas.risk_factors import RiskFactors
from riskgate.storage.base import KeyValueStore
from riskgate.storage.records import load_record, read_modify_write

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _date_key(day: Union[date, str]) -> str:
    day_str = day.isoformat() if isinstance(day, date) else day
    return f"{StorageConstants.METRICS_PREFIX}{day_str}"


def _bump_hour(metrics: DailyMetrics, hour: int, attempts: int = 0, blocked: int = 0) -> None:
    bucket = metrics.hourly_attempts.get(hour, HourlyBucket())
    metrics.hourly_attempts[hour] = HourlyBucket(
        attempts=bucket.attempts + attempts,
        blocked=bucket.blocked + blocked,
    )


class AnalyticsCollector:
    """Records attempts, challenges and blocks into metrics:<YYYY-MM-DD>."""

    TTL_SECONDS = StorageConstants.METRICS_TTL_SECONDS

    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] = _utcnow):
        self.store = store
        self._clock = clock

    def _update(self, day: date, mutate: Callable[[DailyMetrics], DailyMetrics]) -> None:
        key = _date_key(day)
        try:
            read_modify_write(
                self.store,
                key,
                DailyMetrics,
                DailyMetrics,
                mutate,
                ttl_seconds=self.TTL_SECONDS,
            )
        except StoreError as e:
            logger.error(
                "Failed to record metrics",
                extra={"key": key, "error": e.message},
            )

    def record_attempt(self, attempt: LoginAttempt, factors: RiskFactors) -> None:
        """Count one assessment pass.

        The pending pass carries the risk-side counters; the resolved pass
        only adds the login outcome, so a logical attempt is counted once.
        """
        if attempt.is_resolved:
            def mutate(metrics: DailyMetrics) -> DailyMetrics:
                if attempt.success:
                    metrics.successful_logins += 1
                else:
                    metrics.failed_logins += 1
                return metrics
        else:
            def mutate(metrics: DailyMetrics) -> DailyMetrics:
                metrics.total_attempts += 1
                level = factors.level.value
                metrics.risk_score_distribution[level] = (
                    metrics.risk_score_distribution.get(level, 0) + 1
                )
                _bump_hour(metrics, attempt.hour, attempts=1)

                if factors.composite > AnalyticsConstants.TOP_RISK_IP_MIN_SCORE:
                    current = metrics.top_risk_ips.get(attempt.ip_address, IPRisk())
                    metrics.top_risk_ips[attempt.ip_address] = IPRisk(
                        score=current.score + factors.composite,
                        attempts=current.attempts + 1,
                    )
                return metrics

        self._update(attempt.timestamp.date(), mutate)

    def record_challenge_issued(self, ip_address: str, now: Optional[datetime] = None) -> None:
        def mutate(metrics: DailyMetrics) -> DailyMetrics:
            metrics.challenges_issued += 1
            return metrics

        now = now or self._clock()
        self._update(now.date(), mutate)
        logger.debug("Challenge issued", extra={"ip_address": ip_address})

    def record_challenge_completed(
        self, ip_address: str, success: bool, now: Optional[datetime] = None
    ) -> None:
        """Only passed challenges count as completions."""
        logger.debug(
            "Challenge completed",
            extra={"ip_address": ip_address, "success": success},
        )
        if not success:
            return

        def mutate(metrics: DailyMetrics) -> DailyMetrics:
            metrics.challenge_completions += 1
            return metrics

        now = now or self._clock()
        self._update(now.date(), mutate)

    def record_blocked_attempt(
        self, ip_address: str, reason: str, now: Optional[datetime] = None
    ) -> None:
        now = now or self._clock()

        def mutate(metrics: DailyMetrics) -> DailyMetrics:
            metrics.blocked_attempts += 1
            metrics.attack_types[reason] = metrics.attack_types.get(reason, 0) + 1
            _bump_hour(metrics, now.hour, blocked=1)
            return metrics

        self._update(now.date(), mutate)
        logger.warning(
            "Blocked login attempt",
            extra={"ip_address": ip_address, "reason": reason},
        )

    def get_metrics(self, day: Optional[Union[date, str]] = None) -> Optional[DailyMetrics]:
        """Metrics for a UTC date (today by default), None when nothing was recorded."""
        day = day or self._clock().date()
        return load_record(self.store, _date_key(day), DailyMetrics)

    def get_top_risk_ips(
        self,
        day: Optional[Union[date, str]] = None,
        limit: int = AnalyticsConstants.TOP_RISK_IP_LIMIT,
    ) -> List[Tuple[str, IPRisk]]:
        """IPs ordered by cumulative risk score, highest first."""
        metrics = self.get_metrics(day)
        if metrics is None:
            return []
        ranked = sorted(
            metrics.top_risk_ips.items(),
            key=lambda item: item[1].score,
            reverse=True,
        )
        return ranked[:limit]
