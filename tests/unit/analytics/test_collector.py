"""Tests for daily analytics aggregation."""

from datetime import date, datetime, timezone
from unittest.mock import MagicMock

import pytest

from riskgate.analytics.collector import AnalyticsCollector
from riskgate.common.exceptions import StoreError
from riskgate.core.types import RiskLevel
from riskgate.scoring.risk_calculator import RiskCalculator
from tests.fixtures.login_attempts import BASE_TIME, make_attempt


NOW = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def collector(store):
    return AnalyticsCollector(store, clock=lambda: NOW)


def _factors(score):
    return RiskCalculator().calculate(
        brute_force=score,
        credential_stuffing=score,
        geo_velocity=score,
        anomaly=score,
        device_reputation=score,
    )


class TestRecordAttempt:

    def test_pending_pass_counts_attempt(self, collector):
        collector.record_attempt(make_attempt(), _factors(10))

        metrics = collector.get_metrics(BASE_TIME.date())
        assert metrics.total_attempts == 1
        assert metrics.risk_score_distribution[RiskLevel.LOW.value] == 1
        assert metrics.hourly_attempts[14].attempts == 1
        assert metrics.top_risk_ips == {}

    def test_resolved_pass_counts_outcome_only(self, collector):
        attempt = make_attempt()
        collector.record_attempt(attempt, _factors(10))
        collector.record_attempt(attempt.resolve(success=True), _factors(10))
        collector.record_attempt(make_attempt(success=False), _factors(10))

        metrics = collector.get_metrics(BASE_TIME.date())
        assert metrics.total_attempts == 1
        assert metrics.successful_logins == 1
        assert metrics.failed_logins == 1

    def test_top_risk_ips_above_threshold(self, collector):
        collector.record_attempt(make_attempt(ip_address="10.0.0.1"), _factors(40))
        collector.record_attempt(make_attempt(ip_address="10.0.0.1"), _factors(60))
        collector.record_attempt(make_attempt(ip_address="10.0.0.2"), _factors(20))
        collector.record_attempt(make_attempt(ip_address="10.0.0.3"), _factors(90))

        metrics = collector.get_metrics(BASE_TIME.date())
        assert set(metrics.top_risk_ips) == {"10.0.0.1", "10.0.0.3"}
        assert metrics.top_risk_ips["10.0.0.1"].attempts == 2
        assert metrics.top_risk_ips["10.0.0.1"].average_score == pytest.approx(50.0)

        ranked = collector.get_top_risk_ips(BASE_TIME.date(), limit=1)
        assert [ip for ip, _ in ranked] == ["10.0.0.1"]

    def test_stored_under_date_with_ttl(self, collector, store):
        collector.record_attempt(make_attempt(), _factors(10))

        assert store.list("metrics:") == ["metrics:2026-03-02"]


class TestChallengesAndBlocks:

    def test_challenge_counters(self, collector):
        collector.record_challenge_issued("10.0.0.1")
        collector.record_challenge_issued("10.0.0.1")
        collector.record_challenge_completed("10.0.0.1", True)
        collector.record_challenge_completed("10.0.0.1", False)

        metrics = collector.get_metrics()
        assert metrics.challenges_issued == 2
        assert metrics.challenge_completions == 1

    def test_blocked_attempts(self, collector):
        collector.record_blocked_attempt("10.0.0.1", "brute_force")
        collector.record_blocked_attempt("10.0.0.2", "brute_force")
        collector.record_blocked_attempt("10.0.0.3", "credential_stuffing")

        metrics = collector.get_metrics(date(2026, 3, 2))
        assert metrics.blocked_attempts == 3
        assert metrics.attack_types == {"brute_force": 2, "credential_stuffing": 1}
        assert metrics.hourly_attempts[9].blocked == 3

    def test_metrics_by_date_string(self, collector):
        collector.record_challenge_issued("10.0.0.1")

        assert collector.get_metrics("2026-03-02").challenges_issued == 1
        assert collector.get_metrics("2026-03-01") is None
        assert collector.get_top_risk_ips("2026-03-01") == []


class TestDegradation:

    def test_store_failure_is_swallowed(self):
        broken = MagicMock()
        broken.get.side_effect = StoreError("down")
        collector = AnalyticsCollector(broken)

        collector.record_attempt(make_attempt(), _factors(50))
        collector.record_challenge_issued("10.0.0.1")
        collector.record_blocked_attempt("10.0.0.1", "anomaly")

        broken.put.assert_not_called()
