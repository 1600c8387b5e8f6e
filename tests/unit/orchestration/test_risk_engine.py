"""Tests for the risk engine facade."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from riskgate.common.config.policy import RiskWeights
from riskgate.core.types import RiskLevel
from riskgate.data.schemas.last_login import LastLogin
from riskgate.orchestration.risk_engine import RiskEngine
from riskgate.scoring.risk_calculator import RiskCalculator
from tests.fixtures.login_attempts import BASE_TIME, LONDON, NEW_YORK, make_attempt


@pytest.fixture
def engine(store):
    return RiskEngine(store)


class TestAssessRisk:

    def test_clean_first_attempt(self, engine):
        factors = engine.assess_risk(make_attempt(), identity="usr_1")

        assert factors.brute_force == 0.0
        assert factors.credential_stuffing == 0.0
        assert factors.geo_velocity == 0.0
        assert factors.anomaly == 0.0
        assert factors.device_reputation == 50.0
        assert factors.composite == pytest.approx(5.0)
        assert factors.level == RiskLevel.LOW

    def test_pending_pass_does_not_touch_reputation(self, engine):
        engine.assess_risk(make_attempt(device_fingerprint="fp_x"))

        assert engine.device_reputation.get_reputation("fp_x") is None

    def test_resolved_pass_updates_reputation(self, engine):
        factors = engine.assess_risk(make_attempt(device_fingerprint="fp_x", success=True))

        assert factors.device_reputation == 48.0
        assert engine.device_reputation.get_reputation("fp_x").successful_attempts == 1

    def test_resolved_pass_applies_challenge_outcome(self, engine):
        engine.assess_risk(
            make_attempt(device_fingerprint="fp_x", success=True), challenge_passed=True
        )

        assert engine.device_reputation.get_reputation("fp_x").reputation_score == 57.0

    def test_geo_velocity_from_last_login(self, engine):
        last_known = LastLogin(location=NEW_YORK, last_login=BASE_TIME - timedelta(hours=1))

        factors = engine.assess_risk(make_attempt(location=LONDON), last_known=last_known)

        assert factors.geo_velocity == 100.0

    def test_inverted_last_login_scores_zero(self, engine):
        last_known = LastLogin(location=NEW_YORK, last_login=BASE_TIME + timedelta(hours=1))

        assert engine.assess_risk(make_attempt(location=LONDON), last_known=last_known).geo_velocity == 0.0

    def test_two_passes_count_failure_once(self, engine):
        pending = make_attempt(attempt_id="att_1")
        engine.assess_risk(pending)
        resolved = engine.assess_risk(pending.resolve(success=False))

        assert resolved.brute_force == 20.0

    def test_assessment_is_reported_to_analytics(self, store):
        analytics = MagicMock()
        engine = RiskEngine(store, analytics=analytics)
        attempt = make_attempt()

        factors = engine.assess_risk(attempt)

        analytics.record_attempt.assert_called_once_with(attempt, factors)

    def test_custom_calculator(self, store):
        calculator = RiskCalculator(weights=RiskWeights(
            brute_force=0, credential_stuffing=0, geo_velocity=0, anomaly=0, device_reputation=1
        ))
        engine = RiskEngine(store, calculator=calculator)

        assert engine.assess_risk(make_attempt()).composite == 50.0


class TestEngineHelpers:

    def test_reset_brute_force(self, engine):
        for i in range(3):
            engine.assess_risk(make_attempt(timestamp=BASE_TIME + timedelta(seconds=i), success=False))

        engine.reset_brute_force(make_attempt())

        assert engine.assess_risk(make_attempt(timestamp=BASE_TIME + timedelta(seconds=5))).brute_force == 0.0

    def test_records_forwarded_to_analytics(self, store):
        analytics = MagicMock()
        engine = RiskEngine(store, analytics=analytics)

        engine.record_challenge_issued("1.2.3.4")
        engine.record_challenge_completed("1.2.3.4", True)
        engine.record_blocked_attempt("1.2.3.4", "brute_force")

        analytics.record_challenge_issued.assert_called_once_with("1.2.3.4")
        analytics.record_challenge_completed.assert_called_once_with("1.2.3.4", True)
        analytics.record_blocked_attempt.assert_called_once_with("1.2.3.4", "brute_force")
        assert engine.analytics is analytics
        assert engine.challenge_router is not None
