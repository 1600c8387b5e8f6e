"""Tests for the composite risk calculator."""

from itertools import product

import pytest

from riskgate.common.config.policy import RiskPolicy, RiskWeights
from riskgate.common.exceptions import ValidationError
from riskgate.core.types import RiskLevel
from riskgate.scoring.risk_calculator import RiskCalculator


def _uniform(calculator, score):
    return calculator.calculate(
        brute_force=score,
        credential_stuffing=score,
        geo_velocity=score,
        anomaly=score,
        device_reputation=score,
    )


class TestRiskLevels:

    @pytest.mark.parametrize(
        "score,level",
        [
            (0.0, RiskLevel.LOW),
            (29.9, RiskLevel.LOW),
            (30.0, RiskLevel.MEDIUM),
            (59.9, RiskLevel.MEDIUM),
            (60.0, RiskLevel.HIGH),
            (84.9, RiskLevel.HIGH),
            (85.0, RiskLevel.CRITICAL),
            (100.0, RiskLevel.CRITICAL),
        ],
    )
    def test_level_boundaries(self, score, level):
        assert RiskCalculator().get_risk_level(score) == level

    def test_levels_are_ordered(self):
        assert RiskLevel.LOW < RiskLevel.MEDIUM < RiskLevel.HIGH < RiskLevel.CRITICAL
        assert RiskLevel.CRITICAL >= RiskLevel.HIGH
        assert not RiskLevel.LOW > RiskLevel.MEDIUM


class TestCalculate:

    def test_default_weights(self):
        factors = RiskCalculator().calculate(
            brute_force=100,
            credential_stuffing=0,
            geo_velocity=0,
            anomaly=0,
            device_reputation=50,
        )

        assert factors.composite == pytest.approx(35.0)
        assert factors.level == RiskLevel.MEDIUM

    def test_uniform_scores_pass_through(self):
        factors = _uniform(RiskCalculator(), 70)

        assert factors.composite == pytest.approx(70.0)
        assert factors.level == RiskLevel.HIGH

    def test_subscores_are_clamped(self):
        factors = RiskCalculator().calculate(
            brute_force=250,
            credential_stuffing=-10,
            geo_velocity=0,
            anomaly=0,
            device_reputation=0,
        )

        assert factors.brute_force == 100.0
        assert factors.credential_stuffing == 0.0
        assert factors.composite == pytest.approx(30.0)

    def test_composite_clamped_when_weights_exceed_one(self):
        calculator = RiskCalculator(weights=RiskWeights(brute_force=2.0))

        assert _uniform(calculator, 100).composite == 100.0

    def test_from_policy(self):
        policy = RiskPolicy.model_validate({"weights": {"anomaly": 0.6}})
        calculator = RiskCalculator.from_policy(policy)

        assert calculator.get_weights()["anomaly"] == 0.6

    def test_dominant_signal(self):
        factors = RiskCalculator().calculate(
            brute_force=10,
            credential_stuffing=90,
            geo_velocity=20,
            anomaly=0,
            device_reputation=50,
        )

        assert factors.dominant_signal() == "credential_stuffing"

    def test_same_inputs_same_factors(self):
        calculator = RiskCalculator(weights=RiskWeights(anomaly=0.4, device_reputation=0.0))
        scores = dict(
            brute_force=40,
            credential_stuffing=30,
            geo_velocity=80,
            anomaly=55,
            device_reputation=48,
        )

        assert calculator.calculate(**scores) == calculator.calculate(**scores)


WEIGHT_SETS = [
    RiskWeights(),
    RiskWeights(brute_force=1.0, credential_stuffing=0.0, geo_velocity=0.0, anomaly=0.0, device_reputation=0.0),
    RiskWeights(brute_force=0.2, credential_stuffing=0.2, geo_velocity=0.2, anomaly=0.2, device_reputation=0.2),
    RiskWeights(brute_force=0.05, credential_stuffing=0.05, geo_velocity=0.1, anomaly=0.6, device_reputation=0.2),
    RiskWeights(brute_force=0.0, credential_stuffing=0.5, geo_velocity=0.0, anomaly=0.0, device_reputation=0.5),
]


class TestCompositeBounds:

    @pytest.mark.parametrize("weights", WEIGHT_SETS)
    def test_composite_within_range_for_extreme_subscores(self, weights):
        calculator = RiskCalculator(weights=weights)

        for combo in product((0.0, 100.0), repeat=5):
            factors = calculator.calculate(*combo)
            expected = sum(s * w for s, w in zip(combo, weights.model_dump().values()))

            assert 0.0 <= factors.composite <= 100.0
            assert factors.composite == pytest.approx(expected)

    @pytest.mark.parametrize("weights", WEIGHT_SETS)
    def test_out_of_range_inputs_stay_bounded(self, weights):
        calculator = RiskCalculator(weights=weights)

        high = calculator.calculate(500, 101, 1e6, 250, 100)
        low = calculator.calculate(-5, -100, 0, -1e6, 0)

        assert high.composite == pytest.approx(100.0)
        assert low.composite == 0.0


class TestWeights:

    def test_update_weights_merges(self):
        calculator = RiskCalculator()
        calculator.update_weights({"anomaly": 0.5})

        weights = calculator.get_weights()
        assert weights["anomaly"] == 0.5
        assert weights["brute_force"] == 0.30

    def test_get_weights_returns_copy(self):
        calculator = RiskCalculator()
        weights = calculator.get_weights()
        weights["anomaly"] = 99.0

        assert calculator.get_weights()["anomaly"] == 0.15

    def test_unknown_detector_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            RiskCalculator().update_weights({"captcha": 0.5})

        assert exc_info.value.details["unknown"] == ["captcha"]

    def test_negative_weight_rejected(self):
        calculator = RiskCalculator()
        with pytest.raises(ValidationError):
            calculator.update_weights({"anomaly": -1.0})

        assert calculator.get_weights()["anomaly"] == 0.15
