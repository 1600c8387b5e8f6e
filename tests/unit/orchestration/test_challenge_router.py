"""Tests for challenge routing."""

import pytest

from riskgate.core.types import ChallengeType, RiskLevel
from riskgate.orchestration.router import CHALLENGE_CONFIGS, ChallengeRouter


@pytest.fixture
def router():
    return ChallengeRouter()


class TestChallengeRouter:

    def test_low_risk_needs_no_challenge(self, router):
        assert router.should_require_challenge(RiskLevel.LOW) is False

    @pytest.mark.parametrize("level", [RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.CRITICAL])
    def test_elevated_risk_needs_challenge(self, router, level):
        assert router.should_require_challenge(level) is True

    @pytest.mark.parametrize(
        "level,expected",
        [
            (RiskLevel.LOW, ChallengeType.TURNSTILE),
            (RiskLevel.MEDIUM, ChallengeType.TURNSTILE),
            (RiskLevel.HIGH, ChallengeType.MANAGED),
            (RiskLevel.CRITICAL, ChallengeType.MANAGED),
        ],
    )
    def test_challenge_type(self, router, level, expected):
        assert router.get_challenge_type(level) == expected

    def test_challenge_configs(self, router):
        critical = router.get_challenge_for_risk(RiskLevel.CRITICAL)

        assert critical.difficulty == "hard"
        assert critical.timeout == 1200
        assert [CHALLENGE_CONFIGS[level].timeout for level in RiskLevel] == [300, 600, 900, 1200]
        assert critical.to_dict() == {
            "riskLevel": "critical",
            "challengeType": "managed",
            "difficulty": "hard",
            "timeout": 1200,
        }
