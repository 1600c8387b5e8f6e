"""Tests for the challenge verification client."""

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest

from riskgate.integrations.turnstile import ChallengeVerifier, VerificationResult


def _verifier(handler, secret="s3cret"):
    return ChallengeVerifier(secret=secret, transport=httpx.MockTransport(handler))


class TestChallengeVerifier:

    def test_successful_verification(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(
                200,
                json={"success": True, "hostname": "login.example.com", "challenge_ts": "2026-03-02T14:00:00Z"},
            )

        result = asyncio.run(_verifier(handler).verify("tok_123", remote_ip="203.0.113.10"))

        assert result.success is True
        assert result.hostname == "login.example.com"
        assert seen["url"] == "https://challenges.cloudflare.com/turnstile/v0/siteverify"
        assert seen["form"] == {
            "secret": ["s3cret"],
            "response": ["tok_123"],
            "remoteip": ["203.0.113.10"],
        }

    def test_remote_ip_is_optional(self):
        seen = {}

        def handler(request):
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"success": True})

        asyncio.run(_verifier(handler).verify("tok_123"))

        assert "remoteip" not in seen["form"]

    def test_rejected_token(self):
        def handler(request):
            return httpx.Response(200, json={"success": False, "error-codes": ["invalid-input-response"]})

        result = asyncio.run(_verifier(handler).verify("bad"))

        assert result.success is False
        assert result.error_codes == ["invalid-input-response"]

    def test_network_failure_fails_closed(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        result = asyncio.run(_verifier(handler).verify("tok_123"))

        assert result.success is False
        assert result.error_codes == ["network-error"]

    def test_timeout_fails_closed(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        result = asyncio.run(_verifier(handler).verify("tok_123"))

        assert result.error_codes == ["network-error"]

    @pytest.mark.parametrize("body", [b"<html>oops</html>", b"[1, 2]"])
    def test_malformed_reply_fails_closed(self, body):
        def handler(request):
            return httpx.Response(200, content=body)

        result = asyncio.run(_verifier(handler).verify("tok_123"))

        assert result.success is False
        assert result.error_codes == ["network-error"]

    def test_missing_secret(self):
        def handler(request):
            raise AssertionError("no call expected")

        result = asyncio.run(_verifier(handler, secret=None).verify("tok_123"))

        assert result.error_codes == ["missing-input-secret"]

    def test_result_serializes_hyphenated_codes(self):
        result = VerificationResult.failure("network-error")

        assert result.model_dump(by_alias=True)["error-codes"] == ["network-error"]
