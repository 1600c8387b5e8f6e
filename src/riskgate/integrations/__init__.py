"""Integrations - third-party service clients."""

from riskgate.integrations.turnstile import ChallengeVerifier, VerificationResult

__all__ = ["ChallengeVerifier", "VerificationResult"]
