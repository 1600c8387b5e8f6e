"""Identity boundary - credential verification and session issuance.

User storage and real session tokens belong to the host application; the
login flow only depends on the two protocols below. The in-memory and
store-backed defaults make the gateway runnable on its own.
"""

import logging
import secrets
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol, Tuple
from uuid import uuid4

import bcrypt

from riskgate.common.constants import StorageConstants
from riskgate.data.schemas.login_attempt import LoginAttempt
from riskgate.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


BCRYPT_ROUNDS = 12
MAX_BCRYPT_BYTES = 72  # bcrypt only reads the first 72 bytes


class CredentialVerifier(Protocol):
    def resolve_identity(self, email: str) -> Optional[str]:
        """Stable account id for an email, None when unknown."""
        ...

    def verify(self, email: str, password: str) -> bool:
        ...


class SessionIssuer(Protocol):
    def issue(self, identity: str, attempt: LoginAttempt) -> str:
        """Create a session for identity and return its bearer token."""
        ...


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_BCRYPT_BYTES]


class InMemoryCredentialVerifier:
    """Email -> (user id, bcrypt hash) table held in process memory."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds
        self._users: Dict[str, Tuple[str, bytes]] = {}
        self._lock = threading.Lock()
        # Checked against for unknown emails so they cost the same as known ones
        self._dummy_hash = bcrypt.hashpw(b"", bcrypt.gensalt(rounds=rounds))

    @staticmethod
    def _normalize(email: str) -> str:
        return email.strip().lower()

    def add_user(self, email: str, password: str, user_id: Optional[str] = None) -> str:
        user_id = user_id or f"usr_{uuid4().hex[:12]}"
        hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=self.rounds))
        with self._lock:
            self._users[self._normalize(email)] = (user_id, hashed)
        return user_id

    def resolve_identity(self, email: str) -> Optional[str]:
        record = self._users.get(self._normalize(email))
        return record[0] if record else None

    def verify(self, email: str, password: str) -> bool:
        record = self._users.get(self._normalize(email))
        if record is None:
            bcrypt.checkpw(_password_bytes(password), self._dummy_hash)
            return False
        _, hashed = record
        return bcrypt.checkpw(_password_bytes(password), hashed)


class StoreSessionIssuer:
    """Opaque random session tokens kept under session:<token> for 24 hours."""

    TTL_SECONDS = StorageConstants.SESSION_TTL_SECONDS

    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def key_for(token: str) -> str:
        return f"{StorageConstants.SESSION_PREFIX}{token}"

    def issue(self, identity: str, attempt: LoginAttempt) -> str:
        token = secrets.token_urlsafe(32)
        self.store.put(
            self.key_for(token),
            {
                "userId": identity,
                "attemptId": attempt.attempt_id,
                "ipAddress": attempt.ip_address,
                "issuedAt": datetime.now(timezone.utc).isoformat(),
            },
            self.TTL_SECONDS,
        )
        logger.info("Session issued", extra={"user_id": identity})
        return token

    def get_session(self, token: str) -> Optional[Dict[str, Any]]:
        return self.store.get(self.key_for(token))
