"""
In-memory registry of one-time handshake tokens.

Tokens back both OAuth state/nonce pairs and the anti-forgery token required by
order submission. Records live only in process memory and are lost on restart.
"""

import logging
import secrets
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from domain import HandshakePurpose, HandshakeStateRecord, OAuthProvider
from errors import ExpiredOrUnknownStateError, ProviderMismatchError

logger = logging.getLogger("food-orders")

DEFAULT_TTL_MS = 10 * 60 * 1000
MIN_TTL_MS = 60_000
TOKEN_BYTES = 16


def _now_ms() -> float:
    return time.time() * 1000


def _random_id() -> str:
    return secrets.token_hex(TOKEN_BYTES)


@dataclass(frozen=True)
class IssuedHandshake:
    token: str
    nonce: str


class HandshakeStateStore:
    def __init__(
        self,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Callable[[], float] = _now_ms,
    ) -> None:
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._records: Dict[str, HandshakeStateRecord] = {}
        self._lock = threading.Lock()

    @property
    def effective_ttl_ms(self) -> int:
        return max(MIN_TTL_MS, self.ttl_ms)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _is_expired(self, record: HandshakeStateRecord, now: float) -> bool:
        return now - record.created_at > self.effective_ttl_ms

    def issue(
        self,
        purpose: HandshakePurpose,
        provider: Optional[OAuthProvider] = None,
        redirect_target: Optional[str] = None,
    ) -> IssuedHandshake:
        token = _random_id()
        nonce = _random_id()
        record = HandshakeStateRecord(
            token=token,
            purpose=purpose,
            nonce=nonce,
            created_at=self._clock(),
            provider=provider,
            redirect_target=redirect_target,
        )
        with self._lock:
            self._records[token] = record
        return IssuedHandshake(token=token, nonce=nonce)

    def require(
        self,
        token: str,
        expected_provider: Optional[OAuthProvider] = None,
        expected_purpose: Optional[HandshakePurpose] = None,
    ) -> HandshakeStateRecord:
        with self._lock:
            record = self._records.pop(token, None)
        if record is None:
            raise ExpiredOrUnknownStateError()
        if self._is_expired(record, self._clock()):
            raise ExpiredOrUnknownStateError()
        if expected_provider is not None and record.provider != expected_provider:
            raise ProviderMismatchError()
        if expected_purpose is not None and record.purpose != expected_purpose:
            raise ExpiredOrUnknownStateError()
        return record

    def consume(
        self,
        token: str,
        expected_provider: Optional[OAuthProvider] = None,
        expected_purpose: Optional[HandshakePurpose] = None,
    ) -> Optional[HandshakeStateRecord]:
        try:
            return self.require(token, expected_provider, expected_purpose)
        except ProviderMismatchError:
            logger.info("Handshake token rejected: provider mismatch")
            return None
        except ExpiredOrUnknownStateError:
            return None

    def sweep(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [
                token
                for token, record in self._records.items()
                if self._is_expired(record, now)
            ]
            for token in expired:
                del self._records[token]
        return len(expired)
