"""
In-memory nonce registry.

Holds at most one pending sign-in challenge per canonical wallet address.
Challenges expire lazily: an expired entry is dropped the next time it is
looked up, so no background task is required. A process restart simply
invalidates every pending challenge.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from app.core.config import Settings
from app.services.wallet import build_challenge, generate_nonce, normalize_address

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300


@dataclass(frozen=True)
class Challenge:
    address: str
    text: str
    issued_at: float


class InMemoryNonceRegistry:
    """Address-keyed challenge store guarded by a single lock."""

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._challenges: Dict[str, Challenge] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._challenges)

    def _is_expired(self, challenge: Challenge, now: float) -> bool:
        return now - challenge.issued_at > self.ttl_seconds

    def issue(self, address: str) -> Challenge:
        canonical = normalize_address(address)
        challenge = Challenge(
            address=canonical,
            text=build_challenge(generate_nonce()),
            issued_at=self._clock(),
        )
        with self._lock:
            # supersedes any challenge still pending for this address
            self._challenges[canonical] = challenge
        logger.info("issued nonce for %s", canonical)
        return challenge

    def consume(self, address: str) -> Optional[str]:
        """Return the pending challenge text, or None if absent or expired.

        The entry is left in place: only finalize() removes a live challenge,
        so a rejected signature can be retried until the challenge expires.
        """
        canonical = normalize_address(address)
        with self._lock:
            challenge = self._challenges.get(canonical)
            if challenge is None:
                return None
            if self._is_expired(challenge, self._clock()):
                del self._challenges[canonical]
                logger.info("nonce for %s expired", canonical)
                return None
            return challenge.text

    def finalize(self, address: str, text: str) -> bool:
        """Delete the challenge for address if it still holds text."""
        canonical = normalize_address(address)
        with self._lock:
            challenge = self._challenges.get(canonical)
            if challenge is None or challenge.text != text:
                return False
            del self._challenges[canonical]
            return True

    def sweep(self) -> int:
        """Drop every expired challenge. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [
                address
                for address, challenge in self._challenges.items()
                if self._is_expired(challenge, now)
            ]
            for address in expired:
                del self._challenges[address]
        if expired:
            logger.debug("swept %d expired nonces", len(expired))
        return len(expired)


def build_registry(settings: Settings):
    if settings.nonce_backend == "memory":
        return InMemoryNonceRegistry(ttl_seconds=settings.nonce_ttl_seconds)
    if settings.nonce_backend == "redis":
        # imported lazily so the memory backend never needs a redis connection
        from app.services.redis_nonce_registry import RedisNonceRegistry

        return RedisNonceRegistry.from_url(settings.redis_url, ttl_seconds=settings.nonce_ttl_seconds)
    raise ValueError(f"unknown nonce backend: {settings.nonce_backend!r}")
