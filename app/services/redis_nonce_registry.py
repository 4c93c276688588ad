# app/services/redis_nonce_registry.py
from __future__ import annotations

import json
import logging
import time
from typing import Callable, Optional

import redis

from app.services.nonce_registry import DEFAULT_TTL_SECONDS, Challenge
from app.services.wallet import build_challenge, generate_nonce, normalize_address

logger = logging.getLogger(__name__)


def nonce_key(address: str) -> str:
    return f"auth:nonce:{address}"


class RedisNonceRegistry:
    """Nonce registry shared between processes through Redis.

    Keys expire through SETEX, so Redis itself does the lazy deletion. The
    stored issued_at is checked as well, in case the key outlives its TTL
    (clock skew between app hosts, or a key written with a longer TTL). Redis
    drops a key once its TTL has elapsed, so unlike the in-memory backend a
    challenge is already gone at exactly ttl_seconds.
    """

    def __init__(
        self,
        client: redis.Redis,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.r = client
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    @classmethod
    def from_url(cls, url: str, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> "RedisNonceRegistry":
        return cls(redis.Redis.from_url(url, decode_responses=True), ttl_seconds=ttl_seconds)

    def issue(self, address: str) -> Challenge:
        canonical = normalize_address(address)
        challenge = Challenge(
            address=canonical,
            text=build_challenge(generate_nonce()),
            issued_at=self._clock(),
        )
        value = json.dumps({"text": challenge.text, "issued_at": challenge.issued_at})
        self.r.setex(nonce_key(canonical), self.ttl_seconds, value)
        logger.info("issued nonce for %s", canonical)
        return challenge

    def consume(self, address: str) -> Optional[str]:
        key = nonce_key(normalize_address(address))
        raw = self.r.get(key)
        if not raw:
            return None
        record = json.loads(raw)
        if self._clock() - record["issued_at"] > self.ttl_seconds:
            # only drop the record we read; a reissue since then must survive
            self._delete_if(key, record["text"])
            return None
        return record["text"]

    def finalize(self, address: str, text: str) -> bool:
        return self._delete_if(nonce_key(normalize_address(address)), text)

    def _delete_if(self, key: str, text: str) -> bool:
        with self.r.pipeline() as pipe:
            try:
                # compare-and-delete: a reissue between WATCH and EXEC aborts the delete
                pipe.watch(key)
                raw = pipe.get(key)
                if not raw or json.loads(raw)["text"] != text:
                    pipe.unwatch()
                    return False
                pipe.multi()
                pipe.delete(key)
                pipe.execute()
                return True
            except redis.WatchError:
                return False
