"""
Replay Ledger
=============

Records consumed nullifiers and verified commitments, in process memory or
in Redis.

A nullifier moves from absent to used exactly once and is never removed.
Commitments are marked verified idempotently and carry no uniqueness
constraint. consume() is the single linearization point: it inserts the
nullifier only if absent, atomically.

Version: 1.0.0
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Any

import redis
from redis import Redis

from shared.config import LedgerBackend, VerifierSettings, settings
from shared.logging import get_logger


logger = get_logger(__name__)


class ReplayLedger(ABC):
    """
    Abstract base class for replay ledgers.

    Implementations must make consume() an atomic insert-if-absent on the
    nullifier. RedisReplayLedger shares one ledger across processes and
    restarts.
    """

    @abstractmethod
    def is_nullifier_used(self, nullifier: int) -> bool:
        """Check whether a nullifier has been consumed."""
        ...

    @abstractmethod
    def is_commitment_verified(self, commitment: int) -> bool:
        """Check whether a commitment has been verified."""
        ...

    @abstractmethod
    def consume(self, nullifier: int, commitment: int) -> bool:
        """
        Atomically record a nullifier as used and its commitment as verified.

        Returns:
            True if the nullifier was inserted, False if it was already used.
            The commitment is only marked when True is returned.
        """
        ...

    @abstractmethod
    def health_check(self) -> dict[str, Any]:
        """Check ledger health."""
        ...

    @abstractmethod
    def get_stats(self) -> dict[str, int]:
        """Get storage statistics."""
        ...

    def close(self) -> None:
        """Release backend connections."""
        return None


class InMemoryReplayLedger(ReplayLedger):
    """
    Process-wide in-memory ledger.

    Both sets are guarded by one lock. Data is lost on restart.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._nullifiers: set[int] = set()
        self._commitments: set[int] = set()

        logger.debug("replay_ledger_initialized")

    def is_nullifier_used(self, nullifier: int) -> bool:
        with self._lock:
            return nullifier in self._nullifiers

    def is_commitment_verified(self, commitment: int) -> bool:
        with self._lock:
            return commitment in self._commitments

    def consume(self, nullifier: int, commitment: int) -> bool:
        with self._lock:
            if nullifier in self._nullifiers:
                return False
            self._nullifiers.add(nullifier)
            self._commitments.add(commitment)

        logger.debug("nullifier_consumed", nullifier=str(nullifier))
        return True

    def health_check(self) -> dict[str, Any]:
        return {
            "status": "healthy",
            "backend": "memory",
            **self.get_stats(),
        }

    def get_stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "nullifiers": len(self._nullifiers),
                "commitments": len(self._commitments),
            }

    # =========================================================================
    # Test Utilities
    # =========================================================================

    def clear_all(self) -> None:
        """Clear all ledger data (for testing)."""
        with self._lock:
            self._nullifiers.clear()
            self._commitments.clear()
        logger.debug("replay_ledger_cleared")


class RedisReplayLedger(ReplayLedger):
    """
    Redis-backed ledger shared by every verifier process.

    Nullifiers and commitments are members of two Redis sets. SADD reports
    whether the member was new, so consume() is one atomic insert-if-absent
    on the server. The commitment is added only after the nullifier insert
    succeeds. Consumed nullifiers survive verifier restarts.
    """

    def __init__(
        self,
        client: Redis | None = None,  # type: ignore[type-arg]
        key_prefix: str = "shadowpool",
    ) -> None:
        """
        Initialize the ledger.

        Args:
            client: Redis client; one is created from settings when omitted
            key_prefix: Namespace for the ledger's keys
        """
        if client is None:
            client = redis.Redis.from_url(settings.redis.url, decode_responses=True)
            logger.info("redis_client_created", host=settings.redis.host)

        self._client = client
        self._nullifiers_key = f"{key_prefix}:nullifiers"
        self._commitments_key = f"{key_prefix}:commitments"

    def is_nullifier_used(self, nullifier: int) -> bool:
        return bool(self._client.sismember(self._nullifiers_key, str(nullifier)))

    def is_commitment_verified(self, commitment: int) -> bool:
        return bool(self._client.sismember(self._commitments_key, str(commitment)))

    def consume(self, nullifier: int, commitment: int) -> bool:
        if not self._client.sadd(self._nullifiers_key, str(nullifier)):
            return False
        self._client.sadd(self._commitments_key, str(commitment))

        logger.debug("nullifier_consumed", nullifier=str(nullifier))
        return True

    def health_check(self) -> dict[str, Any]:
        try:
            start = time.perf_counter()
            pong = self._client.ping()
            latency_ms = (time.perf_counter() - start) * 1000

            return {
                "status": "healthy" if pong else "unhealthy",
                "backend": "redis",
                "latency_ms": round(latency_ms, 2),
                **self.get_stats(),
            }
        except redis.RedisError as e:
            logger.error("redis_health_check_failed", error=str(e))
            return {
                "status": "unhealthy",
                "backend": "redis",
                "error": str(e),
            }

    def get_stats(self) -> dict[str, int]:
        return {
            "nullifiers": int(self._client.scard(self._nullifiers_key)),
            "commitments": int(self._client.scard(self._commitments_key)),
        }

    def close(self) -> None:
        self._client.close()
        logger.info("redis_client_closed")

    # =========================================================================
    # Test Utilities
    # =========================================================================

    def clear_all(self) -> None:
        """Delete the ledger's keys (for testing)."""
        self._client.delete(self._nullifiers_key, self._commitments_key)
        logger.debug("replay_ledger_cleared")


def create_replay_ledger(cfg: VerifierSettings | None = None) -> ReplayLedger:
    """
    Build the ledger named by configuration.

    Args:
        cfg: Verifier settings; the global settings when omitted
    """
    cfg = cfg if cfg is not None else settings.verifier

    if cfg.ledger_backend == LedgerBackend.REDIS:
        return RedisReplayLedger(key_prefix=cfg.ledger_key_prefix)
    return InMemoryReplayLedger()
