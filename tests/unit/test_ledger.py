"""
Unit Tests for the Replay Ledger
================================
"""

import threading

import pytest

from shared.config import LedgerBackend, VerifierSettings
from shared.zk.ledger import (
    InMemoryReplayLedger,
    RedisReplayLedger,
    ReplayLedger,
    create_replay_ledger,
)
from tests.fake_redis import FakeRedis, FakeRedisServer


class TestInMemoryReplayLedger:
    """Tests for InMemoryReplayLedger."""

    def test_is_a_replay_ledger(self) -> None:
        assert isinstance(InMemoryReplayLedger(), ReplayLedger)

    def test_consume_marks_both(self) -> None:
        ledger = InMemoryReplayLedger()

        assert ledger.consume(nullifier=11, commitment=22) is True
        assert ledger.is_nullifier_used(11)
        assert ledger.is_commitment_verified(22)

    def test_second_consume_is_refused(self) -> None:
        ledger = InMemoryReplayLedger()
        ledger.consume(11, 22)

        assert ledger.consume(11, 33) is False
        assert not ledger.is_commitment_verified(33)

    def test_commitment_may_repeat(self) -> None:
        ledger = InMemoryReplayLedger()

        assert ledger.consume(1, 99)
        assert ledger.consume(2, 99)
        assert ledger.get_stats() == {"nullifiers": 2, "commitments": 1}

    def test_unknown_values(self) -> None:
        ledger = InMemoryReplayLedger()

        assert not ledger.is_nullifier_used(5)
        assert not ledger.is_commitment_verified(5)

    def test_health_check(self) -> None:
        ledger = InMemoryReplayLedger()
        ledger.consume(1, 2)

        health = ledger.health_check()

        assert health["status"] == "healthy"
        assert health["backend"] == "memory"
        assert health["nullifiers"] == 1

    def test_clear_all(self) -> None:
        ledger = InMemoryReplayLedger()
        ledger.consume(1, 2)

        ledger.clear_all()

        assert not ledger.is_nullifier_used(1)
        assert ledger.get_stats() == {"nullifiers": 0, "commitments": 0}

    def test_concurrent_consume_has_one_winner(self) -> None:
        ledger = InMemoryReplayLedger()
        results: list[bool] = []
        barrier = threading.Barrier(16)

        def worker() -> None:
            barrier.wait()
            results.append(ledger.consume(7, 8))

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1
        assert results.count(False) == 15


@pytest.fixture
def redis_server() -> FakeRedisServer:
    return FakeRedisServer()


@pytest.fixture
def redis_ledger(redis_server: FakeRedisServer) -> RedisReplayLedger:
    return RedisReplayLedger(client=FakeRedis(redis_server), key_prefix="test")


class TestRedisReplayLedger:
    """Tests for RedisReplayLedger."""

    def test_is_a_replay_ledger(self, redis_ledger: RedisReplayLedger) -> None:
        assert isinstance(redis_ledger, ReplayLedger)

    def test_consume_marks_both(
        self, redis_ledger: RedisReplayLedger, redis_server: FakeRedisServer
    ) -> None:
        assert redis_ledger.consume(nullifier=11, commitment=22) is True
        assert redis_ledger.is_nullifier_used(11)
        assert redis_ledger.is_commitment_verified(22)
        assert redis_server.sets["test:nullifiers"] == {"11"}
        assert redis_server.sets["test:commitments"] == {"22"}

    def test_second_consume_is_refused(self, redis_ledger: RedisReplayLedger) -> None:
        redis_ledger.consume(11, 22)

        assert redis_ledger.consume(11, 33) is False
        assert not redis_ledger.is_commitment_verified(33)

    def test_commitment_may_repeat(self, redis_ledger: RedisReplayLedger) -> None:
        assert redis_ledger.consume(1, 99)
        assert redis_ledger.consume(2, 99)
        assert redis_ledger.get_stats() == {"nullifiers": 2, "commitments": 1}

    def test_survives_new_ledger_on_same_server(
        self, redis_ledger: RedisReplayLedger, redis_server: FakeRedisServer
    ) -> None:
        redis_ledger.consume(11, 22)
        redis_ledger.close()

        restarted = RedisReplayLedger(client=FakeRedis(redis_server), key_prefix="test")

        assert restarted.is_nullifier_used(11)
        assert restarted.is_commitment_verified(22)
        assert restarted.consume(11, 22) is False

    def test_key_prefix_isolates_ledgers(
        self, redis_ledger: RedisReplayLedger, redis_server: FakeRedisServer
    ) -> None:
        redis_ledger.consume(11, 22)

        other = RedisReplayLedger(client=FakeRedis(redis_server), key_prefix="other")

        assert not other.is_nullifier_used(11)

    def test_health_check(self, redis_ledger: RedisReplayLedger) -> None:
        redis_ledger.consume(1, 2)

        health = redis_ledger.health_check()

        assert health["status"] == "healthy"
        assert health["backend"] == "redis"
        assert health["nullifiers"] == 1

    def test_health_check_server_down(
        self, redis_ledger: RedisReplayLedger, redis_server: FakeRedisServer
    ) -> None:
        redis_server.up = False

        health = redis_ledger.health_check()

        assert health["status"] == "unhealthy"
        assert "error" in health

    def test_clear_all(self, redis_ledger: RedisReplayLedger) -> None:
        redis_ledger.consume(1, 2)

        redis_ledger.clear_all()

        assert not redis_ledger.is_nullifier_used(1)
        assert redis_ledger.get_stats() == {"nullifiers": 0, "commitments": 0}

    def test_concurrent_consume_has_one_winner(
        self, redis_server: FakeRedisServer
    ) -> None:
        results: list[bool] = []
        barrier = threading.Barrier(8)

        def worker() -> None:
            ledger = RedisReplayLedger(client=FakeRedis(redis_server), key_prefix="test")
            barrier.wait()
            results.append(ledger.consume(7, 8))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1


class TestCreateReplayLedger:
    """Tests for ledger selection from settings."""

    def test_memory_by_default(self) -> None:
        assert isinstance(create_replay_ledger(VerifierSettings()), InMemoryReplayLedger)

    def test_redis_backend(self) -> None:
        cfg = VerifierSettings(ledger_backend=LedgerBackend.REDIS)

        ledger = create_replay_ledger(cfg)

        assert isinstance(ledger, RedisReplayLedger)
        ledger.close()
