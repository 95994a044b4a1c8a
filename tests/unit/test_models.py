"""
Unit Tests for ZK Models
========================

Tests for proof, key and public-signal parsing in snarkjs and Solidity
layouts.

Version: 1.0.0
"""

import pytest

from shared.zk.models import (
    G1Point,
    G2Point,
    PublicSignals,
    VerificationResult,
    VerifyingKey,
    ZKProof,
    to_int,
)


SNARKJS_PROOF = {
    "pi_a": ["123", "456", "1"],
    "pi_b": [["789", "101"], ["112", "131"], ["1", "0"]],
    "pi_c": ["415", "161", "1"],
    "protocol": "groth16",
    "curve": "bn128",
}


class TestToInt:
    """Tests for field element parsing."""

    def test_decimal_and_hex(self) -> None:
        assert to_int("12345") == 12345
        assert to_int("0x1f") == 31
        assert to_int("0X1F") == 31
        assert to_int(7) == 7

    def test_rejects_bool(self) -> None:
        with pytest.raises(ValueError):
            to_int(True)

    def test_rejects_garbage(self) -> None:
        with pytest.raises(ValueError):
            to_int("twelve")


class TestPoints:
    """Tests for G1/G2 point parsing."""

    def test_g1_from_snarkjs_projective(self) -> None:
        p = G1Point.from_snarkjs(["1", "2", "1"])

        assert p == G1Point(x=1, y=2)
        assert p.to_snarkjs() == ["1", "2", "1"]

    def test_g1_infinity(self) -> None:
        p = G1Point.from_snarkjs(["0", "1", "0"])

        assert p.is_infinity
        assert p.to_snarkjs() == ["0", "1", "0"]

    def test_g1_non_affine_rejected(self) -> None:
        with pytest.raises(ValueError, match="affine"):
            G1Point.from_snarkjs(["1", "2", "5"])

    def test_g1_wrong_length(self) -> None:
        with pytest.raises(ValueError):
            G1Point.from_snarkjs(["1"])

    def test_g2_keeps_snarkjs_order(self) -> None:
        q = G2Point.from_snarkjs([["1", "2"], ["3", "4"], ["1", "0"]])

        assert q.x == (1, 2)
        assert q.y == (3, 4)
        assert q.coordinates() == [1, 2, 3, 4]

    def test_g2_evm_order_is_swapped(self) -> None:
        q = G2Point.from_evm([["2", "1"], ["4", "3"]])

        assert q.x == (1, 2)
        assert q.y == (3, 4)
        assert q.to_evm() == [[2, 1], [4, 3]]

    def test_g2_infinity(self) -> None:
        q = G2Point.from_snarkjs([["0", "0"], ["1", "0"], ["0", "0"]])

        assert q.is_infinity

    def test_g2_bad_limb_count(self) -> None:
        with pytest.raises(ValueError, match="2 limbs"):
            G2Point.from_snarkjs([["1", "2", "3"], ["3", "4"]])

    def test_points_are_frozen(self) -> None:
        p = G1Point(x=1, y=2)

        with pytest.raises(Exception):
            p.x = 5  # type: ignore[misc]


class TestZKProof:
    """Tests for proof codecs."""

    def test_from_snarkjs(self) -> None:
        proof = ZKProof.from_snarkjs(SNARKJS_PROOF)

        assert proof.a == G1Point(x=123, y=456)
        assert proof.b.x == (789, 101)
        assert proof.c == G1Point(x=415, y=161)

    def test_to_snarkjs_round_trip(self) -> None:
        proof = ZKProof.from_snarkjs(SNARKJS_PROOF)

        assert proof.to_snarkjs() == SNARKJS_PROOF

    def test_to_calldata_swaps_g2(self) -> None:
        calldata = ZKProof.from_snarkjs(SNARKJS_PROOF).to_calldata()

        assert calldata == [123, 456, 101, 789, 131, 112, 415, 161]

    def test_from_calldata(self) -> None:
        proof = ZKProof.from_calldata([123, 456, 101, 789, 131, 112, 415, 161])

        assert proof == ZKProof.from_snarkjs(SNARKJS_PROOF)

    def test_calldata_length_checked(self) -> None:
        with pytest.raises(ValueError, match="8 words"):
            ZKProof.from_calldata([1, 2, 3])

    def test_other_protocol_rejected(self) -> None:
        with pytest.raises(ValueError, match="protocol"):
            ZKProof.from_snarkjs({**SNARKJS_PROOF, "protocol": "plonk"})


class TestPublicSignals:
    """Tests for public signal parsing."""

    def test_commitment_and_nullifier(self) -> None:
        signals = PublicSignals(signals=["8000", "0x10"])

        assert signals.commitment == 8000
        assert signals.nullifier == 16
        assert signals.to_str_list() == ["8000", "16"]

    def test_missing_nullifier(self) -> None:
        signals = PublicSignals(signals=["8000"])

        assert signals.nullifier is None


class TestVerifyingKey:
    """Tests for verifying key parsing."""

    def test_snarkjs_round_trip(self, toy_vk: VerifyingKey) -> None:
        data = toy_vk.to_snarkjs()

        assert data["nPublic"] == 2
        assert len(data["IC"]) == 3
        assert VerifyingKey.from_snarkjs(data) == toy_vk

    def test_npublic_mismatch_rejected(self, toy_vk: VerifyingKey) -> None:
        data = {**toy_vk.to_snarkjs(), "nPublic": 5}

        with pytest.raises(ValueError):
            VerifyingKey.from_snarkjs(data)

    def test_public_input_count(self, toy_vk: VerifyingKey) -> None:
        assert toy_vk.public_input_count == 2


class TestVerificationResult:
    """Tests for the result model."""

    def test_timestamp_default(self) -> None:
        result = VerificationResult(
            valid=True, commitment=1, nullifier=2, consumed=True, verification_time_ms=3
        )

        assert result.verified_at.tzinfo is not None

    def test_negative_time_rejected(self) -> None:
        with pytest.raises(ValueError):
            VerificationResult(
                valid=True, commitment=1, nullifier=2, consumed=True, verification_time_ms=-1
            )
