"""
Unit Tests for BN254 Field Arithmetic
=====================================

Group law, negation, the multi-pairing check and pinned G2 coordinate
ordering.
"""

import pytest

from shared.zk.errors import CurveArithmeticError
from shared.zk.field import (
    BASE_FIELD_MODULUS,
    G1_GENERATOR,
    G2_GENERATOR,
    SCALAR_FIELD_MODULUS,
    hash_to_field,
    is_valid_g1,
    is_valid_g2,
    negate,
    pairing_check,
    point_add,
    scalar_mul,
    to_g1,
    to_g2,
)
from shared.zk.models import G1Point, G2Point


# EIP-197 generator of G2, coefficients listed as (real, imaginary)
G2_X = (
    10857046999023057135944570762232829481370756359578518086990519993285655852781,
    11559732032986387107991004021392285783925812861821192530917403151452391805634,
)
G2_Y = (
    8495653923123431417604973247489272438418190587263600148770280649306958101930,
    4082367875863433681332203403145435568316851327593401208105741076214120093531,
)


class TestConstants:
    """Tests for curve parameters."""

    def test_moduli(self) -> None:
        assert BASE_FIELD_MODULUS == (
            21888242871839275222246405745257275088696311157297823662689037894645226208583
        )
        assert SCALAR_FIELD_MODULUS == (
            21888242871839275222246405745257275088548364400416034343698204186575808495617
        )

    def test_g1_generator(self) -> None:
        assert G1_GENERATOR == G1Point(x=1, y=2)


class TestG2Ordering:
    """Golden vectors pinning F_p2 component order."""

    def test_generator_matches_eip197(self) -> None:
        assert G2_GENERATOR.x == G2_X
        assert G2_GENERATOR.y == G2_Y

    def test_evm_encoding_swaps_limbs(self) -> None:
        evm = [[G2_X[1], G2_X[0]], [G2_Y[1], G2_Y[0]]]

        assert G2Point.from_evm(evm) == G2_GENERATOR
        assert G2_GENERATOR.to_evm() == evm

    def test_swapped_limbs_are_not_on_curve(self) -> None:
        swapped = G2Point(x=(G2_X[1], G2_X[0]), y=(G2_Y[1], G2_Y[0]))

        with pytest.raises(CurveArithmeticError):
            to_g2(swapped)
        assert is_valid_g2(swapped) is False


class TestGroupLaw:
    """Tests for G1 operations."""

    def test_add_doubles(self) -> None:
        assert point_add(G1_GENERATOR, G1_GENERATOR) == scalar_mul(G1_GENERATOR, 2)

    def test_infinity_is_identity(self) -> None:
        inf = G1Point.infinity()

        assert point_add(G1_GENERATOR, inf) == G1_GENERATOR
        assert point_add(inf, G1_GENERATOR) == G1_GENERATOR

    def test_scalar_reduced_mod_order(self) -> None:
        assert scalar_mul(G1_GENERATOR, SCALAR_FIELD_MODULUS + 5) == scalar_mul(G1_GENERATOR, 5)

    def test_scalar_zero_and_order_give_infinity(self) -> None:
        assert scalar_mul(G1_GENERATOR, 0).is_infinity
        assert scalar_mul(G1_GENERATOR, SCALAR_FIELD_MODULUS).is_infinity

    def test_point_plus_negation_is_infinity(self) -> None:
        p = scalar_mul(G1_GENERATOR, 12345)

        assert point_add(p, negate(p)).is_infinity

    @pytest.mark.parametrize("k", [1, 2, 7, 2**64 + 3, SCALAR_FIELD_MODULUS - 1])
    def test_negate_is_involution(self, k: int) -> None:
        p = scalar_mul(G1_GENERATOR, k)

        assert negate(negate(p)) == p

    def test_negate_infinity(self) -> None:
        inf = G1Point.infinity()

        assert negate(inf) == inf

    def test_negate_flips_y(self) -> None:
        assert negate(G1_GENERATOR) == G1Point(x=1, y=BASE_FIELD_MODULUS - 2)


class TestPointChecks:
    """Tests for curve membership checks."""

    def test_off_curve_g1_rejected(self) -> None:
        bad = G1Point(x=1, y=3)

        with pytest.raises(CurveArithmeticError):
            to_g1(bad)
        assert is_valid_g1(bad) is False

    def test_out_of_field_g1_rejected(self) -> None:
        with pytest.raises(CurveArithmeticError):
            to_g1(G1Point(x=BASE_FIELD_MODULUS + 1, y=2))

    def test_generators_valid(self) -> None:
        assert is_valid_g1(G1_GENERATOR)
        assert is_valid_g2(G2_GENERATOR)


class TestPairingCheck:
    """Tests for the multi-pairing check."""

    def test_cancelling_pairs(self) -> None:
        assert pairing_check([
            (G1_GENERATOR, G2_GENERATOR),
            (negate(G1_GENERATOR), G2_GENERATOR),
        ])

    def test_single_pair_is_not_identity(self) -> None:
        assert not pairing_check([(G1_GENERATOR, G2_GENERATOR)])

    def test_bilinearity(self) -> None:
        # e(2P, Q) * e(-P, Q) * e(-P, Q) == 1
        two_p = scalar_mul(G1_GENERATOR, 2)
        neg_p = negate(G1_GENERATOR)

        assert pairing_check([
            (two_p, G2_GENERATOR),
            (neg_p, G2_GENERATOR),
            (neg_p, G2_GENERATOR),
        ])

    def test_infinity_pair_contributes_one(self) -> None:
        assert pairing_check([(G1Point.infinity(), G2_GENERATOR)])

    def test_off_curve_point_raises(self) -> None:
        with pytest.raises(CurveArithmeticError):
            pairing_check([(G1Point(x=1, y=3), G2_GENERATOR)])


class TestHashToField:
    """Tests for hashing into the scalar field."""

    def test_deterministic_and_in_range(self) -> None:
        h = hash_to_field("square", 9)

        assert h == hash_to_field("square", 9)
        assert 0 <= h < SCALAR_FIELD_MODULUS

    def test_parts_are_separated(self) -> None:
        assert hash_to_field("a", "bc") != hash_to_field("ab", "c")
