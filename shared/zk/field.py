"""
BN254 Field Arithmetic
======================

Group operations and the multi-pairing check over BN254 (alt_bn128), backed
by py_ecc's optimized implementation.

The public functions take and return the affine models from
shared.zk.models; conversion to py_ecc's projective tuples happens here and
nowhere else. Every point entering the backend is checked to lie on its
curve, and G2 points are additionally checked to lie in the order-r
subgroup. Failures raise CurveArithmeticError.

Version: 1.0.0
"""

import hashlib
from collections.abc import Iterable

from py_ecc.optimized_bn128 import (
    FQ,
    FQ2,
    FQ12,
    G1,
    G2,
    add,
    b,
    b2,
    curve_order,
    field_modulus,
    final_exponentiate,
    is_inf,
    is_on_curve,
    multiply,
    neg,
    normalize,
    pairing,
)

from shared.zk.errors import CurveArithmeticError
from shared.zk.models import G1Point, G2Point


BASE_FIELD_MODULUS: int = int(field_modulus)
SCALAR_FIELD_MODULUS: int = int(curve_order)

BACKEND_NAME = "py_ecc.optimized_bn128"


def _limb(value: object) -> int:
    # optimized FQ2 keeps plain ints in .coeffs, the reference backend keeps FQ
    return int(getattr(value, "n", value))


def _check_coordinates(*coords: int) -> None:
    for c in coords:
        if not 0 <= c < BASE_FIELD_MODULUS:
            raise CurveArithmeticError(f"Coordinate outside base field: {c}")


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def to_g1(point: G1Point) -> tuple:
    """Convert an affine G1 model to a py_ecc projective point."""
    if point.is_infinity:
        return (FQ.one(), FQ.one(), FQ.zero())

    _check_coordinates(point.x, point.y)
    pt = (FQ(point.x), FQ(point.y), FQ.one())
    if not is_on_curve(pt, b):
        raise CurveArithmeticError(f"G1 point not on curve: ({point.x}, {point.y})")
    return pt


def to_g2(point: G2Point, check_subgroup: bool = True) -> tuple:
    """Convert an affine G2 model to a py_ecc projective point."""
    if point.is_infinity:
        return (FQ2.one(), FQ2.one(), FQ2.zero())

    _check_coordinates(*point.coordinates())
    pt = (FQ2(list(point.x)), FQ2(list(point.y)), FQ2.one())
    if not is_on_curve(pt, b2):
        raise CurveArithmeticError("G2 point not on curve")
    if check_subgroup and not is_inf(multiply(pt, SCALAR_FIELD_MODULUS)):
        raise CurveArithmeticError("G2 point not in the order-r subgroup")
    return pt


def from_g1(pt: tuple) -> G1Point:
    """Convert a py_ecc projective G1 point to the affine model."""
    if is_inf(pt):
        return G1Point.infinity()
    x, y = normalize(pt)
    return G1Point(x=_limb(x), y=_limb(y))


def from_g2(pt: tuple) -> G2Point:
    """Convert a py_ecc projective G2 point to the affine model."""
    if is_inf(pt):
        return G2Point.infinity()
    x, y = normalize(pt)
    return G2Point(
        x=(_limb(x.coeffs[0]), _limb(x.coeffs[1])),
        y=(_limb(y.coeffs[0]), _limb(y.coeffs[1])),
    )


def is_valid_g1(point: G1Point) -> bool:
    """True if the point converts cleanly to a curve point."""
    try:
        to_g1(point)
    except CurveArithmeticError:
        return False
    return True


def is_valid_g2(point: G2Point, check_subgroup: bool = True) -> bool:
    """True if the point is on the twist and, optionally, in the subgroup."""
    try:
        to_g2(point, check_subgroup=check_subgroup)
    except CurveArithmeticError:
        return False
    return True


G1_GENERATOR: G1Point = from_g1(G1)
G2_GENERATOR: G2Point = from_g2(G2)


# ---------------------------------------------------------------------------
# Group operations
# ---------------------------------------------------------------------------


def point_add(p1: G1Point, p2: G1Point) -> G1Point:
    """G1 group law."""
    return from_g1(add(to_g1(p1), to_g1(p2)))


def scalar_mul(point: G1Point, scalar: int) -> G1Point:
    """Multiply a G1 point by a scalar reduced modulo the curve order."""
    s = scalar % SCALAR_FIELD_MODULUS
    if s == 0 or point.is_infinity:
        return G1Point.infinity()
    return from_g1(multiply(to_g1(point), s))


def negate(point: G1Point) -> G1Point:
    """Additive inverse in G1. The point at infinity maps to itself."""
    if point.is_infinity:
        return point
    return from_g1(neg(to_g1(point)))


def pairing_check(
    pairs: Iterable[tuple[G1Point, G2Point]],
    check_subgroup: bool = True,
) -> bool:
    """
    Return True iff the product of e(P_i, Q_i) over all pairs is 1 in GT.

    Runs one Miller loop per pair and a single final exponentiation on the
    accumulated product.
    """
    acc = FQ12.one()
    for p, q in pairs:
        acc = acc * pairing(
            to_g2(q, check_subgroup=check_subgroup),
            to_g1(p),
            final_exponentiate=False,
        )
    return final_exponentiate(acc) == FQ12.one()


def hash_to_field(*parts: object) -> int:
    """
    Hash arbitrary values to a scalar field element.

    Uses SHA-256 over the ':'-joined string forms and reduces mod r.
    """
    digest = hashlib.sha256(":".join(str(p) for p in parts).encode()).digest()
    return int.from_bytes(digest, "big") % SCALAR_FIELD_MODULUS
