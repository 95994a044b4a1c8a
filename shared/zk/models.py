"""
ZK-SNARK Data Models
====================

Pydantic models for Groth16 proofs, verifying keys and verification results
over BN254 (alt_bn128).

Points are held as affine integer coordinates. An F_p2 element is stored as
(c0, c1), meaning c0 + c1 * i, which is the ordering used by snarkjs JSON and
by py_ecc. Solidity verifiers take F_p2 as (c1, c0); the calldata helpers
perform that swap explicitly.

Version: 1.0.0
"""

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def to_int(value: int | str) -> int:
    """Parse a decimal or 0x-prefixed hex field element."""
    if isinstance(value, bool):
        raise ValueError("Boolean is not a field element")
    if isinstance(value, int):
        return value
    text = str(value).strip().lower()
    if text.startswith("0x"):
        return int(text, 16)
    return int(text)


def _fp2(values: Sequence[int | str]) -> tuple[int, int]:
    if len(values) != 2:
        raise ValueError(f"Expected 2 limbs for an F_p2 element, got {len(values)}")
    return to_int(values[0]), to_int(values[1])


class G1Point(BaseModel):
    """Affine point on G1. (0, 0) encodes the point at infinity."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int

    @field_validator("x", "y", mode="before")
    @classmethod
    def parse_coordinate(cls, v: Any) -> int:
        return to_int(v)

    @classmethod
    def infinity(cls) -> "G1Point":
        return cls(x=0, y=0)

    @property
    def is_infinity(self) -> bool:
        return self.x == 0 and self.y == 0

    def coordinates(self) -> list[int]:
        return [self.x, self.y]

    @classmethod
    def from_snarkjs(cls, values: Sequence[int | str]) -> "G1Point":
        """
        Parse a snarkjs G1 element.

        Accepts [x, y] or the projective [x, y, z] form snarkjs emits, where
        z is 1 for affine points and 0 for infinity.
        """
        if len(values) not in (2, 3):
            raise ValueError(f"G1 point needs 2 or 3 coordinates, got {len(values)}")
        if len(values) == 3:
            z = to_int(values[2])
            if z == 0:
                return cls.infinity()
            if z != 1:
                raise ValueError("Only affine G1 points (z = 1) are supported")
        return cls(x=to_int(values[0]), y=to_int(values[1]))

    def to_snarkjs(self) -> list[str]:
        if self.is_infinity:
            return ["0", "1", "0"]
        return [str(self.x), str(self.y), "1"]


class G2Point(BaseModel):
    """Affine point on G2 with F_p2 coordinates stored as (c0, c1)."""

    model_config = ConfigDict(frozen=True)

    x: tuple[int, int]
    y: tuple[int, int]

    @field_validator("x", "y", mode="before")
    @classmethod
    def parse_fp2(cls, v: Any) -> tuple[int, int]:
        return _fp2(v)

    @classmethod
    def infinity(cls) -> "G2Point":
        return cls(x=(0, 0), y=(0, 0))

    @property
    def is_infinity(self) -> bool:
        return self.x == (0, 0) and self.y == (0, 0)

    def coordinates(self) -> list[int]:
        return [*self.x, *self.y]

    @classmethod
    def from_snarkjs(cls, values: Sequence[Sequence[int | str]]) -> "G2Point":
        """Parse [[x_c0, x_c1], [y_c0, y_c1]] with an optional [1, 0] / [0, 0] z."""
        if len(values) not in (2, 3):
            raise ValueError(f"G2 point needs 2 or 3 coordinates, got {len(values)}")
        if len(values) == 3:
            z = _fp2(values[2])
            if z == (0, 0):
                return cls.infinity()
            if z != (1, 0):
                raise ValueError("Only affine G2 points (z = 1) are supported")
        return cls(x=_fp2(values[0]), y=_fp2(values[1]))

    def to_snarkjs(self) -> list[list[str]]:
        if self.is_infinity:
            return [["0", "0"], ["1", "0"], ["0", "0"]]
        return [
            [str(self.x[0]), str(self.x[1])],
            [str(self.y[0]), str(self.y[1])],
            ["1", "0"],
        ]

    @classmethod
    def from_evm(cls, values: Sequence[Sequence[int | str]]) -> "G2Point":
        """Parse the Solidity uint256[2][2] layout [[x_c1, x_c0], [y_c1, y_c0]]."""
        if len(values) != 2:
            raise ValueError(f"EVM G2 point needs 2 coordinates, got {len(values)}")
        x1, x0 = _fp2(values[0])
        y1, y0 = _fp2(values[1])
        return cls(x=(x0, x1), y=(y0, y1))

    def to_evm(self) -> list[list[int]]:
        return [[self.x[1], self.x[0]], [self.y[1], self.y[0]]]


class ZKProof(BaseModel):
    """
    A Groth16 proof (A in G1, B in G2, C in G1).

    Compatible with snarkjs Groth16 proof format and with Solidity calldata.
    """

    model_config = ConfigDict(frozen=True)

    a: G1Point
    b: G2Point
    c: G1Point

    def to_calldata(self) -> list[int]:
        """Convert to Solidity calldata format (8 uint256)."""
        b = self.b.to_evm()
        return [
            self.a.x,
            self.a.y,
            b[0][0],
            b[0][1],
            b[1][0],
            b[1][1],
            self.c.x,
            self.c.y,
        ]

    @classmethod
    def from_calldata(cls, calldata: Sequence[int | str]) -> "ZKProof":
        """Create from the flat 8-word Solidity calldata layout."""
        if len(calldata) != 8:
            raise ValueError(f"Calldata proof needs 8 words, got {len(calldata)}")
        words = [to_int(w) for w in calldata]
        return cls(
            a=G1Point(x=words[0], y=words[1]),
            b=G2Point.from_evm([[words[2], words[3]], [words[4], words[5]]]),
            c=G1Point(x=words[6], y=words[7]),
        )

    @classmethod
    def from_snarkjs(cls, data: dict[str, Any]) -> "ZKProof":
        """Create from a snarkjs proof.json object."""
        protocol = data.get("protocol", "groth16")
        if protocol != "groth16":
            raise ValueError(f"Unsupported proof protocol: {protocol}")
        return cls(
            a=G1Point.from_snarkjs(data["pi_a"]),
            b=G2Point.from_snarkjs(data["pi_b"]),
            c=G1Point.from_snarkjs(data["pi_c"]),
        )

    def to_snarkjs(self) -> dict[str, Any]:
        return {
            "pi_a": self.a.to_snarkjs(),
            "pi_b": self.b.to_snarkjs(),
            "pi_c": self.c.to_snarkjs(),
            "protocol": "groth16",
            "curve": "bn128",
        }


class PublicSignals(BaseModel):
    """Public inputs of an order proof, ordered [commitment, nullifier]."""

    signals: list[int] = Field(..., description="Public signals in circuit order")

    @field_validator("signals", mode="before")
    @classmethod
    def parse_signals(cls, v: Any) -> list[int]:
        return [to_int(s) for s in v]

    @property
    def commitment(self) -> int | None:
        """Get the order commitment (first signal)."""
        return self.signals[0] if self.signals else None

    @property
    def nullifier(self) -> int | None:
        """Get the nullifier (second signal)."""
        return self.signals[1] if len(self.signals) > 1 else None

    def to_str_list(self) -> list[str]:
        return [str(s) for s in self.signals]


class VerifyingKey(BaseModel):
    """
    Circuit-specific Groth16 verifying key.

    ic[0] is the constant term and ic[i + 1] the basis point for public
    input i, matching the snarkjs IC array.
    """

    model_config = ConfigDict(frozen=True)

    alpha1: G1Point
    beta2: G2Point
    gamma2: G2Point
    delta2: G2Point
    ic: tuple[G1Point, ...] = Field(..., min_length=1)

    @property
    def public_input_count(self) -> int:
        return len(self.ic) - 1

    @classmethod
    def from_snarkjs(cls, data: dict[str, Any]) -> "VerifyingKey":
        """Create from a snarkjs verification_key.json object."""
        protocol = data.get("protocol", "groth16")
        if protocol != "groth16":
            raise ValueError(f"Unsupported verifying key protocol: {protocol}")

        ic = tuple(G1Point.from_snarkjs(p) for p in data["IC"])
        n_public = data.get("nPublic")
        if n_public is not None and int(n_public) != len(ic) - 1:
            raise ValueError(
                f"nPublic={n_public} disagrees with IC length {len(ic)}"
            )

        return cls(
            alpha1=G1Point.from_snarkjs(data["vk_alpha_1"]),
            beta2=G2Point.from_snarkjs(data["vk_beta_2"]),
            gamma2=G2Point.from_snarkjs(data["vk_gamma_2"]),
            delta2=G2Point.from_snarkjs(data["vk_delta_2"]),
            ic=ic,
        )

    def to_snarkjs(self) -> dict[str, Any]:
        return {
            "protocol": "groth16",
            "curve": "bn128",
            "nPublic": self.public_input_count,
            "vk_alpha_1": self.alpha1.to_snarkjs(),
            "vk_beta_2": self.beta2.to_snarkjs(),
            "vk_gamma_2": self.gamma2.to_snarkjs(),
            "vk_delta_2": self.delta2.to_snarkjs(),
            "IC": [p.to_snarkjs() for p in self.ic],
        }


class VerificationResult(BaseModel):
    """Result of a successful verify-and-consume call."""

    valid: bool
    commitment: int
    nullifier: int
    consumed: bool = Field(..., description="Whether the nullifier was recorded")
    verified_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    verification_time_ms: int = Field(..., ge=0)


class VerificationEvent(BaseModel):
    """Notification emitted after every pairing check in verify-and-consume."""

    commitment: int
    nullifier: int
    valid: bool
    emitted_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
