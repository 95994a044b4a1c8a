"""
Public Input Accumulation
=========================

Folds the public inputs into the single G1 point vk_x used by the Groth16
pairing equation:

    vk_x = ic[0] + sum(public_inputs[i] * ic[i + 1])

ic[0] is the constant term. ic[i + 1] is the basis point for public input i,
in the order the circuit declares its public signals (the snarkjs IC
convention).
"""

from collections.abc import Sequence

from shared.zk.errors import VerifyingKeyError
from shared.zk.field import point_add, scalar_mul
from shared.zk.models import G1Point


def accumulate(ic: Sequence[G1Point], public_inputs: Sequence[int]) -> G1Point:
    """Compute vk_x for the given input-commitment basis and public inputs."""
    if len(ic) != len(public_inputs) + 1:
        raise VerifyingKeyError(
            f"IC length {len(ic)} != 1 + number of public inputs {len(public_inputs)}"
        )

    vk_x = ic[0]
    for i, value in enumerate(public_inputs):
        vk_x = point_add(vk_x, scalar_mul(ic[i + 1], value))
    return vk_x
