"""
Groth16 Pairing Verification
============================

Evaluates the Groth16 verification equation over BN254 as a single
product-of-pairings check:

    e(-A, B) * e(alpha1, beta2) * e(vk_x, gamma2) * e(C, delta2) == 1

which is equivalent to the textbook form

    e(A, B) == e(alpha1, beta2) * e(vk_x, gamma2) * e(C, delta2)

Version: 1.0.0
"""

import time
from collections.abc import Sequence

from shared.logging import get_logger
from shared.zk.accumulator import accumulate
from shared.zk.field import is_valid_g1, is_valid_g2, negate, pairing_check, to_g2
from shared.zk.models import G1Point, VerifyingKey, ZKProof


logger = get_logger(__name__)


class PairingVerifier:
    """
    Stateless Groth16 verifier.

    Safe to share across threads; it holds no mutable state.

    Key points are trusted to have been checked when the key was loaded
    (see VerifyingKeyStore). Only proof.b is subgroup-checked per call.
    """

    def __init__(self, check_subgroup: bool = True) -> None:
        """
        Initialize the verifier.

        Args:
            check_subgroup: Reject G2 points outside the order-r subgroup
        """
        self.check_subgroup = check_subgroup

    def verify(self, proof: ZKProof, vk: VerifyingKey, vk_x: G1Point) -> bool:
        """
        Check a proof against a verifying key and accumulated public inputs.

        Returns:
            True if the pairing product is the identity in GT. A proof point
            that is not on its curve (or, for B, not in the subgroup) makes
            the proof false.

        Raises:
            CurveArithmeticError: If a key point or vk_x is not on its curve
        """
        start_time = time.perf_counter()

        if not (
            is_valid_g1(proof.a)
            and is_valid_g2(proof.b, check_subgroup=self.check_subgroup)
            and is_valid_g1(proof.c)
        ):
            logger.info("proof_point_off_curve")
            return False

        ok = pairing_check(
            [
                (negate(proof.a), proof.b),
                (vk.alpha1, vk.beta2),
                (vk_x, vk.gamma2),
                (proof.c, vk.delta2),
            ],
            check_subgroup=False,
        )

        logger.debug(
            "pairing_check_completed",
            valid=ok,
            elapsed_ms=int((time.perf_counter() - start_time) * 1000),
        )
        return ok


def verify_groth16(
    vk: VerifyingKey,
    proof: ZKProof,
    public_inputs: Sequence[int],
    check_subgroup: bool = True,
) -> bool:
    """
    Verify a proof against a key without touching any replay ledger.

    Args:
        vk: Verifying key
        proof: The proof to verify
        public_inputs: Public signals in circuit order
        check_subgroup: Also subgroup-check the key's G2 points

    Returns:
        True if the proof is valid

    Raises:
        CurveArithmeticError: If a key point is not on its curve or subgroup
    """
    if check_subgroup:
        for q in (vk.beta2, vk.gamma2, vk.delta2):
            to_g2(q)

    vk_x = accumulate(vk.ic, public_inputs)
    return PairingVerifier(check_subgroup=check_subgroup).verify(proof, vk, vk_x)
