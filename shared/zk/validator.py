"""
Proof Validation
================

Range and arity checks on proof elements and public inputs. These run
before any curve arithmetic so that malformed input never reaches the
pairing backend.

Version: 1.0.0
"""

from collections.abc import Sequence

from shared.logging import get_logger
from shared.zk.errors import InvalidProofPoint, PublicInputOutOfRange, WrongInputArity
from shared.zk.field import BASE_FIELD_MODULUS, SCALAR_FIELD_MODULUS
from shared.zk.models import ZKProof


logger = get_logger(__name__)

# Order proofs carry [commitment, nullifier]
DEFAULT_ARITY = 2


class ProofValidator:
    """
    Cheap structural checks on a proof and its public inputs.

    Usage:
        validator = ProofValidator()
        validator.validate(proof, [commitment, nullifier])
    """

    def __init__(self, arity: int = DEFAULT_ARITY) -> None:
        self.arity = arity

    def validate(self, proof: ZKProof, public_inputs: Sequence[int]) -> None:
        """
        Validate a proof and its public inputs.

        Raises:
            InvalidProofPoint: a coordinate of a, b or c is not below p
            PublicInputOutOfRange: a public input is not below r
            WrongInputArity: the input count differs from the circuit arity
        """
        for name, coords in (
            ("a", proof.a.coordinates()),
            ("b", proof.b.coordinates()),
            ("c", proof.c.coordinates()),
        ):
            for value in coords:
                if not 0 <= value < BASE_FIELD_MODULUS:
                    logger.warning("proof_point_out_of_range", element=name)
                    raise InvalidProofPoint(
                        f"Proof element {name} has a coordinate outside the base field"
                    )

        for index, value in enumerate(public_inputs):
            if not 0 <= value < SCALAR_FIELD_MODULUS:
                logger.warning("public_input_out_of_range", index=index)
                raise PublicInputOutOfRange(
                    f"Public input {index} is outside the scalar field"
                )

        if len(public_inputs) != self.arity:
            logger.warning(
                "public_input_arity_mismatch",
                expected=self.arity,
                actual=len(public_inputs),
            )
            raise WrongInputArity(
                f"Expected {self.arity} public inputs, got {len(public_inputs)}"
            )
