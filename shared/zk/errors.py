"""
ZK Verification Errors
======================

Exception taxonomy for proof verification and key administration.

Caller errors (malformed input, replayed nullifier, false proof) derive from
VerificationError and never change ledger state. CurveArithmeticError is an
internal fault raised when the curve backend rejects a point.

Version: 1.0.0
"""


class VerificationError(Exception):
    """Base class for rejected verification requests."""

    code = "verification_error"


class ProofValidationError(VerificationError):
    """Malformed proof or public-input encoding."""

    code = "validation_error"


class InvalidProofPoint(ProofValidationError):
    """A proof coordinate is outside the base field."""

    code = "invalid_proof_point"


class PublicInputOutOfRange(ProofValidationError):
    """A public input is outside the scalar field."""

    code = "public_input_out_of_range"


class WrongInputArity(ProofValidationError):
    """The number of public inputs does not match the circuit."""

    code = "wrong_input_arity"


class NullifierReusedError(VerificationError):
    """The nullifier has already been consumed."""

    code = "nullifier_reused"

    def __init__(self, nullifier: int) -> None:
        super().__init__(f"Nullifier already used: {nullifier}")
        self.nullifier = nullifier


class InvalidProofError(VerificationError):
    """The proof does not satisfy the pairing equation for the current key."""

    code = "invalid_proof"

    def __init__(self, commitment: int, nullifier: int) -> None:
        super().__init__("Proof failed pairing verification")
        self.commitment = commitment
        self.nullifier = nullifier


class CurveArithmeticError(ArithmeticError):
    """The curve backend signalled a malformed point."""


class AdminRoleError(PermissionError):
    """An administrative operation was attempted by a non-administrator."""


class VerifyingKeyError(ValueError):
    """The verifying key is malformed or does not fit the circuit arity."""
