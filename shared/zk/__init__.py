"""
ZK-SNARK Verification Module
============================

Groth16 verification over BN254 with at-most-once nullifier consumption
for confidential order commitments.

Usage:
    from shared.zk import VerificationService, VerifyingKeyStore, ZKProof

    service = VerificationService(VerifyingKeyStore(admin="0xadmin", key=vk))

    proof = ZKProof.from_snarkjs(proof_json)
    result = service.verify_and_consume(proof, [commitment, nullifier])

    service.is_nullifier_used(nullifier)  # True

Version: 1.0.0
"""

from shared.zk.errors import (
    AdminRoleError,
    CurveArithmeticError,
    InvalidProofError,
    InvalidProofPoint,
    NullifierReusedError,
    ProofValidationError,
    PublicInputOutOfRange,
    VerificationError,
    VerifyingKeyError,
    WrongInputArity,
)
from shared.zk.keystore import (
    VerifyingKeyStore,
    load_verifying_key,
    provisional_verifying_key,
)
from shared.zk.ledger import (
    InMemoryReplayLedger,
    RedisReplayLedger,
    ReplayLedger,
    create_replay_ledger,
)
from shared.zk.models import (
    G1Point,
    G2Point,
    PublicSignals,
    VerificationEvent,
    VerificationResult,
    VerifyingKey,
    ZKProof,
)
from shared.zk.service import (
    VerificationService,
    get_verification_service,
    reset_verification_service,
    set_verification_service,
)
from shared.zk.verifier import PairingVerifier, verify_groth16


__all__ = [
    # Service
    "VerificationService",
    "get_verification_service",
    "set_verification_service",
    "reset_verification_service",
    # Components
    "PairingVerifier",
    "verify_groth16",
    "VerifyingKeyStore",
    "load_verifying_key",
    "provisional_verifying_key",
    "ReplayLedger",
    "InMemoryReplayLedger",
    "RedisReplayLedger",
    "create_replay_ledger",
    # Models
    "G1Point",
    "G2Point",
    "ZKProof",
    "PublicSignals",
    "VerifyingKey",
    "VerificationResult",
    "VerificationEvent",
    # Errors
    "VerificationError",
    "ProofValidationError",
    "InvalidProofPoint",
    "PublicInputOutOfRange",
    "WrongInputArity",
    "NullifierReusedError",
    "InvalidProofError",
    "CurveArithmeticError",
    "AdminRoleError",
    "VerifyingKeyError",
]
