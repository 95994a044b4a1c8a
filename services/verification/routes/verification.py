"""
Proof Verification Routes
=========================

API endpoints for verifying order proofs and consuming their nullifiers.

Proofs are accepted in snarkjs layout (pi_a / pi_b / pi_c) or in Solidity
calldata layout (a / b / c, with F_p2 limbs in EVM order).
"""

import asyncio
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, model_validator

from shared.logging import get_logger
from shared.zk import (
    G1Point,
    G2Point,
    PublicSignals,
    VerificationService,
    ZKProof,
    get_verification_service,
)


logger = get_logger(__name__)
router = APIRouter()

Word = int | str


# ============================================================================
# Request/Response Models
# ============================================================================


class ProofPayload(BaseModel):
    """A Groth16 proof in snarkjs or calldata layout."""

    pi_a: list[Word] | None = None
    pi_b: list[list[Word]] | None = None
    pi_c: list[Word] | None = None

    a: list[Word] | None = None
    b: list[list[Word]] | None = None
    c: list[Word] | None = None

    @model_validator(mode="after")
    def one_layout(self) -> "ProofPayload":
        snarkjs = (self.pi_a, self.pi_b, self.pi_c)
        calldata = (self.a, self.b, self.c)
        if all(v is not None for v in snarkjs) == all(v is not None for v in calldata):
            raise ValueError("Provide exactly one of pi_a/pi_b/pi_c or a/b/c")
        return self

    def to_proof(self) -> ZKProof:
        if self.pi_a is not None:
            return ZKProof(
                a=G1Point.from_snarkjs(self.pi_a),
                b=G2Point.from_snarkjs(self.pi_b),
                c=G1Point.from_snarkjs(self.pi_c),
            )
        return ZKProof(
            a=G1Point.from_snarkjs(self.a),
            b=G2Point.from_evm(self.b),
            c=G1Point.from_snarkjs(self.c),
        )


class VerifyProofRequest(BaseModel):
    """Request to verify an order proof."""

    proof: ProofPayload
    public_signals: list[Word] = Field(..., description="[commitment, nullifier]")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "proof": {
                        "pi_a": ["1", "2", "1"],
                        "pi_b": [["0", "0"], ["0", "0"], ["1", "0"]],
                        "pi_c": ["1", "2", "1"],
                    },
                    "public_signals": ["123", "456"],
                }
            ]
        }
    }


class ConsumeResponse(BaseModel):
    """Response from a successful verify-and-consume call."""

    valid: bool
    commitment: str
    nullifier: str
    verification_time_ms: int
    verified_at: str


class ViewResponse(BaseModel):
    """Response from a side-effect-free verification."""

    valid: bool
    commitment: str
    nullifier: str


def parse_request(request: VerifyProofRequest) -> tuple[ZKProof, list[int]]:
    """Decode a request into a proof and integer public inputs."""
    try:
        proof = request.proof.to_proof()
        signals = PublicSignals(signals=request.public_signals)
    except ValueError as e:
        logger.warning("proof_request_malformed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Malformed proof request: {e}",
        ) from e
    return proof, signals.signals


ServiceDep = Annotated[VerificationService, Depends(get_verification_service)]


# ============================================================================
# Verification Endpoints
# ============================================================================


@router.post("/consume", response_model=ConsumeResponse)
async def verify_and_consume(
    request: VerifyProofRequest,
    service: ServiceDep,
) -> ConsumeResponse:
    """
    Verify an order proof and consume its nullifier.

    Success is final: the nullifier can never be consumed again.

    Returns:
        ConsumeResponse for the consumed nullifier
    """
    proof, inputs = parse_request(request)

    # Pairing work runs off the event loop
    result = await asyncio.to_thread(service.verify_and_consume, proof, inputs)

    return ConsumeResponse(
        valid=result.valid,
        commitment=str(result.commitment),
        nullifier=str(result.nullifier),
        verification_time_ms=result.verification_time_ms,
        verified_at=result.verified_at.isoformat(),
    )


@router.post("/view", response_model=ViewResponse)
async def verify_view(
    request: VerifyProofRequest,
    service: ServiceDep,
) -> ViewResponse:
    """
    Check an order proof without consuming its nullifier.

    Returns the same validity verify-and-consume would report against the
    current ledger state.
    """
    proof, inputs = parse_request(request)
    valid = await asyncio.to_thread(service.verify_view, proof, inputs)

    return ViewResponse(
        valid=valid,
        commitment=str(inputs[0]),
        nullifier=str(inputs[1]),
    )


@router.get("/calldata")
async def calldata_layout() -> dict[str, Any]:
    """Describe the accepted proof layouts."""
    return {
        "snarkjs": {"pi_a": "G1 [x, y, 1]", "pi_b": "G2 [[x_c0, x_c1], [y_c0, y_c1], [1, 0]]"},
        "calldata": {"a": "G1 [x, y]", "b": "G2 [[x_c1, x_c0], [y_c1, y_c0]]"},
        "public_signals": ["commitment", "nullifier"],
    }
