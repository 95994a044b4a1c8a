"""
Ledger Routes
=============

Read-only lookups against the nullifier replay ledger.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from shared.zk import VerificationService, get_verification_service
from shared.zk.field import SCALAR_FIELD_MODULUS
from shared.zk.models import to_int


router = APIRouter()

ServiceDep = Annotated[VerificationService, Depends(get_verification_service)]


class NullifierStatus(BaseModel):
    nullifier: str
    used: bool


class CommitmentStatus(BaseModel):
    commitment: str
    verified: bool


def parse_field_element(value: str, name: str) -> int:
    """Parse a decimal or 0x-hex scalar field element from a path."""
    try:
        n = to_int(value)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {name}: {value}",
        ) from e
    if not 0 <= n < SCALAR_FIELD_MODULUS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{name} is outside the scalar field",
        )
    return n


@router.get("/nullifiers/{nullifier}", response_model=NullifierStatus)
async def get_nullifier(nullifier: str, service: ServiceDep) -> NullifierStatus:
    """Check whether a nullifier has been consumed."""
    n = parse_field_element(nullifier, "nullifier")
    return NullifierStatus(nullifier=str(n), used=service.is_nullifier_used(n))


@router.get("/commitments/{commitment}", response_model=CommitmentStatus)
async def get_commitment(commitment: str, service: ServiceDep) -> CommitmentStatus:
    """Check whether a commitment has been recorded by a successful verification."""
    c = parse_field_element(commitment, "commitment")
    return CommitmentStatus(commitment=str(c), verified=service.is_commitment_verified(c))


@router.get("/stats")
async def get_stats(service: ServiceDep) -> dict[str, int]:
    """Ledger counters."""
    return service.ledger.get_stats()
