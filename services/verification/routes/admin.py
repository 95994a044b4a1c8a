"""
Administration Routes
=====================

Verifying key inspection and rotation, and administrator role transfer.

Mutating routes require a bearer token whose subject is the current
administrator. Any other authenticated caller gets 403 and the stored key
is left unchanged.
"""

import asyncio
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from shared.auth import Caller, get_current_caller
from shared.logging import get_logger
from shared.zk import VerificationService, VerifyingKey, get_verification_service


logger = get_logger(__name__)
router = APIRouter()

ServiceDep = Annotated[VerificationService, Depends(get_verification_service)]
CallerDep = Annotated[Caller, Depends(get_current_caller)]


class VerifyingKeyResponse(BaseModel):
    """Current verifying key in snarkjs layout."""

    admin: str
    provisional: bool
    verifying_key: dict[str, Any]


class TransferAdminRequest(BaseModel):
    new_admin: str = Field(..., min_length=1)


class TransferAdminResponse(BaseModel):
    admin: str


@router.get("/verifying-key", response_model=VerifyingKeyResponse)
async def get_verifying_key(service: ServiceDep) -> VerifyingKeyResponse:
    """Return the verifying key in force."""
    return VerifyingKeyResponse(
        admin=service.admin,
        provisional=service.key_store.provisional,
        verifying_key=service.verifying_key.to_snarkjs(),
    )


@router.put("/verifying-key", response_model=VerifyingKeyResponse)
async def put_verifying_key(
    body: dict[str, Any],
    caller: CallerDep,
    service: ServiceDep,
) -> VerifyingKeyResponse:
    """
    Replace the verifying key.

    The body is a snarkjs verification_key.json document. Nullifiers and
    commitments recorded under the previous key are kept.
    """
    try:
        key = VerifyingKey.from_snarkjs(body)
    except (KeyError, TypeError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid verifying key: {e}",
        ) from e

    # Subgroup checks on the G2 points are slow
    await asyncio.to_thread(service.install_verifying_key, caller.id, key)

    return VerifyingKeyResponse(
        admin=service.admin,
        provisional=service.key_store.provisional,
        verifying_key=key.to_snarkjs(),
    )


@router.post("/transfer", response_model=TransferAdminResponse)
async def transfer_admin(
    request: TransferAdminRequest,
    caller: CallerDep,
    service: ServiceDep,
) -> TransferAdminResponse:
    """Hand the administrator role to another identity."""
    service.transfer_admin_role(caller.id, request.new_admin)
    return TransferAdminResponse(admin=service.admin)
