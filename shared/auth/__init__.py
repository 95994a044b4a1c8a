"""
Authentication Module
=====================

JWT bearer authentication for the verifier's administrative surface.

Usage:
    from shared.auth import create_access_token, get_current_caller

    token = create_access_token({"sub": "0xadmin"})

    @router.put("/verifying-key")
    async def install(caller: Caller = Depends(get_current_caller)):
        service.install_verifying_key(caller.id, key)
"""

from shared.auth.dependencies import Caller, get_current_caller, oauth2_scheme
from shared.auth.jwt import TokenData, create_access_token, decode_token


__all__ = [
    # JWT
    "create_access_token",
    "decode_token",
    "TokenData",
    # Dependencies
    "Caller",
    "get_current_caller",
    "oauth2_scheme",
]
