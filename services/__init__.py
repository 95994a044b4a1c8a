"""
Shadowpool Services
===================

HTTP services for the Shadowpool order verifier.

Services:
- verification: Groth16 order proof verification and nullifier ledger
"""

__all__ = [
    "verification",
]
