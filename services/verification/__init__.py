"""
Verification Service
====================

HTTP front end for order proof verification.

This service provides:
- Groth16 verification with at-most-once nullifier consumption
- Read-only proof checks that leave the ledger untouched
- Nullifier and commitment lookups
- Administrator-guarded verifying key rotation

Version: 1.0.0
"""

__version__ = "1.0.0"
