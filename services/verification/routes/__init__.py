"""
Verification Service Routes
===========================

API route handlers for the verification service.
"""

from services.verification.routes import admin, ledger, verification


__all__ = ["admin", "ledger", "verification"]
