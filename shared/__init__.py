"""
Shadowpool Shared Library
=========================

Common utilities and the proof verification core used by the verifier
service.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - auth: JWT bearer authentication
    - models: Shared response models
    - zk: Groth16 verification and the nullifier replay ledger

Version: 1.0.0
"""

__version__ = "1.0.0"

from shared.config import settings
from shared.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
