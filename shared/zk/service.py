"""
Verification Service
====================

Orchestrates validation, replay detection, public-input accumulation,
pairing verification and ledger update into one verify-and-consume call.

Flow:
    validate -> nullifier pre-check -> accumulate -> pairing check
             -> atomic ledger consume -> notify

The arithmetic stages are pure and run without holding any lock. The
ledger's insert-if-absent is the only synchronization point, so two
concurrent calls with the same nullifier cannot both succeed.

Version: 1.0.0
"""

import threading
import time
from collections.abc import Callable, Sequence
from typing import Any

from shared.config import settings
from shared.logging import get_logger
from shared.zk.accumulator import accumulate
from shared.zk.errors import InvalidProofError, NullifierReusedError
from shared.zk.keystore import VerifyingKeyStore, load_verifying_key
from shared.zk.ledger import InMemoryReplayLedger, ReplayLedger, create_replay_ledger
from shared.zk.models import VerificationEvent, VerificationResult, VerifyingKey, ZKProof
from shared.zk.validator import ProofValidator
from shared.zk.verifier import PairingVerifier


logger = get_logger(__name__)

VerificationListener = Callable[[VerificationEvent], None]


class VerificationService:
    """
    Verify order proofs and consume their nullifiers at most once.

    Usage:
        service = VerificationService(VerifyingKeyStore(admin="0xadmin", key=vk))

        result = service.verify_and_consume(proof, [commitment, nullifier])
        assert service.is_nullifier_used(nullifier)
    """

    def __init__(
        self,
        key_store: VerifyingKeyStore,
        ledger: ReplayLedger | None = None,
        verifier: PairingVerifier | None = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            key_store: Holder of the verifying key and administrator identity
            ledger: Replay ledger; an in-memory ledger is used when omitted
            verifier: Pairing verifier; one with subgroup checks when omitted
        """
        self.key_store = key_store
        self.ledger = ledger if ledger is not None else InMemoryReplayLedger()
        self.verifier = verifier if verifier is not None else PairingVerifier()
        self.validator = ProofValidator(arity=key_store.public_input_count)
        self._listeners: list[VerificationListener] = []

    # =========================================================================
    # Verification
    # =========================================================================

    def _check(
        self,
        proof: ZKProof,
        public_inputs: Sequence[int],
    ) -> tuple[int, int, bool]:
        inputs = list(public_inputs)
        self.validator.validate(proof, inputs)

        commitment, nullifier = inputs[0], inputs[1]

        # Replay is detected before any pairing work
        if self.ledger.is_nullifier_used(nullifier):
            logger.warning("nullifier_reused", nullifier=str(nullifier))
            raise NullifierReusedError(nullifier)

        vk = self.key_store.current()
        vk_x = accumulate(vk.ic, inputs)
        ok = self.verifier.verify(proof, vk, vk_x)
        return commitment, nullifier, ok

    def verify_and_consume(
        self,
        proof: ZKProof,
        public_inputs: Sequence[int],
    ) -> VerificationResult:
        """
        Verify a proof and consume its nullifier.

        Args:
            proof: Groth16 proof
            public_inputs: [commitment, nullifier]

        Returns:
            VerificationResult for the consumed nullifier

        Raises:
            ProofValidationError: Malformed proof or inputs, no state change
            NullifierReusedError: Nullifier already consumed, no state change
            InvalidProofError: Pairing check failed, no state change
            CurveArithmeticError: A point was rejected by the curve backend
        """
        start_time = time.perf_counter()
        commitment, nullifier, ok = self._check(proof, public_inputs)

        if not ok:
            self._emit(VerificationEvent(commitment=commitment, nullifier=nullifier, valid=False))
            raise InvalidProofError(commitment, nullifier)

        if not self.ledger.consume(nullifier, commitment):
            # Another request consumed the nullifier while this one was pairing
            logger.warning("nullifier_reused", nullifier=str(nullifier), concurrent=True)
            raise NullifierReusedError(nullifier)

        verification_time_ms = int((time.perf_counter() - start_time) * 1000)
        self._emit(VerificationEvent(commitment=commitment, nullifier=nullifier, valid=True))

        return VerificationResult(
            valid=True,
            commitment=commitment,
            nullifier=nullifier,
            consumed=True,
            verification_time_ms=verification_time_ms,
        )

    def verify_view(self, proof: ZKProof, public_inputs: Sequence[int]) -> bool:
        """
        Check a proof without consuming its nullifier or emitting events.

        Raises the same validation and replay errors as verify_and_consume.
        Returns True exactly when verify_and_consume would succeed against
        the same ledger state.
        """
        _, _, ok = self._check(proof, public_inputs)
        return ok

    # =========================================================================
    # Queries
    # =========================================================================

    def is_nullifier_used(self, nullifier: int) -> bool:
        return self.ledger.is_nullifier_used(nullifier)

    def is_commitment_verified(self, commitment: int) -> bool:
        return self.ledger.is_commitment_verified(commitment)

    @property
    def verifying_key(self) -> VerifyingKey:
        return self.key_store.current()

    @property
    def admin(self) -> str:
        return self.key_store.admin

    # =========================================================================
    # Administration
    # =========================================================================

    def install_verifying_key(self, caller: str, key: VerifyingKey) -> None:
        """Replace the verifying key (administrator only)."""
        self.key_store.install(caller, key)

    replace_verifying_key = install_verifying_key

    def transfer_admin_role(self, caller: str, new_admin: str) -> None:
        """Transfer the administrator role (administrator only)."""
        self.key_store.transfer_admin(caller, new_admin)

    # =========================================================================
    # Notifications
    # =========================================================================

    def subscribe(self, listener: VerificationListener) -> None:
        """Register a callable that receives every VerificationEvent."""
        self._listeners.append(listener)

    def _emit(self, event: VerificationEvent) -> None:
        logger.info(
            "proof_verified" if event.valid else "proof_rejected",
            commitment=str(event.commitment),
            nullifier=str(event.nullifier),
            valid=event.valid,
        )
        for listener in self._listeners:
            try:
                listener(event)
            except Exception as e:
                logger.error(
                    "verification_listener_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )

    def health_check(self) -> dict[str, Any]:
        """Report ledger and key status."""
        return {
            "status": "healthy",
            "provisional_key": self.key_store.provisional,
            "public_inputs": self.key_store.public_input_count,
            "ledger": self.ledger.health_check(),
        }


# Global service instance
_service: VerificationService | None = None
_service_lock = threading.Lock()


def _build_service() -> VerificationService:
    cfg = settings.verifier
    key = load_verifying_key(cfg.verifying_key_path) if cfg.verifying_key_path else None

    service = VerificationService(
        key_store=VerifyingKeyStore(
            admin=cfg.admin,
            key=key,
            public_input_count=cfg.public_input_count,
        ),
        ledger=create_replay_ledger(cfg),
        verifier=PairingVerifier(check_subgroup=cfg.check_g2_subgroup),
    )

    logger.info(
        "verification_service_initialized",
        admin=cfg.admin,
        key_path=str(cfg.verifying_key_path) if cfg.verifying_key_path else None,
        ledger_backend=cfg.ledger_backend.value,
    )
    return service


def get_verification_service() -> VerificationService:
    """
    Get the configured verification service instance.

    Concurrent first calls all receive the same instance, so every caller
    shares one ledger.

    Returns:
        VerificationService built from settings on first use
    """
    global _service

    if _service is None:
        with _service_lock:
            if _service is None:
                _service = _build_service()

    return _service


def set_verification_service(service: VerificationService) -> None:
    """
    Set a custom verification service.

    Args:
        service: VerificationService instance
    """
    global _service
    with _service_lock:
        _service = service
    logger.info("verification_service_set", admin=service.admin)


def reset_verification_service() -> None:
    """Reset the service to be re-initialized."""
    global _service
    with _service_lock:
        _service = None
