"""
Verifying Key Store
===================

Holds the circuit's verifying key and the administrator identity allowed
to replace it.

The key is an immutable model. Replacement swaps the whole reference under
a lock, so a verification that took a snapshot with current() sees either
the old key or the new one, never a mix. Replacing the key does not revoke
nullifiers or commitments recorded under a previous key.

Version: 1.0.0
"""

import json
import threading
from pathlib import Path

from shared.logging import get_logger
from shared.zk.errors import AdminRoleError, CurveArithmeticError, VerifyingKeyError
from shared.zk.field import G1_GENERATOR, G2_GENERATOR, to_g1, to_g2
from shared.zk.models import VerifyingKey


logger = get_logger(__name__)


def provisional_verifying_key(public_input_count: int = 2) -> VerifyingKey:
    """
    Build a placeholder key from the group generators.

    It has the right shape for the circuit but accepts no real proof. Used
    to bootstrap a store until the trusted-setup key is installed.
    """
    return VerifyingKey(
        alpha1=G1_GENERATOR,
        beta2=G2_GENERATOR,
        gamma2=G2_GENERATOR,
        delta2=G2_GENERATOR,
        ic=tuple(G1_GENERATOR for _ in range(public_input_count + 1)),
    )


def load_verifying_key(path: str | Path) -> VerifyingKey:
    """
    Load a snarkjs verification_key.json file.

    Raises:
        FileNotFoundError: If the file does not exist
        VerifyingKeyError: If the file is not a valid Groth16 key
    """
    path = Path(path)
    with open(path) as f:
        data = json.load(f)

    try:
        return VerifyingKey.from_snarkjs(data)
    except (KeyError, TypeError, ValueError) as e:
        raise VerifyingKeyError(f"Invalid verifying key in {path}: {e}") from e


class VerifyingKeyStore:
    """
    Administrator-guarded holder of the current verifying key.

    Usage:
        store = VerifyingKeyStore(admin="0xadmin")
        store.install("0xadmin", load_verifying_key("verification_key.json"))
        vk = store.current()
    """

    def __init__(
        self,
        admin: str,
        key: VerifyingKey | None = None,
        public_input_count: int = 2,
    ) -> None:
        """
        Initialize the store.

        Args:
            admin: Identity allowed to replace the key
            key: Initial key; a provisional key is used when omitted
            public_input_count: Number of public inputs the circuit exposes
        """
        if not admin:
            raise ValueError("Administrator identity must not be empty")

        self.public_input_count = public_input_count
        self._lock = threading.Lock()
        self._admin = admin

        if key is None:
            key = provisional_verifying_key(public_input_count)
            self.provisional = True
            logger.warning("verifying_key_provisional", admin=admin)
        else:
            self._check_arity(key)
            self._check_points(key)
            self.provisional = False

        self._key = key

    @property
    def admin(self) -> str:
        return self._admin

    def current(self) -> VerifyingKey:
        """Return the key in force. The returned object is immutable."""
        return self._key

    def _check_arity(self, key: VerifyingKey) -> None:
        if key.public_input_count != self.public_input_count:
            raise VerifyingKeyError(
                f"Key has {len(key.ic)} IC points, circuit needs "
                f"{self.public_input_count + 1}"
            )

    def _check_points(self, key: VerifyingKey) -> None:
        try:
            for p in (key.alpha1, *key.ic):
                to_g1(p)
            for q in (key.beta2, key.gamma2, key.delta2):
                to_g2(q)
        except CurveArithmeticError as e:
            raise VerifyingKeyError(f"Verifying key point rejected: {e}") from e

    def _require_admin(self, caller: str, action: str) -> None:
        if caller != self._admin:
            logger.warning("admin_action_rejected", action=action, caller=caller)
            raise AdminRoleError(f"{caller!r} is not the administrator")

    def install(self, caller: str, key: VerifyingKey) -> None:
        """
        Replace the verifying key atomically.

        Raises:
            AdminRoleError: If caller is not the administrator
            VerifyingKeyError: If the key does not match the circuit arity
                or one of its points is not a valid curve point
        """
        with self._lock:
            self._require_admin(caller, "install_verifying_key")
            self._check_arity(key)
            self._check_points(key)
            self._key = key
            self.provisional = False

        # Proofs verified under the previous key stay recorded as verified
        logger.info(
            "verifying_key_installed",
            admin=caller,
            ic_points=len(key.ic),
            prior_results_retained=True,
        )

    def transfer_admin(self, caller: str, new_admin: str) -> None:
        """
        Hand the administrator role to another identity.

        Raises:
            AdminRoleError: If caller is not the administrator
            ValueError: If new_admin is empty
        """
        with self._lock:
            self._require_admin(caller, "transfer_admin_role")
            if not new_admin:
                raise ValueError("New administrator identity must not be empty")
            self._admin = new_admin

        logger.info("admin_role_transferred", previous=caller, new_admin=new_admin)
