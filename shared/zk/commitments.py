"""
Order Commitments
=================

Helpers for building the public inputs of a confidential order proof.

A trader commits to (salt, amount, price, side, token_id, trader) and later
reveals the order with a proof whose public inputs are
[commitment, nullifier]. The nullifier depends only on the salt and the
trader, so one committed order can be consumed at most once.

The trader is an address, given as an integer or a decimal or 0x-prefixed
string; every spelling of the same address hashes the same way.

These hashes are SHA-256 reduced into the BN254 scalar field. They must match
whatever hash the deployed circuit constrains.
"""

import secrets

from shared.zk.field import SCALAR_FIELD_MODULUS, hash_to_field
from shared.zk.models import to_int


COMMITMENT_DOMAIN = "order-commitment"
NULLIFIER_DOMAIN = "order-nullifier"


def generate_salt() -> int:
    """Generate a random salt as a field element."""
    # 31 bytes always stays under the field order
    return int.from_bytes(secrets.token_bytes(31), "big") % SCALAR_FIELD_MODULUS


def order_commitment(
    salt: int,
    amount: int,
    price: int,
    side: int,
    token_id: int,
    trader: int | str,
) -> int:
    """Commitment to a hidden order."""
    if side not in (0, 1):
        raise ValueError(f"Order side must be 0 (buy) or 1 (sell), got {side}")
    if amount <= 0:
        raise ValueError("Order amount must be positive")
    return hash_to_field(COMMITMENT_DOMAIN, salt, amount, price, side, token_id, to_int(trader))


def order_nullifier(salt: int, trader: int | str) -> int:
    """Nullifier for the order committed with this salt by this trader."""
    return hash_to_field(NULLIFIER_DOMAIN, salt, to_int(trader))


def public_inputs(commitment: int, nullifier: int) -> list[int]:
    """Order the public inputs the way the circuit declares them."""
    return [commitment, nullifier]
