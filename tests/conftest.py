"""
Test Configuration
==================

Pytest fixtures for Shadowpool verifier tests.

Pairing checks take on the order of a second in pure Python, so keys and
proofs for the toy circuit are built once per session.
"""

import os
from collections.abc import AsyncGenerator, Iterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["VERIFIER_ADMIN"] = "0xadmin"

from shared.zk import (  # noqa: E402
    InMemoryReplayLedger,
    VerificationService,
    VerifyingKey,
    VerifyingKeyStore,
    ZKProof,
    reset_verification_service,
    set_verification_service,
)
from shared.zk.field import hash_to_field  # noqa: E402
from tests.zk_circuit import ToyCircuit, Trapdoor  # noqa: E402


ADMIN = "0xadmin"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


# =============================================================================
# Toy circuit
# =============================================================================


@pytest.fixture(scope="session")
def circuit() -> ToyCircuit:
    return ToyCircuit()


@pytest.fixture(scope="session")
def rotated_circuit() -> ToyCircuit:
    """Same circuit after a fresh trusted setup."""
    return ToyCircuit(Trapdoor(alpha=0x51, beta=0x52, gamma=0x53, delta=0x54, tau=0x55))


@pytest.fixture(scope="session")
def toy_vk(circuit: ToyCircuit) -> VerifyingKey:
    return circuit.verifying_key()


@pytest.fixture(scope="session")
def commitment() -> int:
    """Commitment to the secret square, H(9)."""
    return hash_to_field("square", 9)


@pytest.fixture(scope="session")
def nullifier_1() -> int:
    return hash_to_field("nullifier", 1)


@pytest.fixture(scope="session")
def nullifier_2() -> int:
    return hash_to_field("nullifier", 2)


@pytest.fixture(scope="session")
def valid_proof(circuit: ToyCircuit, commitment: int, nullifier_1: int) -> ZKProof:
    return circuit.prove(commitment, nullifier_1)


# =============================================================================
# Service
# =============================================================================


@pytest.fixture
def ledger() -> InMemoryReplayLedger:
    return InMemoryReplayLedger()


@pytest.fixture
def key_store(toy_vk: VerifyingKey) -> VerifyingKeyStore:
    return VerifyingKeyStore(admin=ADMIN, key=toy_vk)


@pytest.fixture
def service(key_store: VerifyingKeyStore, ledger: InMemoryReplayLedger) -> VerificationService:
    return VerificationService(key_store=key_store, ledger=ledger)


@pytest.fixture
def installed_service(service: VerificationService) -> Iterator[VerificationService]:
    """Make the service the one the HTTP routes resolve."""
    set_verification_service(service)
    yield service
    reset_verification_service()


@pytest_asyncio.fixture
async def verification_client(
    installed_service: VerificationService,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Verification Service."""
    from services.verification.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Bearer token for the verifier administrator."""
    from shared.auth import create_access_token

    token = create_access_token({"sub": ADMIN})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def outsider_headers() -> dict[str, str]:
    """Bearer token for an authenticated non-administrator."""
    from shared.auth import create_access_token

    token = create_access_token({"sub": "0xoutsider"})
    return {"Authorization": f"Bearer {token}"}
