"""Pytest configuration and fixtures."""

import asyncio
import hashlib
import os

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["SIGNING_SERVICE_URL"] = "http://cosigner.test"

from cosign_wallet.exceptions import ProtocolError
from cosign_wallet.hdwallet.factory import KeyFactory
from cosign_wallet.signing.base import CosignResult, KeyGenResult, KeyShare, SigningServiceClient
from cosign_wallet.wallet import Wallet


class StubSigningService(SigningServiceClient):
    """Deterministic in-process co-signer.

    Every keygen derives a real ed25519 key from a counter, so signatures
    produced through the two-party interface verify with standard ed25519.
    The stub hands back R and s in the protocol's big-endian integer form.
    """

    def __init__(self, seed: bytes = b"stub-cosigner", delay: float = 0.0):
        self.seed = seed
        self.delay = delay
        self.keygen_calls = 0
        self.cosign_calls = 0
        self.fail_keygen = False
        self.fail_cosign = False
        self._keys: dict[str, Ed25519PrivateKey] = {}

    def _private_key(self, n: int) -> Ed25519PrivateKey:
        return Ed25519PrivateKey.from_private_bytes(
            hashlib.sha256(self.seed + n.to_bytes(8, "big")).digest()
        )

    async def generate_key(self) -> KeyGenResult:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_keygen:
            raise ProtocolError("keygen aborted by co-signer")

        n = self.keygen_calls
        self.keygen_calls += 1

        private_key = self._private_key(n)
        public_key = private_key.public_key().public_bytes(
            serialization.Encoding.Raw, serialization.PublicFormat.Raw
        )
        session_id = f"session-{n}"
        self._keys[session_id] = private_key

        return KeyGenResult(
            key_share=KeyShare({"party": 1, "generation": n}),
            aggregated_public_key=int.from_bytes(public_key, "big"),
            session_id=session_id,
        )

    async def cosign(self, message, key_share, aggregated_public_key, session_id) -> CosignResult:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_cosign:
            raise ProtocolError("cosign aborted by co-signer")
        if session_id not in self._keys:
            raise ProtocolError(f"unknown session {session_id}")

        self.cosign_calls += 1
        signature = self._keys[session_id].sign(message)
        return CosignResult(
            R=int.from_bytes(signature[:32], "big"),
            s=int.from_bytes(signature[32:], "little"),
        )


@pytest.fixture
def stub_service() -> StubSigningService:
    """Deterministic co-signer."""
    return StubSigningService()


@pytest.fixture
def key_factory(stub_service: StubSigningService) -> KeyFactory:
    """Key factory backed by the stub co-signer."""
    return KeyFactory(stub_service, derivation_timeout=5.0)


@pytest.fixture
def wallet(key_factory: KeyFactory) -> Wallet:
    """Empty wallet backed by the stub co-signer."""
    return Wallet(key_factory)
