"""Key factory for two-party child keys.

Each child index is backed by exactly one key generation on the co-signing
service. The first request for an index runs keygen and caches the handle;
every later request returns the same key, so addresses can be regenerated
idempotently.
"""

import logging
from typing import Optional

from cosign_wallet.config import Settings, get_settings
from cosign_wallet.exceptions import ConfigurationError, EncodingError, ProtocolError
from cosign_wallet.hdwallet.base import ChildIndex
from cosign_wallet.hdwallet.keys import ChildKeyHandle
from cosign_wallet.signing.base import SigningServiceClient
from cosign_wallet.signing.factory import get_signing_client
from cosign_wallet.utils.locks import KeyedLockRegistry, keyed_lock

logger = logging.getLogger(__name__)


class KeyFactory:
    """Owns the co-signing client and the index -> handle cache.

    Usage:
        factory = KeyFactory(HttpSigningClient("http://localhost:8000"))
        child = await factory.get_or_derive(ChildIndex(0))
    """

    def __init__(
        self,
        signing_client: SigningServiceClient,
        derivation_timeout: Optional[float] = 60.0,
    ):
        """Initialize the factory.

        Args:
            signing_client: Co-signing service client
            derivation_timeout: Maximum wait for a concurrent derivation of the
                same index (None = wait forever)
        """
        if signing_client is None:
            raise ConfigurationError("KeyFactory requires a co-signing client")

        self.signing_client = signing_client
        self.derivation_timeout = derivation_timeout
        self._children: dict[int, ChildKeyHandle] = {}
        self._locks = KeyedLockRegistry()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "KeyFactory":
        """Build a factory with a client configured from settings.

        Raises:
            ConfigurationError: If the client cannot be created
        """
        settings = settings or get_settings()
        client = get_signing_client(settings)
        return cls(client, derivation_timeout=settings.key_derivation_timeout)

    async def get_or_derive(self, index: ChildIndex) -> ChildKeyHandle:
        """Get the child key at an index, generating it on first use.

        Args:
            index: Child index

        Returns:
            ChildKeyHandle for the index (a copy of the cached handle)

        Raises:
            ProtocolError: If key generation fails; nothing is cached
            LockTimeoutError: If a concurrent derivation holds the index too long
        """
        key = int(index)

        cached = self._children.get(key)
        if cached is not None:
            logger.debug(f"Found cached child key at index {key}")
            return cached.copy()

        async with keyed_lock(
            self._locks, key, timeout=self.derivation_timeout, operation="derive_child"
        ):
            # Another caller may have finished while we waited
            cached = self._children.get(key)
            if cached is not None:
                logger.debug(f"Found cached child key at index {key}")
                return cached.copy()

            logger.info(f"Generating child key at index {key}")
            keygen = await self.signing_client.generate_key()
            handle = ChildKeyHandle.from_keygen(self.signing_client, keygen, ChildIndex(key))
            try:
                handle.public_key()
            except EncodingError as e:
                logger.warning(f"Co-signer returned an undecodable key at index {key}: {e}")
                raise ProtocolError(f"keygen returned an invalid public key: {e}") from e
            self._children[key] = handle
            logger.info(
                f"Generated child key at index {key}: session {handle.session_id}"
            )

        return handle.copy()

    def cached_indices(self) -> list[ChildIndex]:
        """Indices with a generated key, ascending."""
        return [ChildIndex(i) for i in sorted(self._children)]

    def __contains__(self, index: ChildIndex) -> bool:
        return int(index) in self._children

    def __len__(self) -> int:
        return len(self._children)

    async def close(self) -> None:
        """Close the underlying co-signing client."""
        await self.signing_client.close()
