"""Child key handles.

A handle holds our share of one two-party key plus everything needed to ask
the co-signer for a signature. It never holds a usable private key.
"""

import logging

from cosign_wallet.hdwallet.base import AccountAddress, ChildIndex, derive_address
from cosign_wallet.signing.base import KeyGenResult, KeyShare, SigningServiceClient
from cosign_wallet.signing.encoding import encode_public_key, encode_signature

logger = logging.getLogger(__name__)

MESSAGE_HASH_LENGTH = 32


class ChildKeyHandle:
    """Materialized state of one derived child key.

    Handles are created by KeyFactory. Copies share the same logical key:
    the key share is duplicated, the signing client is shared.
    """

    def __init__(
        self,
        signing_client: SigningServiceClient,
        key_share: KeyShare,
        aggregated_public_key: int,
        session_id: str,
        index: ChildIndex,
    ):
        self._signing_client = signing_client
        self._key_share = key_share
        self._aggregated_public_key = aggregated_public_key
        self._session_id = session_id
        self._index = index.copy()

    @classmethod
    def from_keygen(
        cls,
        signing_client: SigningServiceClient,
        keygen: KeyGenResult,
        index: ChildIndex,
    ) -> "ChildKeyHandle":
        return cls(
            signing_client=signing_client,
            key_share=keygen.key_share,
            aggregated_public_key=keygen.aggregated_public_key,
            session_id=keygen.session_id,
            index=index,
        )

    @property
    def index(self) -> ChildIndex:
        return self._index.copy()

    @property
    def session_id(self) -> str:
        return self._session_id

    def public_key(self) -> bytes:
        """Canonical 32-byte encoding of the aggregated public key."""
        return encode_public_key(self._aggregated_public_key)

    def address(self) -> AccountAddress:
        """Compute the account address of this key.

        Raises:
            AddressError: If the digest cannot form an address
        """
        return derive_address(self.public_key())

    async def sign(self, message_hash: bytes) -> bytes:
        """Sign a 32-byte message hash with the co-signer.

        Returns:
            64-byte ed25519 signature R || s

        Raises:
            ProtocolError: If the co-signing round fails
        """
        if len(message_hash) != MESSAGE_HASH_LENGTH:
            raise ValueError(
                f"Message hash must be {MESSAGE_HASH_LENGTH} bytes, got {len(message_hash)}"
            )

        logger.debug(f"Requesting co-signature for index {self._index.value}")
        result = await self._signing_client.cosign(
            message_hash,
            self._key_share,
            self._aggregated_public_key,
            self._session_id,
        )
        return encode_signature(result.R, result.s)

    def copy(self) -> "ChildKeyHandle":
        return ChildKeyHandle(
            signing_client=self._signing_client,
            key_share=self._key_share.copy(),
            aggregated_public_key=self._aggregated_public_key,
            session_id=self._session_id,
            index=self._index,
        )

    def __repr__(self) -> str:
        return (
            f"ChildKeyHandle(index={self._index.value}, session={self._session_id}, "
            f"public_key={self.public_key().hex()})"
        )
