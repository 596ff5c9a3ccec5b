"""Two-party HD wallet.

The wallet hands out account addresses by walking child indexes in order
(the "key leaf") and signs transactions by routing them to the child key
that owns the sending address. Private keys never exist locally; every
key lives as a share on our side and a share on the co-signing service.

Note that nothing here persists key material. A wallet only survives as
long as its KeyFactory's cache does.
"""

import asyncio
import logging
from typing import Optional

from cosign_wallet.config import Settings
from cosign_wallet.exceptions import (
    AlreadyGeneratedError,
    DuplicateAddressError,
    IndexGapError,
    UnknownAddressError,
)
from cosign_wallet.hdwallet.base import AccountAddress, ChildIndex
from cosign_wallet.hdwallet.factory import KeyFactory
from cosign_wallet.transaction import (
    DefaultTransactionEncoder,
    RawTransaction,
    SignedTransaction,
    TransactionEncoder,
)

logger = logging.getLogger(__name__)


class Wallet:
    """Address book and signer over a KeyFactory.

    Usage:
        wallet = Wallet(KeyFactory.from_settings())
        address, index = await wallet.new_address()
        signed = await wallet.sign_transaction(address, RawTransaction(raw))
    """

    def __init__(
        self,
        key_factory: KeyFactory,
        encoder: Optional[TransactionEncoder] = None,
    ):
        """Initialize an empty wallet.

        Args:
            key_factory: Factory that derives child keys
            encoder: Transaction serializer/hasher (defaults to DefaultTransactionEncoder)
        """
        self.key_factory = key_factory
        self.encoder = encoder or DefaultTransactionEncoder()
        self._addresses: dict[AccountAddress, ChildIndex] = {}
        self._key_leaf = ChildIndex(0)
        self._leaf_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Wallet":
        """Create an empty wallet talking to the configured co-signer."""
        return cls(KeyFactory.from_settings(settings))

    async def close(self) -> None:
        await self.key_factory.close()

    @property
    def key_leaf(self) -> int:
        """Next unused child index."""
        return self._key_leaf.value

    async def generate_up_to(self, target_depth: int) -> None:
        """Generate addresses until the key leaf reaches target_depth.

        Raises:
            AlreadyGeneratedError: If the key leaf is already past target_depth
            ProtocolError: If a key generation fails; earlier addresses are kept
        """
        async with self._leaf_lock:
            if self._key_leaf.value > target_depth:
                raise AlreadyGeneratedError(self._key_leaf.value, target_depth)

            while self._key_leaf.value < target_depth:
                await self._new_address()

    async def new_address(self) -> tuple[AccountAddress, ChildIndex]:
        """Derive the key at the key leaf, record its address and advance.

        Returns:
            Tuple of (address, child index)

        Raises:
            DuplicateAddressError: If the address is already held
            ProtocolError: If key generation fails; wallet state is unchanged
        """
        async with self._leaf_lock:
            return await self._new_address()

    async def _new_address(self) -> tuple[AccountAddress, ChildIndex]:
        index = self._key_leaf.copy()
        child = await self.key_factory.get_or_derive(index)
        address = child.address()

        existing = self._addresses.get(address)
        if existing is not None:
            logger.critical(
                f"Duplicate address {address} at index {index.value}, "
                f"already held at index {existing.value}"
            )
            raise DuplicateAddressError(str(address), existing.value, index.value)

        self._addresses[address] = index
        self._key_leaf.increment()
        logger.info(f"New address {address} at index {index.value}")
        return address, index

    async def address_at(self, index: ChildIndex) -> AccountAddress:
        """Address of the key at any index, without touching the key leaf."""
        child = await self.key_factory.get_or_derive(index)
        return child.address()

    def all_addresses(self) -> list[AccountAddress]:
        """All wallet addresses ordered by child index.

        Raises:
            IndexGapError: If any index below the key leaf has no address
        """
        by_index = {index.value: address for address, index in self._addresses.items()}
        depth = self._key_leaf.value

        addresses = []
        for i in range(depth):
            address = by_index.get(i)
            if address is None:
                logger.error(f"Address map missing child index {i} at depth {depth}")
                raise IndexGapError(i, depth)
            addresses.append(address)
        return addresses

    def index_of(self, address: AccountAddress) -> ChildIndex:
        """Child index owning an address.

        Raises:
            UnknownAddressError: If the address is not in the wallet
        """
        index = self._addresses.get(address)
        if index is None:
            raise UnknownAddressError(str(address))
        return index.copy()

    async def sign_transaction(
        self, address: AccountAddress, txn: RawTransaction
    ) -> SignedTransaction:
        """Sign a raw transaction with the key owning address.

        Raises:
            UnknownAddressError: If the address is not in the wallet (no network call)
            ProtocolError: If co-signing fails
        """
        index = self.index_of(address)

        raw_bytes = self.encoder.serialize(txn)
        txn_hash = self.encoder.hash(raw_bytes)

        child = await self.key_factory.get_or_derive(index)
        signature = await child.sign(txn_hash)
        logger.info(f"Signed transaction for {address} (index {index.value})")

        return SignedTransaction(
            raw_txn_bytes=raw_bytes,
            sender_public_key=child.public_key(),
            sender_signature=signature,
        )

    def __contains__(self, address: AccountAddress) -> bool:
        return address in self._addresses

    def __len__(self) -> int:
        return len(self._addresses)
