"""HD wallet module for two-party child key derivation."""

from cosign_wallet.hdwallet.base import AccountAddress, ChildIndex, derive_address
from cosign_wallet.hdwallet.factory import KeyFactory
from cosign_wallet.hdwallet.keys import ChildKeyHandle

__all__ = [
    "AccountAddress",
    "ChildIndex",
    "ChildKeyHandle",
    "KeyFactory",
    "derive_address",
]
