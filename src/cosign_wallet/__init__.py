"""Hierarchical wallet backed by two-party EdDSA keys."""

from cosign_wallet.config import Settings, configure_logging, get_settings
from cosign_wallet.exceptions import (
    AddressError,
    AlreadyGeneratedError,
    ConfigurationError,
    DuplicateAddressError,
    EncodingError,
    IndexGapError,
    ProtocolError,
    RecoveryError,
    SigningTimeoutError,
    UnknownAddressError,
    WalletError,
)
from cosign_wallet.hdwallet import AccountAddress, ChildIndex, ChildKeyHandle, KeyFactory
from cosign_wallet.signing import HttpSigningClient, SigningServiceClient
from cosign_wallet.transaction import RawTransaction, SignedTransaction
from cosign_wallet.wallet import Wallet

__all__ = [
    "AccountAddress",
    "AddressError",
    "AlreadyGeneratedError",
    "ChildIndex",
    "ChildKeyHandle",
    "ConfigurationError",
    "DuplicateAddressError",
    "EncodingError",
    "HttpSigningClient",
    "IndexGapError",
    "KeyFactory",
    "ProtocolError",
    "RawTransaction",
    "RecoveryError",
    "Settings",
    "SignedTransaction",
    "SigningServiceClient",
    "SigningTimeoutError",
    "UnknownAddressError",
    "Wallet",
    "WalletError",
    "configure_logging",
    "get_settings",
]
