"""Transaction encoding collaborators.

The wallet never interprets transaction contents. It asks a
TransactionEncoder for the bytes to ship and the hash to sign, then packs
raw bytes, public key and signature into a SignedTransaction.
"""

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass

# Domain separator mixed into every raw transaction hash
RAW_TRANSACTION_SALT = b"RawTransaction@@$$LIBRA$$@@"


@dataclass(frozen=True)
class RawTransaction:
    """An unsigned transaction in its serialized form."""

    raw_bytes: bytes

    @classmethod
    def from_hex(cls, value: str) -> "RawTransaction":
        return cls(bytes.fromhex(value.replace("0x", "")))


@dataclass(frozen=True)
class SignedTransaction:
    """Signed transaction envelope.

    Attributes:
        raw_txn_bytes: Serialized raw transaction
        sender_public_key: 32-byte ed25519 public key
        sender_signature: 64-byte ed25519 signature
    """

    raw_txn_bytes: bytes
    sender_public_key: bytes
    sender_signature: bytes

    def to_dict(self) -> dict:
        """Hex-encoded fields, as expected by transaction submission."""
        return {
            "raw_txn_bytes": self.raw_txn_bytes.hex(),
            "sender_public_key": self.sender_public_key.hex(),
            "sender_signature": self.sender_signature.hex(),
        }


class TransactionEncoder(ABC):
    """Serializes and hashes raw transactions for signing."""

    @abstractmethod
    def serialize(self, txn: RawTransaction) -> bytes:
        """Return the canonical bytes of a transaction."""
        pass

    @abstractmethod
    def hash(self, raw_bytes: bytes) -> bytes:
        """Return the 32-byte hash that gets signed."""
        pass


class DefaultTransactionEncoder(TransactionEncoder):
    """Salted SHA3-256 over already-serialized transaction bytes.

    hash = SHA3-256(SHA3-256(RAW_TRANSACTION_SALT) || raw_bytes)
    """

    def __init__(self, salt: bytes = RAW_TRANSACTION_SALT):
        self._prefix = hashlib.sha3_256(salt).digest()

    def serialize(self, txn: RawTransaction) -> bytes:
        return txn.raw_bytes

    def hash(self, raw_bytes: bytes) -> bytes:
        return hashlib.sha3_256(self._prefix + raw_bytes).digest()
