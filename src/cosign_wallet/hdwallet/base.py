"""Child indexes and account addresses.

Child keys are enumerated by a plain 64-bit counter. Each key's account
address is the SHA3-256 hash of its 32-byte public key.
"""

import hashlib
from dataclasses import dataclass
from functools import total_ordering

from cosign_wallet.exceptions import AddressError

MAX_CHILD_INDEX = 2**64 - 1

# Address width in bytes
ADDRESS_LENGTH = 32


@total_ordering
class ChildIndex:
    """A child number identifying one derivation slot.

    Usage:
        index = ChildIndex(0)
        index.increment()
        assert index == ChildIndex(1)
    """

    __slots__ = ("_value",)

    def __init__(self, value: int = 0):
        if isinstance(value, ChildIndex):
            value = value.value
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"Child index must be an int, got {type(value).__name__}")
        if value < 0 or value > MAX_CHILD_INDEX:
            raise ValueError(f"Child index out of range: {value}")
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def increment(self) -> None:
        """Bump the index by exactly one."""
        if self._value == MAX_CHILD_INDEX:
            raise OverflowError("Child index exhausted")
        self._value += 1

    def copy(self) -> "ChildIndex":
        return ChildIndex(self._value)

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __eq__(self, other) -> bool:
        if isinstance(other, ChildIndex):
            return self._value == other._value
        return NotImplemented

    def __lt__(self, other) -> bool:
        if isinstance(other, ChildIndex):
            return self._value < other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"ChildIndex({self._value})"


@dataclass(frozen=True)
class AccountAddress:
    """Fixed-width account identifier derived from a public key."""

    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, bytes):
            raise AddressError(f"Account address must be bytes, got {type(self.value).__name__}")
        if len(self.value) != ADDRESS_LENGTH:
            raise AddressError(
                f"Account address must be {ADDRESS_LENGTH} bytes, got {len(self.value)}"
            )

    @classmethod
    def from_hex(cls, address: str) -> "AccountAddress":
        try:
            raw = bytes.fromhex(address.replace("0x", ""))
        except ValueError:
            raise AddressError(f"Invalid address hex: {address!r}")
        return cls(raw)

    def hex(self) -> str:
        return self.value.hex()

    def __bytes__(self) -> bytes:
        return self.value

    def __str__(self) -> str:
        return self.value.hex()

    def __repr__(self) -> str:
        return f"AccountAddress({self.value.hex()})"


def derive_address(public_key: bytes) -> AccountAddress:
    """Derive the account address for a public key.

    Args:
        public_key: 32-byte ed25519 public key

    Returns:
        AccountAddress built from the SHA3-256 digest
    """
    digest = hashlib.sha3_256(public_key).digest()
    return AccountAddress(digest[:ADDRESS_LENGTH])
