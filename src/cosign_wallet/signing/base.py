"""Base interface for the remote co-signing service.

Two-party flow:
1. generate_key() runs the keygen handshake and returns our key share, the
   aggregated public key and the session id the service files it under
2. cosign() runs the signing handshake for an already-hashed message and
   returns the signature components R and s
3. The caller encodes (R, s) into a 64-byte ed25519 signature

Neither party ever holds the full private key.
"""

import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyShare:
    """Local party's share of a two-party key.

    The material is opaque to the wallet: it is stored, copied and handed
    back to the service on every cosign call, never interpreted.
    """

    material: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "material", MappingProxyType(copy.deepcopy(dict(self.material))))

    def copy(self) -> "KeyShare":
        return KeyShare(self.to_dict())

    def to_dict(self) -> dict:
        return copy.deepcopy(dict(self.material))

    def __repr__(self) -> str:
        return f"KeyShare(<{len(self.material)} fields redacted>)"


@dataclass(frozen=True)
class KeyGenResult:
    """Result of a two-party key generation.

    Attributes:
        key_share: Our share of the key
        aggregated_public_key: Combined public key as a big integer
        session_id: Identifier the service correlates the key with
    """

    key_share: KeyShare
    aggregated_public_key: int
    session_id: str


@dataclass(frozen=True)
class CosignResult:
    """Result of a two-party signing round.

    Attributes:
        R: Compressed curve point as a big-endian big integer
        s: Signature scalar as a big-endian big integer
    """

    R: int
    s: int


class SigningServiceClient(ABC):
    """Abstract handle on the remote co-signing party.

    Implementations raise ProtocolError on failure and SigningTimeoutError
    when a round trip exceeds its timeout. Connection state is configured
    once at construction and shared read-only by every key handle.
    """

    @abstractmethod
    async def generate_key(self) -> KeyGenResult:
        """Run a two-party key generation handshake.

        Returns:
            KeyGenResult with share, aggregated public key and session id
        """
        pass

    @abstractmethod
    async def cosign(
        self,
        message: bytes,
        key_share: KeyShare,
        aggregated_public_key: int,
        session_id: str,
    ) -> CosignResult:
        """Run a two-party signing handshake over a message hash.

        Args:
            message: Already-hashed message bytes
            key_share: Our share of the key
            aggregated_public_key: Combined public key
            session_id: Session id returned by generate_key

        Returns:
            CosignResult with R and s
        """
        pass

    async def health_check(self) -> bool:
        """Check if the co-signing service is reachable."""
        return True

    async def close(self) -> None:
        """Release any connection resources."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
