"""Two-party EdDSA signing services.

Provides:
- SigningServiceClient: interface to the remote co-signing party
- HttpSigningClient: httpx implementation of that interface
- Signature encoding helpers for ed25519 output
"""

from cosign_wallet.signing.base import (
    CosignResult,
    KeyGenResult,
    KeyShare,
    SigningServiceClient,
)
from cosign_wallet.signing.encoding import (
    encode_public_key,
    encode_signature,
    reverse_scalar_bytes,
)
from cosign_wallet.signing.factory import get_signing_client
from cosign_wallet.signing.http import HttpSigningClient

__all__ = [
    "CosignResult",
    "KeyGenResult",
    "KeyShare",
    "SigningServiceClient",
    "HttpSigningClient",
    "encode_public_key",
    "encode_signature",
    "reverse_scalar_bytes",
    "get_signing_client",
]
