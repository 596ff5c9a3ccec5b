"""Byte encodings for two-party EdDSA outputs.

The co-signing protocol hands back big integers in big-endian form. An
ed25519 signature is R (32 bytes, compressed point as produced by the
protocol) followed by s encoded little-endian, so the scalar's bytes are
reversed before concatenation.
"""

from typing import Union

from cosign_wallet.exceptions import EncodingError

POINT_LENGTH = 32
SCALAR_LENGTH = 32
SIGNATURE_LENGTH = POINT_LENGTH + SCALAR_LENGTH
PUBLIC_KEY_LENGTH = 32


def _int_to_be_bytes(value: int, length: int, what: str) -> bytes:
    if value < 0:
        raise EncodingError(f"{what} must be non-negative")
    try:
        return value.to_bytes(length, "big")
    except OverflowError:
        raise EncodingError(f"{what} does not fit in {length} bytes")


def encode_point(value: int) -> bytes:
    """Encode a compressed curve point big integer as 32 zero-padded bytes."""
    return _int_to_be_bytes(value, POINT_LENGTH, "Curve point")


def reverse_scalar_bytes(s_native_be: bytes) -> bytes:
    """Reverse a 32-byte big-endian scalar into little-endian order.

    out[i] == s_native_be[31 - i] for every i in 0..32.
    """
    if len(s_native_be) != SCALAR_LENGTH:
        raise EncodingError(
            f"Scalar must be {SCALAR_LENGTH} bytes, got {len(s_native_be)}"
        )
    return bytes(s_native_be[SCALAR_LENGTH - 1 - i] for i in range(SCALAR_LENGTH))


def encode_scalar(value: int) -> bytes:
    """Encode a scalar big integer as 32 little-endian bytes."""
    return reverse_scalar_bytes(_int_to_be_bytes(value, SCALAR_LENGTH, "Scalar"))


def encode_signature(R: int, s: int) -> bytes:
    """Build a 64-byte ed25519 signature from protocol outputs.

    Args:
        R: Compressed point big integer
        s: Scalar big integer (big-endian native form)

    Returns:
        R (32 bytes) || s (32 bytes, little-endian)
    """
    return encode_point(R) + encode_scalar(s)


def encode_public_key(value: Union[int, bytes, str]) -> bytes:
    """Canonical 32-byte encoding of an aggregated public key.

    Accepts the protocol's big integer, raw bytes, or a hex string
    (with or without 0x prefix, possibly missing leading zeros).
    """
    if isinstance(value, bytes):
        if len(value) > PUBLIC_KEY_LENGTH:
            raise EncodingError(
                f"Public key must be at most {PUBLIC_KEY_LENGTH} bytes, got {len(value)}"
            )
        return value.rjust(PUBLIC_KEY_LENGTH, b"\x00")

    if isinstance(value, str):
        try:
            value = int(value.replace("0x", ""), 16)
        except ValueError:
            raise EncodingError(f"Invalid public key hex: {value!r}")

    return _int_to_be_bytes(value, PUBLIC_KEY_LENGTH, "Public key")


def parse_hex_int(value: str) -> int:
    """Parse a hex string (optionally 0x-prefixed) into an integer."""
    try:
        return int(value.replace("0x", ""), 16)
    except (AttributeError, ValueError):
        raise EncodingError(f"Invalid hex value: {value!r}")
