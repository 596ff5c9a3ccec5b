"""HTTP client for the two-party EdDSA co-signing service.

Endpoints (JSON over HTTP):
- POST /eddsa/keygen            -> {"id", "key_share", "aggregated_public_key"}
- POST /eddsa/sign/{id}         -> {"R", "s"}
- GET  /health                  -> 200 when the service is up

Integers travel as hex strings.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx

from cosign_wallet.exceptions import (
    ConfigurationError,
    EncodingError,
    ProtocolError,
    SigningTimeoutError,
)
from cosign_wallet.signing.base import CosignResult, KeyGenResult, KeyShare, SigningServiceClient
from cosign_wallet.signing.encoding import encode_public_key, parse_hex_int

logger = logging.getLogger(__name__)


class HttpSigningClient(SigningServiceClient):
    """Co-signing service client over httpx.

    Usage:
        client = HttpSigningClient("http://localhost:8000", timeout=30.0)
        keygen = await client.generate_key()
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 30.0,
        api_token: str = "",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            endpoint: Base URL of the co-signing service
            timeout: Overall timeout in seconds for each round trip
            api_token: Optional bearer token
            transport: Optional httpx transport override (used in tests)
        """
        if not endpoint:
            raise ConfigurationError("Co-signing service endpoint is not configured")
        if timeout <= 0:
            raise ConfigurationError(f"Invalid signing timeout: {timeout}")

        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout

        headers = {"Content-Type": "application/json"}
        if api_token:
            headers["Authorization"] = f"Bearer {api_token}"

        self._client = httpx.AsyncClient(
            base_url=self.endpoint,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def _request(
        self, method: str, path: str, operation: str, expect_json: bool = True, **kwargs
    ) -> Any:
        """Send a request and return the decoded JSON body (None if not expected).

        Raises:
            SigningTimeoutError: If the round trip exceeds the timeout
            ProtocolError: On transport errors, non-2xx status or bad JSON
        """
        try:
            response = await asyncio.wait_for(
                self._client.request(method, path, **kwargs),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning(f"Co-signer {operation} timed out after {self.timeout}s")
            raise SigningTimeoutError(f"{operation} timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            logger.warning(f"Co-signer {operation} failed: {e}")
            raise ProtocolError(f"{operation} failed: {e}") from e

        if response.status_code >= 400:
            logger.warning(f"Co-signer {operation} returned HTTP {response.status_code}")
            raise ProtocolError(
                f"{operation} failed with HTTP {response.status_code}: {response.text[:200]}"
            )

        if not expect_json:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ProtocolError(f"{operation} returned malformed JSON") from e

    async def generate_key(self) -> KeyGenResult:
        """Run key generation against the co-signer."""
        data = await self._request("POST", "/eddsa/keygen", "keygen", json={})

        try:
            session_id = str(data["id"])
            key_share = KeyShare(data["key_share"])
            aggregated_public_key = parse_hex_int(data["aggregated_public_key"])
            encode_public_key(aggregated_public_key)
        except (KeyError, TypeError, ValueError, EncodingError) as e:
            raise ProtocolError(f"keygen returned malformed response: {e}") from e

        if not session_id:
            raise ProtocolError("keygen returned an empty session id")

        logger.debug(f"Co-signer keygen completed: session {session_id}")
        return KeyGenResult(
            key_share=key_share,
            aggregated_public_key=aggregated_public_key,
            session_id=session_id,
        )

    async def cosign(
        self,
        message: bytes,
        key_share: KeyShare,
        aggregated_public_key: int,
        session_id: str,
    ) -> CosignResult:
        """Run a signing round against the co-signer."""
        payload = {
            "message": message.hex(),
            "key_share": key_share.to_dict(),
            "aggregated_public_key": format(aggregated_public_key, "x"),
        }
        data = await self._request(
            "POST", f"/eddsa/sign/{session_id}", "cosign", json=payload
        )

        try:
            R = parse_hex_int(data["R"])
            s = parse_hex_int(data["s"])
        except (KeyError, TypeError, EncodingError) as e:
            raise ProtocolError(f"cosign returned malformed response: {e}") from e

        logger.debug(f"Co-signer cosign completed: session {session_id}")
        return CosignResult(R=R, s=s)

    async def health_check(self) -> bool:
        """Check if the co-signer answers its health endpoint."""
        try:
            await self._request("GET", "/health", "health", expect_json=False)
            return True
        except ProtocolError as e:
            logger.warning(f"Co-signer health check failed: {e}")
            return False

    async def close(self) -> None:
        await self._client.aclose()

    def __repr__(self) -> str:
        return f"HttpSigningClient(endpoint={self.endpoint})"
