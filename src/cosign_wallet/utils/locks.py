"""Concurrency control for per-key operations.

Provides one asyncio lock per key so that work for the same key (for
example deriving one child index) is serialized while work for different
keys runs concurrently.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Hashable, Optional

from cosign_wallet.exceptions import WalletError

logger = logging.getLogger(__name__)


class LockTimeoutError(WalletError):
    """Raised when a lock cannot be acquired within the timeout period."""

    pass


class KeyedLockRegistry:
    """Registry mapping keys to asyncio locks.

    keyed_lock() checks a lock out for the duration of its block and checks
    it back in afterwards. A lock is dropped once nobody holds or waits on
    it, so the registry only grows with the number of keys in use.

    Example:
        registry = KeyedLockRegistry()
        async with keyed_lock(registry, 7, operation="derive"):
            ...
    """

    def __init__(self):
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._users: dict[Hashable, int] = {}
        self._registry_lock = asyncio.Lock()

    async def get(self, key: Hashable) -> asyncio.Lock:
        """Get or create the lock for a key.

        Args:
            key: Any hashable key

        Returns:
            asyncio.Lock for the key
        """
        async with self._registry_lock:
            if key not in self._locks:
                self._locks[key] = asyncio.Lock()
            return self._locks[key]

    async def checkout(self, key: Hashable) -> asyncio.Lock:
        """Get the lock for a key and register one more user of it."""
        async with self._registry_lock:
            if key not in self._locks:
                self._locks[key] = asyncio.Lock()
            self._users[key] = self._users.get(key, 0) + 1
            return self._locks[key]

    def checkin(self, key: Hashable) -> None:
        """Unregister a user, dropping the lock when it was the last one."""
        # No await here, so the count cannot change underneath us
        remaining = self._users.get(key, 0) - 1
        if remaining > 0:
            self._users[key] = remaining
            return
        self._users.pop(key, None)
        self._locks.pop(key, None)

    def clear(self) -> None:
        """Drop all locks (useful for testing)."""
        self._locks.clear()
        self._users.clear()

    def __len__(self) -> int:
        return len(self._locks)


@asynccontextmanager
async def keyed_lock(
    registry: KeyedLockRegistry,
    key: Hashable,
    timeout: Optional[float] = 30.0,
    operation: str = "keyed_operation",
):
    """Hold the registry lock for a key.

    Args:
        registry: Lock registry to draw from
        key: Key to lock
        timeout: Maximum time to wait for the lock (None = wait forever)
        operation: Description for logging

    Raises:
        LockTimeoutError: If the lock is not acquired in time
    """
    lock = await registry.checkout(key)

    try:
        try:
            if timeout is not None:
                await asyncio.wait_for(lock.acquire(), timeout=timeout)
            else:
                await lock.acquire()
        except asyncio.TimeoutError:
            logger.warning(f"Lock timeout for {key} after {timeout}s: {operation}")
            raise LockTimeoutError(f"Could not acquire lock for {key} within {timeout}s")

        logger.debug(f"Lock acquired for {key}: {operation}")
        try:
            yield
        finally:
            lock.release()
            logger.debug(f"Lock released for {key}: {operation}")
    finally:
        registry.checkin(key)
