"""Utility modules for cosign_wallet."""

from cosign_wallet.utils.locks import KeyedLockRegistry, LockTimeoutError, keyed_lock

__all__ = ["KeyedLockRegistry", "LockTimeoutError", "keyed_lock"]
