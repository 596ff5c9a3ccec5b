"""Wallet error types.

Remote failures and local invariant violations are both raised as typed
errors so callers decide the policy (retry, alert, abort).
"""


class WalletError(Exception):
    """Base exception for all wallet errors."""

    pass


class ProtocolError(WalletError):
    """Raised when the co-signing service cannot complete keygen or cosign."""

    pass


class SigningTimeoutError(ProtocolError):
    """Raised when a co-signing round trip exceeds its timeout."""

    pass


class AddressError(WalletError):
    """Raised when a public key hash cannot be turned into an account address."""

    pass


class EncodingError(WalletError):
    """Raised when a value does not fit its fixed-width byte encoding."""

    pass


class ConfigurationError(WalletError):
    """Raised when the signing service is missing or misconfigured."""

    pass


class AlreadyGeneratedError(WalletError):
    """Raised when asked to generate up to a depth behind the key leaf."""

    def __init__(self, key_leaf: int, depth: int):
        self.key_leaf = key_leaf
        self.depth = depth
        super().__init__(
            f"Addresses already generated up to {key_leaf}, cannot rewind to {depth}"
        )


class DuplicateAddressError(WalletError):
    """Raised when a derived address is already present in the wallet.

    Two indices hashing to one address means something is badly wrong with
    the key material or the hash; this is never a recoverable condition.
    """

    def __init__(self, address: str, existing_index: int, new_index: int):
        self.address = address
        self.existing_index = existing_index
        self.new_index = new_index
        super().__init__(
            f"Address {address} from index {new_index} already held at index {existing_index}"
        )


class IndexGapError(WalletError):
    """Raised when the address map is missing an index below the key leaf."""

    def __init__(self, missing_index: int, depth: int):
        self.missing_index = missing_index
        self.depth = depth
        super().__init__(f"Child index {missing_index} missing while depth is {depth}")


class UnknownAddressError(WalletError):
    """Raised when signing is requested for an address the wallet does not hold."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Address {address} is not controlled by this wallet")


class RecoveryError(WalletError):
    """Raised when a recovery file cannot be parsed."""

    pass
