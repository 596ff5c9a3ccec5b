"""Legacy recovery file.

Format is a single line: "THERE IS NO SEED;<key_leaf>". No seed or key share
is stored, so recovering from this file only restores how many addresses to
generate. The co-signer hands out fresh keys on recovery, which means the
recovered addresses are not the original ones.
"""

import logging
from pathlib import Path
from typing import Union

from cosign_wallet.exceptions import RecoveryError
from cosign_wallet.hdwallet.factory import KeyFactory
from cosign_wallet.wallet import Wallet

logger = logging.getLogger(__name__)

DELIMITER = ";"
NO_SEED_MARKER = "THERE IS NO SEED"


def write_recovery(wallet: Wallet, path: Union[str, Path]) -> None:
    """Write the wallet's address count to path."""
    Path(path).write_text(f"{NO_SEED_MARKER}{DELIMITER}{wallet.key_leaf}\n", encoding="utf-8")
    logger.info(f"Wrote recovery file {path} (key leaf {wallet.key_leaf})")


def read_recovery(path: Union[str, Path]) -> int:
    """Read the address count from a recovery file.

    Raises:
        RecoveryError: If the file is malformed
    """
    try:
        with open(path, encoding="utf-8") as f:
            line = f.readline()
    except OSError as e:
        raise RecoveryError(f"Cannot read recovery file {path}: {e}") from e

    parts = line.split(DELIMITER)
    if len(parts) != 2:
        raise RecoveryError(f"Invalid entry '{line.strip()}'")

    try:
        count = int(parts[1].strip())
    except ValueError:
        raise RecoveryError(f"Invalid address count '{parts[1].strip()}'")

    if count < 0:
        raise RecoveryError(f"Invalid address count '{count}'")
    return count


async def recover(path: Union[str, Path], key_factory: KeyFactory) -> Wallet:
    """Build a new wallet holding as many addresses as the recovery file lists."""
    count = read_recovery(path)
    logger.warning(
        f"Recovering {count} addresses from {path}; no seed is stored, keys will be new"
    )

    wallet = Wallet(key_factory)
    await wallet.generate_up_to(count)
    return wallet
