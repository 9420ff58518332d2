"""
Deterministic address derivation from a tryte seed.

The private key for (seed, index, security level) is a keccak-256 chain:
one hash over the seed, the big-endian index and the level byte, then one
extra round per level above LOW. The address is the account address of
that key, EIP-55 checksummed on request.
"""

from __future__ import annotations

from eth_account import Account
from eth_utils import keccak

from src.core.errors import AddressGenerationError
from src.crypto.consts import SEED_LENGTH, TRYTE_ALPHABET, SecurityLevel

_TRYTES = frozenset(TRYTE_ALPHABET)


def validate_seed(seed: str) -> str:
    """Return the normalised (upper-case) seed or raise AddressGenerationError."""
    if not isinstance(seed, str):
        raise AddressGenerationError("seed must be a string")
    normalised = seed.upper()
    if len(normalised) != SEED_LENGTH:
        raise AddressGenerationError(f"seed must be {SEED_LENGTH} trytes, got {len(normalised)}")
    if not _TRYTES.issuperset(normalised):
        raise AddressGenerationError("seed contains non-tryte characters")
    return normalised


def _security_level(level: int) -> SecurityLevel:
    try:
        return SecurityLevel(level)
    except ValueError:
        raise AddressGenerationError(f"unknown security level: {level!r}") from None


def derive_private_key(seed: str, index: int, security_level: int) -> bytes:
    seed = validate_seed(seed)
    if index < 0:
        raise AddressGenerationError(f"index must be >= 0, got {index}")
    level = _security_level(security_level)

    key = keccak(seed.encode("ascii") + index.to_bytes(8, "big") + bytes([int(level)]))
    for _ in range(int(level) - 1):
        key = keccak(key)
    return key


def generate_address(seed: str, index: int, security_level: int, add_checksum: bool) -> str:
    """Derive the address at ``index``. Same inputs always give the same address."""
    key = derive_private_key(seed, index, security_level)
    address = Account.from_key(key).address
    return address if add_checksum else address.lower()
