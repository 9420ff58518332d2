"""
Crypto package.

Seed validation, key derivation and address generation.
"""

from src.crypto.consts import SecurityLevel, TRYTE_ALPHABET, SEED_LENGTH
from src.crypto.address import validate_seed, derive_private_key, generate_address

__all__ = [
    "SecurityLevel",
    "TRYTE_ALPHABET",
    "SEED_LENGTH",
    "validate_seed",
    "derive_private_key",
    "generate_address",
]
