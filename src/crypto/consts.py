"""
Protocol constants shared by address derivation and transfer preparation.
"""

from __future__ import annotations

from enum import IntEnum


class SecurityLevel(IntEnum):
    """Key security level. There is no valid zero level."""
    LOW = 1
    MEDIUM = 2
    HIGH = 3


TRYTE_ALPHABET = "9ABCDEFGHIJKLMNOPQRSTUVWXYZ"
SEED_LENGTH = 81

DEFAULT_SECURITY_LEVEL = SecurityLevel.MEDIUM
