"""
Value types exchanged with the node client and the transfer pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from src.crypto.consts import SecurityLevel

# Serialized transaction ready for attachment.
Trytes = str


@dataclass(frozen=True)
class Transfer:
    address: str
    value: int = 0
    tag: str = ""
    message: str = ""


@dataclass(frozen=True)
class Input:
    """An address controlled by the seed, with the balance it contributes."""
    address: str
    key_index: int
    balance: int
    security: SecurityLevel = SecurityLevel.MEDIUM


@dataclass(frozen=True)
class PrepareTransfersOptions:
    inputs: List[Input] = field(default_factory=list)
    remainder_address: Optional[str] = None
    security: SecurityLevel = SecurityLevel.MEDIUM
    timestamp: Optional[int] = None  # unix seconds; now if unset
