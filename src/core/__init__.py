"""
Core utilities package.

This package contains the error taxonomy and JSON helpers shared by the
account, store, api and crypto packages.
"""

from src.core.errors import (
    AccountError,
    SettingsError,
    SettingsValidationError,
    SettingsResolutionError,
    SeedUnavailableError,
    AddressGenerationError,
    InsufficientBalanceError,
    PrepareTransfersError,
    LedgerAPIError,
    ClientConstructionError,
    PendingTransferNotFoundError,
)
from src.core.json_utils import dumps, canonical_bytes, canonical_dumps

__all__ = [
    "AccountError",
    "SettingsError",
    "SettingsValidationError",
    "SettingsResolutionError",
    "SeedUnavailableError",
    "AddressGenerationError",
    "InsufficientBalanceError",
    "PrepareTransfersError",
    "LedgerAPIError",
    "ClientConstructionError",
    "PendingTransferNotFoundError",
    "dumps",
    "canonical_bytes",
    "canonical_dumps",
]
