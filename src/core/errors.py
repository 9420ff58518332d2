"""
Exception taxonomy for the account subsystem.

Errors raised by collaborators (seed providers, the node client, strategies)
are propagated unchanged by the settings layer; nothing here is retried.
"""

from __future__ import annotations


class AccountError(Exception):
    """Base class for all account subsystem errors."""


class SettingsError(AccountError):
    """Problem with an account configuration record."""


class SettingsValidationError(SettingsError, ValueError):
    """A configuration value is out of range or malformed."""


class SettingsResolutionError(SettingsError):
    """A default dependency could not be constructed during resolution."""


class SeedUnavailableError(AccountError):
    """The seed provider could not supply a seed."""


class AddressGenerationError(AccountError, ValueError):
    """Address derivation was given invalid input."""


class InsufficientBalanceError(AccountError):
    """Usable balance does not cover the requested transfer value."""

    def __init__(self, required: int, available: int) -> None:
        super().__init__(f"insufficient balance: required={required} available={available}")
        self.required = required
        self.available = available


class PrepareTransfersError(AccountError):
    """Bundle assembly or signing failed."""


class LedgerAPIError(AccountError):
    """The node rejected a command or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ClientConstructionError(AccountError):
    """The node client could not be built from the given HTTP settings."""


class PendingTransferNotFoundError(AccountError, KeyError):
    """No pending transfer is stored under the given bundle tail."""
