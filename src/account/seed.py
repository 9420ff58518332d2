"""
Seed providers. The settings layer only holds a provider; the seed itself
is fetched on each use by the strategy that needs it.
"""

from __future__ import annotations

import os
from typing import Protocol, runtime_checkable

from dotenv import load_dotenv

from src.core.errors import AddressGenerationError, SeedUnavailableError
from src.crypto.address import validate_seed


@runtime_checkable
class SeedProvider(Protocol):
    def seed(self) -> str:
        """Return the seed. Raises SeedUnavailableError when it cannot."""
        ...


class InMemorySeedProvider:
    """Holds a validated seed in memory."""

    def __init__(self, seed: str) -> None:
        try:
            self._seed = validate_seed(seed)
        except AddressGenerationError as exc:
            raise SeedUnavailableError(f"invalid seed: {exc}") from exc

    def seed(self) -> str:
        return self._seed

    def __repr__(self) -> str:
        # never print the seed
        return "InMemorySeedProvider(seed=***)"


class EnvSeedProvider:
    """Reads the seed from an environment variable (or .env) on every call."""

    def __init__(self, var: str = "ACCOUNT_SEED") -> None:
        self.var = var

    def seed(self) -> str:
        load_dotenv()
        raw = (os.getenv(self.var) or "").strip()
        if not raw:
            raise SeedUnavailableError(f"{self.var} is not set")
        try:
            return validate_seed(raw)
        except AddressGenerationError as exc:
            raise SeedUnavailableError(f"{self.var} holds an invalid seed: {exc}") from exc

    def __repr__(self) -> str:
        return f"EnvSeedProvider(var={self.var!r})"
