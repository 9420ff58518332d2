"""
Account package.

Settings resolution, strategy contracts and their defaults, seed providers
and the plugin contract.
"""

from src.account.settings import (
    Settings,
    PartialSettings,
    resolve_settings,
    EMPTY_SEED,
    DEFAULT_MWM,
    DEFAULT_DEPTH,
    DEFAULT_SECURITY_LEVEL,
)
from src.account.strategies import (
    AccountHandle,
    InputSelectionStrategy,
    AddressGenerator,
    TransferPreparer,
    default_addr_gen,
    default_prepare_transfers,
)
from src.account.input_selection import default_input_selection
from src.account.seed import SeedProvider, InMemorySeedProvider, EnvSeedProvider
from src.account.plugin import Plugin

__all__ = [
    "Settings",
    "PartialSettings",
    "resolve_settings",
    "EMPTY_SEED",
    "DEFAULT_MWM",
    "DEFAULT_DEPTH",
    "DEFAULT_SECURITY_LEVEL",
    "AccountHandle",
    "InputSelectionStrategy",
    "AddressGenerator",
    "TransferPreparer",
    "default_addr_gen",
    "default_prepare_transfers",
    "default_input_selection",
    "SeedProvider",
    "InMemorySeedProvider",
    "EnvSeedProvider",
    "Plugin",
]
