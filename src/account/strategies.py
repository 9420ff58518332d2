"""
Strategy contracts injected through Settings, and the default factories.

Three replaceable algorithms:

- InputSelectionStrategy(account, transfer_value, balance_check)
      -> (value, inputs, key_indices_to_remove)
  With balance_check=True it reports the usable balance and must not
  select or remove anything. It must never pick an input whose deposit
  request is still waiting to be fulfilled.
- AddressGenerator(index, security_level, add_checksum) -> address
  Deterministic for a given seed.
- TransferPreparer(transfers, options) -> list of trytes
  Bundle assembly, remainder insertion and signing; raises on any
  failure, never returns partial output.

Plain functions and callable objects both satisfy these protocols.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Protocol, Sequence, Tuple, runtime_checkable

from src.api.types import Input, PrepareTransfersOptions, Transfer, Trytes
from src.crypto.address import generate_address
from src.crypto.consts import SecurityLevel

if TYPE_CHECKING:
    from src.account.seed import SeedProvider
    from src.account.settings import Settings
    from src.api.client import LedgerAPI


@dataclass(frozen=True)
class AccountHandle:
    """What input selection sees of an account: its id and resolved settings."""
    id: str
    settings: "Settings"


@runtime_checkable
class InputSelectionStrategy(Protocol):
    def __call__(
        self,
        account: AccountHandle,
        transfer_value: int,
        balance_check: bool,
    ) -> Tuple[int, List[Input], List[int]]:
        ...


@runtime_checkable
class AddressGenerator(Protocol):
    def __call__(self, index: int, security_level: SecurityLevel, add_checksum: bool) -> str:
        ...


@runtime_checkable
class TransferPreparer(Protocol):
    def __call__(self, transfers: Sequence[Transfer], options: PrepareTransfersOptions) -> List[Trytes]:
        ...


def default_addr_gen(provider: "SeedProvider") -> AddressGenerator:
    def addr_gen(index: int, security_level: SecurityLevel, add_checksum: bool) -> str:
        seed = provider.seed()
        return generate_address(seed, index, security_level, add_checksum)

    return addr_gen


def default_prepare_transfers(api: "LedgerAPI", provider: "SeedProvider") -> TransferPreparer:
    def prepare(transfers: Sequence[Transfer], options: PrepareTransfersOptions) -> List[Trytes]:
        seed = provider.seed()
        return api.prepare_transfers(seed, transfers, options)

    return prepare
