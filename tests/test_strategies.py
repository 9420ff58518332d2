"""
Tests for the default strategy factories and the strategy protocols.
"""

from unittest.mock import MagicMock, patch

import pytest

from src.account.input_selection import default_input_selection
from src.account.strategies import (
    AddressGenerator,
    InputSelectionStrategy,
    TransferPreparer,
    default_addr_gen,
    default_prepare_transfers,
)
from src.api.types import PrepareTransfersOptions, Transfer
from src.core.errors import LedgerAPIError, SeedUnavailableError
from src.crypto.consts import SecurityLevel


class FailingSeedProvider:
    def seed(self) -> str:
        raise SeedUnavailableError("vault locked")


class TestDefaultAddrGen:
    def test_deterministic(self, seed_provider):
        gen = default_addr_gen(seed_provider)
        a = gen(3, SecurityLevel.MEDIUM, True)
        b = gen(3, SecurityLevel.MEDIUM, True)
        assert a == b
        assert a.startswith("0x")

    def test_inputs_change_address(self, seed_provider):
        gen = default_addr_gen(seed_provider)
        base = gen(0, SecurityLevel.MEDIUM, False)
        assert gen(1, SecurityLevel.MEDIUM, False) != base
        assert gen(0, SecurityLevel.HIGH, False) != base

    def test_checksum_flag(self, seed_provider):
        gen = default_addr_gen(seed_provider)
        plain = gen(0, SecurityLevel.MEDIUM, False)
        checked = gen(0, SecurityLevel.MEDIUM, True)
        assert plain == plain.lower()
        assert checked.lower() == plain

    def test_seed_fetched_on_every_call(self, seed):
        provider = MagicMock()
        provider.seed.return_value = seed
        gen = default_addr_gen(provider)
        gen(0, SecurityLevel.MEDIUM, False)
        gen(0, SecurityLevel.MEDIUM, False)
        assert provider.seed.call_count == 2

    def test_seed_failure_skips_derivation(self):
        gen = default_addr_gen(FailingSeedProvider())
        with patch("src.account.strategies.generate_address") as derive:
            with pytest.raises(SeedUnavailableError, match="vault locked"):
                gen(0, SecurityLevel.MEDIUM, True)
            derive.assert_not_called()


class TestDefaultPrepareTransfers:
    def test_delegates_to_client(self, seed_provider, seed, mock_api):
        mock_api.prepare_transfers.return_value = ["a", "b"]
        prepare = default_prepare_transfers(mock_api, seed_provider)
        transfers = [Transfer(address="0x" + "1" * 40, value=0, message="hi")]
        options = PrepareTransfersOptions(security=SecurityLevel.LOW)

        assert prepare(transfers, options) == ["a", "b"]
        mock_api.prepare_transfers.assert_called_once_with(seed, transfers, options)

    def test_seed_failure_before_client_call(self, mock_api):
        prepare = default_prepare_transfers(mock_api, FailingSeedProvider())
        with pytest.raises(SeedUnavailableError):
            prepare([Transfer(address="0x1")], PrepareTransfersOptions())
        mock_api.prepare_transfers.assert_not_called()

    def test_client_error_propagates_unchanged(self, seed_provider, mock_api):
        err = LedgerAPIError("node down", status_code=503)
        mock_api.prepare_transfers.side_effect = err
        prepare = default_prepare_transfers(mock_api, seed_provider)
        with pytest.raises(LedgerAPIError) as exc_info:
            prepare([Transfer(address="0x1")], PrepareTransfersOptions())
        assert exc_info.value is err

    def test_failure_does_not_poison_later_calls(self, seed_provider, mock_api):
        mock_api.prepare_transfers.side_effect = [LedgerAPIError("once"), ["ok"]]
        prepare = default_prepare_transfers(mock_api, seed_provider)
        with pytest.raises(LedgerAPIError):
            prepare([Transfer(address="0x1")], PrepareTransfersOptions())
        assert prepare([Transfer(address="0x1")], PrepareTransfersOptions()) == ["ok"]


class TestProtocols:
    def test_defaults_satisfy_protocols(self, seed_provider, mock_api):
        assert isinstance(default_addr_gen(seed_provider), AddressGenerator)
        assert isinstance(default_prepare_transfers(mock_api, seed_provider), TransferPreparer)
        assert isinstance(default_input_selection, InputSelectionStrategy)

    def test_stateful_object_satisfies_protocol(self):
        class CountingAddrGen:
            def __init__(self):
                self.calls = 0

            def __call__(self, index, security_level, add_checksum):
                self.calls += 1
                return f"addr-{index}"

        gen = CountingAddrGen()
        assert isinstance(gen, AddressGenerator)
        assert gen(7, SecurityLevel.LOW, False) == "addr-7"
        assert gen.calls == 1
