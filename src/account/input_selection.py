"""
Default input selection.

Usable balance comes only from deposit addresses whose conditions allow
spending at the current time:

- timed out (now >= timeout_at): usable if funded; the request can be removed
- still active, with an expected amount reached and not multi-use: usable,
  the request can be removed
- any other active request: not usable (funds may still be arriving)

Key indices already spent by a pending transfer are never considered.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Tuple

from src.account.strategies import AccountHandle
from src.api.types import Input
from src.core.errors import InsufficientBalanceError, LedgerAPIError
from src.infra.logging_cfg import log_event
from src.store.store import StoredDepositRequest

log = logging.getLogger("account")


def _utc(ts: datetime) -> datetime:
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def _usable(req: StoredDepositRequest, balance: int, now: datetime) -> bool:
    if balance <= 0:
        return False
    if req.timeout_at is not None and now >= _utc(req.timeout_at):
        return True
    if req.multi_use or req.expected_amount is None:
        return False
    return balance >= req.expected_amount


def default_input_selection(
    account: AccountHandle,
    transfer_value: int,
    balance_check: bool,
) -> Tuple[int, List[Input], List[int]]:
    settings = account.settings
    if transfer_value < 0:
        raise ValueError(f"transfer value must be >= 0, got {transfer_value}")
    if not balance_check and transfer_value == 0:
        return 0, [], []

    state = settings.store.load_account(account.id)
    spent = state.spent_key_indices()
    candidates = sorted(
        (index, req) for index, req in state.deposit_requests.items() if index not in spent
    )
    if not candidates:
        if balance_check:
            return 0, [], []
        raise InsufficientBalanceError(required=transfer_value, available=0)

    addresses = [
        settings.addr_gen(index, req.security_level, False) for index, req in candidates
    ]
    balances = settings.api.get_balances(addresses)
    if len(balances) != len(addresses):
        raise LedgerAPIError(
            f"getBalances: expected {len(addresses)} balances, got {len(balances)}"
        )
    now = _utc(settings.time_source.time())

    usable: List[Input] = []
    for (index, req), address, balance in zip(candidates, addresses, balances):
        if _usable(req, balance, now):
            usable.append(Input(address=address, key_index=index, balance=balance, security=req.security_level))

    usable_sum = sum(i.balance for i in usable)
    if balance_check:
        return usable_sum, [], []

    selected: List[Input] = []
    selected_sum = 0
    for inp in usable:
        if selected_sum >= transfer_value:
            break
        selected.append(inp)
        selected_sum += inp.balance

    if selected_sum < transfer_value:
        raise InsufficientBalanceError(required=transfer_value, available=usable_sum)

    # every usable input is fulfilled or timed out, so all picked ones are done
    to_remove = [inp.key_index for inp in selected]

    log_event(
        log,
        "inputs_selected",
        level=logging.DEBUG,
        account_id=account.id,
        transfer_value=transfer_value,
        selected=len(selected),
        selected_sum=selected_sum,
    )
    return selected_sum, selected, to_remove
