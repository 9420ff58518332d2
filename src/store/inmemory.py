"""
In-memory Store used by the default settings baseline and by tests.

State does not survive the process. Every read returns a deep copy so
callers can never mutate stored state behind the store's back.
"""

from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Dict

from src.core.errors import PendingTransferNotFoundError
from src.infra.logging_cfg import log_event
from src.store.store import AccountState, PendingTransfer, Store, StoredDepositRequest

log = logging.getLogger("account")


class InMemoryStore(Store):
    def __init__(self) -> None:
        self._accounts: Dict[str, AccountState] = {}
        self._lock = threading.Lock()

    def _state(self, account_id: str) -> AccountState:
        # caller holds the lock
        state = self._accounts.get(account_id)
        if state is None:
            state = AccountState()
            self._accounts[account_id] = state
        return state

    def _peek(self, account_id: str) -> AccountState:
        return self._accounts.get(account_id) or AccountState()

    def load_account(self, account_id: str) -> AccountState:
        with self._lock:
            return copy.deepcopy(self._state(account_id))

    def remove_account(self, account_id: str) -> None:
        with self._lock:
            self._accounts.pop(account_id, None)
        log_event(log, "store_account_removed", level=logging.DEBUG, account_id=account_id)

    def import_account(self, account_id: str, state: Dict[str, Any]) -> None:
        imported = AccountState.from_dict(state)
        with self._lock:
            self._accounts[account_id] = imported

    def export_account(self, account_id: str) -> Dict[str, Any]:
        with self._lock:
            return self._peek(account_id).to_dict()

    def read_index(self, account_id: str) -> int:
        with self._lock:
            return self._peek(account_id).key_index

    def write_index(self, account_id: str, index: int) -> None:
        if index < 0:
            raise ValueError(f"key index must be >= 0, got {index}")
        with self._lock:
            self._state(account_id).key_index = index

    def add_deposit_request(self, account_id: str, index: int, request: StoredDepositRequest) -> None:
        with self._lock:
            self._state(account_id).deposit_requests[index] = copy.deepcopy(request)

    def remove_deposit_request(self, account_id: str, index: int) -> None:
        with self._lock:
            self._peek(account_id).deposit_requests.pop(index, None)

    def get_deposit_requests(self, account_id: str) -> Dict[int, StoredDepositRequest]:
        with self._lock:
            return copy.deepcopy(self._peek(account_id).deposit_requests)

    def add_pending_transfer(self, account_id: str, tail_tx: str, transfer: PendingTransfer) -> None:
        stored = copy.deepcopy(transfer)
        if tail_tx not in stored.tails:
            stored.tails.insert(0, tail_tx)
        with self._lock:
            self._state(account_id).pending_transfers[tail_tx] = stored

    def remove_pending_transfer(self, account_id: str, tail_tx: str) -> None:
        with self._lock:
            pending = self._peek(account_id).pending_transfers
            if tail_tx not in pending:
                raise PendingTransferNotFoundError(tail_tx)
            del pending[tail_tx]

    def add_tail_hash(self, account_id: str, tail_tx: str, new_tail_tx: str) -> None:
        with self._lock:
            transfer = self._peek(account_id).pending_transfers.get(tail_tx)
            if transfer is None:
                raise PendingTransferNotFoundError(tail_tx)
            transfer.tails.append(new_tail_tx)

    def get_pending_transfers(self, account_id: str) -> Dict[str, PendingTransfer]:
        with self._lock:
            return copy.deepcopy(self._peek(account_id).pending_transfers)

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)
