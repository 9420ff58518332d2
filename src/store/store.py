"""
Store: persistence contract for account state.

An account's state consists of:
- the latest key index handed out
- deposit requests (conditional deposits) keyed by key index
- pending transfers keyed by the tail hash of their first attachment

The settings layer only wires a store into the account; implementations
decide how (and whether) the state is persisted.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.crypto.consts import SecurityLevel


@dataclass
class StoredDepositRequest:
    """A conditional deposit request bound to one key index."""
    security_level: SecurityLevel = SecurityLevel.MEDIUM
    timeout_at: Optional[datetime] = None
    multi_use: bool = False
    expected_amount: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "security_level": int(self.security_level),
            "timeout_at": self.timeout_at.isoformat() if self.timeout_at else None,
            "multi_use": self.multi_use,
            "expected_amount": self.expected_amount,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoredDepositRequest":
        timeout_raw = data.get("timeout_at")
        return cls(
            security_level=SecurityLevel(int(data.get("security_level", SecurityLevel.MEDIUM))),
            timeout_at=datetime.fromisoformat(timeout_raw) if timeout_raw else None,
            multi_use=bool(data.get("multi_use", False)),
            expected_amount=data.get("expected_amount"),
        )


@dataclass
class PendingTransfer:
    """A sent bundle awaiting confirmation, with the key indices it spends."""
    bundle: List[str]
    tails: List[str] = field(default_factory=list)
    input_key_indices: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bundle": list(self.bundle),
            "tails": list(self.tails),
            "input_key_indices": list(self.input_key_indices),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PendingTransfer":
        return cls(
            bundle=list(data.get("bundle", [])),
            tails=list(data.get("tails", [])),
            input_key_indices=[int(i) for i in data.get("input_key_indices", [])],
        )


@dataclass
class AccountState:
    """Snapshot of everything stored for one account."""
    key_index: int = 0
    deposit_requests: Dict[int, StoredDepositRequest] = field(default_factory=dict)
    pending_transfers: Dict[str, PendingTransfer] = field(default_factory=dict)

    def is_new(self) -> bool:
        return not self.deposit_requests and not self.pending_transfers

    def spent_key_indices(self) -> set[int]:
        """Key indices already used as inputs by a pending transfer."""
        spent: set[int] = set()
        for transfer in self.pending_transfers.values():
            spent.update(transfer.input_key_indices)
        return spent

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key_index": self.key_index,
            "deposit_requests": {str(k): v.to_dict() for k, v in self.deposit_requests.items()},
            "pending_transfers": {k: v.to_dict() for k, v in self.pending_transfers.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccountState":
        return cls(
            key_index=int(data.get("key_index", 0)),
            deposit_requests={
                int(k): StoredDepositRequest.from_dict(v)
                for k, v in data.get("deposit_requests", {}).items()
            },
            pending_transfers={
                k: PendingTransfer.from_dict(v)
                for k, v in data.get("pending_transfers", {}).items()
            },
        )


class Store(abc.ABC):
    """Persistence backend for account state. Implementations must be thread-safe."""

    @abc.abstractmethod
    def load_account(self, account_id: str) -> AccountState:
        """Return the account's state, creating an empty one on first use."""

    @abc.abstractmethod
    def remove_account(self, account_id: str) -> None:
        ...

    @abc.abstractmethod
    def import_account(self, account_id: str, state: Dict[str, Any]) -> None:
        ...

    @abc.abstractmethod
    def export_account(self, account_id: str) -> Dict[str, Any]:
        ...

    @abc.abstractmethod
    def read_index(self, account_id: str) -> int:
        ...

    @abc.abstractmethod
    def write_index(self, account_id: str, index: int) -> None:
        ...

    @abc.abstractmethod
    def add_deposit_request(self, account_id: str, index: int, request: StoredDepositRequest) -> None:
        ...

    @abc.abstractmethod
    def remove_deposit_request(self, account_id: str, index: int) -> None:
        ...

    @abc.abstractmethod
    def get_deposit_requests(self, account_id: str) -> Dict[int, StoredDepositRequest]:
        ...

    @abc.abstractmethod
    def add_pending_transfer(self, account_id: str, tail_tx: str, transfer: PendingTransfer) -> None:
        ...

    @abc.abstractmethod
    def remove_pending_transfer(self, account_id: str, tail_tx: str) -> None:
        ...

    @abc.abstractmethod
    def add_tail_hash(self, account_id: str, tail_tx: str, new_tail_tx: str) -> None:
        """Record a reattachment tail for an existing pending transfer."""

    @abc.abstractmethod
    def get_pending_transfers(self, account_id: str) -> Dict[str, PendingTransfer]:
        ...

    @abc.abstractmethod
    def __len__(self) -> int:
        """Number of accounts with stored state."""
