"""
Store package.

Persistence contract for account state and the in-memory implementation.
"""

from src.store.store import Store, AccountState, StoredDepositRequest, PendingTransfer
from src.store.inmemory import InMemoryStore

__all__ = [
    "Store",
    "AccountState",
    "StoredDepositRequest",
    "PendingTransfer",
    "InMemoryStore",
]
