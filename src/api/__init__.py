"""
API package.

Node client and the transfer preparation pipeline.
"""

from src.api.types import Transfer, Input, PrepareTransfersOptions, Trytes
from src.api.bundle import prepare_transfers
from src.api.client import HTTPClientSettings, LedgerAPI, compose_api, DEFAULT_NODE_URI

__all__ = [
    "Transfer",
    "Input",
    "PrepareTransfersOptions",
    "Trytes",
    "prepare_transfers",
    "HTTPClientSettings",
    "LedgerAPI",
    "compose_api",
    "DEFAULT_NODE_URI",
]
