"""
Node client: the network surface an account uses for ledger queries.

Commands are JSON POSTs to the node's HTTP endpoint. Transfer preparation
is done locally (see src.api.bundle) and needs no network round trip.
There are no retries; a failed command raises LedgerAPIError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import httpx

from src.api.bundle import prepare_transfers as _prepare_transfers
from src.api.types import PrepareTransfersOptions, Transfer, Trytes
from src.core.errors import ClientConstructionError, LedgerAPIError
from src.infra.logging_cfg import log_event

log = logging.getLogger("account")

DEFAULT_NODE_URI = "http://localhost:14265"
API_VERSION_HEADER = "X-IOTA-API-Version"


@dataclass(frozen=True)
class HTTPClientSettings:
    uri: str = DEFAULT_NODE_URI
    timeout: float = 10.0
    headers: Dict[str, str] = field(default_factory=dict)
    # Injectable for tests (httpx.MockTransport)
    transport: Optional[httpx.BaseTransport] = None


class LedgerAPI:
    """Synchronous node client. Share one instance; close it when done."""

    def __init__(self, settings: HTTPClientSettings, http: httpx.Client) -> None:
        self.settings = settings
        self._http = http

    @property
    def uri(self) -> str:
        return self.settings.uri

    def _command(self, command: str, **params: Any) -> Dict[str, Any]:
        body = {"command": command, **params}
        try:
            resp = self._http.post("", json=body)
        except httpx.HTTPError as exc:
            log_event(log, "node_request_failed", level=logging.WARNING, command=command, error=str(exc))
            raise LedgerAPIError(f"{command}: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if resp.status_code >= 400:
            message = data.get("error") if isinstance(data, dict) else None
            raise LedgerAPIError(
                f"{command}: {message or resp.reason_phrase}",
                status_code=resp.status_code,
            )
        if not isinstance(data, dict):
            raise LedgerAPIError(f"{command}: unexpected response body")
        return data

    def get_node_info(self) -> Dict[str, Any]:
        return self._command("getNodeInfo")

    def get_balances(self, addresses: Sequence[str]) -> List[int]:
        if not addresses:
            return []
        data = self._command("getBalances", addresses=list(addresses))
        balances = data.get("balances")
        if not isinstance(balances, list) or len(balances) != len(addresses):
            raise LedgerAPIError("getBalances: malformed balances in response")
        return [int(b) for b in balances]

    def prepare_transfers(
        self,
        seed: str,
        transfers: Sequence[Transfer],
        options: PrepareTransfersOptions,
    ) -> List[Trytes]:
        return _prepare_transfers(seed, transfers, options)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "LedgerAPI":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"LedgerAPI(uri={self.settings.uri!r})"


def compose_api(settings: Optional[HTTPClientSettings] = None) -> LedgerAPI:
    """Build a LedgerAPI from HTTP settings. Raises ClientConstructionError on a bad endpoint."""
    settings = settings or HTTPClientSettings()
    try:
        url = httpx.URL(settings.uri)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ClientConstructionError(f"invalid node uri {settings.uri!r}: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ClientConstructionError(f"node uri must be http(s) with a host, got {settings.uri!r}")
    if settings.timeout <= 0:
        raise ClientConstructionError(f"timeout must be > 0, got {settings.timeout}")

    headers = {"Content-Type": "application/json", API_VERSION_HEADER: "1", **settings.headers}
    http = httpx.Client(
        base_url=url,
        timeout=settings.timeout,
        headers=headers,
        transport=settings.transport,
    )
    return LedgerAPI(settings, http)
