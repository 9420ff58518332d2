"""
Account settings and their resolution.

A PartialSettings names whatever the caller cares about; resolve_settings()
turns it into a complete, frozen Settings by filling every unset field with
the development baseline:

    seed provider   empty seed (81 x "9"), NOT for real funds
    mwm             14
    depth           3
    security level  MEDIUM
    event machine   DiscardEventMachine
    time source     SystemClock
    input selection default_input_selection
    store           fresh InMemoryStore
    api             LedgerAPI on http://localhost:14265
    addr_gen        default_addr_gen(seed provider)
    prepare         default_prepare_transfers(api, seed provider)

Zero and None both mean "unset". Fields the caller did set are carried over
untouched, and the caller's record is never modified.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv

from src.account.input_selection import default_input_selection
from src.account.plugin import Plugin
from src.account.seed import EnvSeedProvider, InMemorySeedProvider, SeedProvider
from src.account.strategies import (
    AddressGenerator,
    InputSelectionStrategy,
    TransferPreparer,
    default_addr_gen,
    default_prepare_transfers,
)
from src.api.client import DEFAULT_NODE_URI, HTTPClientSettings, LedgerAPI, compose_api
from src.core.errors import ClientConstructionError, SettingsResolutionError, SettingsValidationError
from src.crypto.consts import SEED_LENGTH, SecurityLevel
from src.event.event_machine import DiscardEventMachine, EventMachine
from src.infra.logging_cfg import log_event
from src.store.inmemory import InMemoryStore
from src.store.store import Store
from src.timesrc.timesrc import SystemClock, TimeSource

log = logging.getLogger("account")

EMPTY_SEED = "9" * SEED_LENGTH

DEFAULT_MWM = 14
DEFAULT_DEPTH = 3
DEFAULT_SECURITY_LEVEL = SecurityLevel.MEDIUM


@dataclass(frozen=True)
class PartialSettings:
    api: Optional[LedgerAPI] = None
    store: Optional[Store] = None
    seed_provider: Optional[SeedProvider] = None
    mwm: Optional[int] = None
    depth: Optional[int] = None
    security_level: Optional[int] = None
    time_source: Optional[TimeSource] = None
    input_selection: Optional[InputSelectionStrategy] = None
    event_machine: Optional[EventMachine] = None
    plugins: Optional[Mapping[str, Plugin]] = None
    addr_gen: Optional[AddressGenerator] = None
    prepare_transfers: Optional[TransferPreparer] = None
    # Only used when api is unset
    http_settings: Optional[HTTPClientSettings] = None

    @classmethod
    def from_env(cls) -> "PartialSettings":
        """
        Build a partial record from ACCOUNT_* environment variables (.env aware).

        Unset variables stay unset so resolution applies the defaults.
        """
        load_dotenv()

        def _int_env(key: str) -> Optional[int]:
            raw = os.getenv(key)
            if raw is None or raw.strip() == "":
                return None
            try:
                return int(raw)
            except ValueError:
                raise SettingsValidationError(f"{key} must be an integer, got {raw!r}") from None

        def _float_env(key: str) -> Optional[float]:
            raw = os.getenv(key)
            if raw is None or raw.strip() == "":
                return None
            try:
                return float(raw)
            except ValueError:
                raise SettingsValidationError(f"{key} must be a number, got {raw!r}") from None

        uri = (os.getenv("ACCOUNT_NODE_URI") or "").strip()
        timeout = _float_env("ACCOUNT_HTTP_TIMEOUT")
        http_settings = None
        if uri or timeout is not None:
            http_settings = HTTPClientSettings(
                uri=uri or DEFAULT_NODE_URI,
                timeout=timeout if timeout is not None else HTTPClientSettings.timeout,
            )

        seed_provider = EnvSeedProvider("ACCOUNT_SEED") if os.getenv("ACCOUNT_SEED") else None

        return cls(
            seed_provider=seed_provider,
            mwm=_int_env("ACCOUNT_MWM"),
            depth=_int_env("ACCOUNT_DEPTH"),
            security_level=_int_env("ACCOUNT_SECURITY_LEVEL"),
            http_settings=http_settings,
        )


@dataclass(frozen=True)
class Settings:
    """Fully resolved account settings. Build with resolve_settings()."""
    api: LedgerAPI
    store: Store
    seed_provider: SeedProvider
    mwm: int
    depth: int
    security_level: SecurityLevel
    time_source: TimeSource
    input_selection: InputSelectionStrategy
    event_machine: EventMachine
    addr_gen: AddressGenerator
    prepare_transfers: TransferPreparer
    plugins: Dict[str, Plugin] = field(default_factory=dict)

    def dump(self) -> dict:
        """Return a loggable dict of settings. Collaborators appear by repr only."""
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in ("mwm", "depth", "security_level"):
                out[f.name] = int(value)
            elif f.name == "plugins":
                out[f.name] = sorted(value)
            else:
                out[f.name] = repr(value)
        return out


def _numeric(name: str, value: Optional[int], default: int) -> int:
    if value is None or value == 0:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise SettingsValidationError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise SettingsValidationError(f"{name} must be >= 0, got {value}")
    return value


def _security_level(value: Optional[int]) -> SecurityLevel:
    if value is None or value == 0:
        return DEFAULT_SECURITY_LEVEL
    if isinstance(value, bool):
        raise SettingsValidationError(f"security level must be an integer, got {value!r}")
    try:
        return SecurityLevel(value)
    except ValueError:
        raise SettingsValidationError(f"unknown security level: {value!r}") from None


def _require_callable(name: str, value: Any) -> None:
    if value is not None and not callable(value):
        raise SettingsValidationError(f"{name} must be callable, got {type(value).__name__}")


def resolve_settings(partial: Optional[PartialSettings] = None) -> Settings:
    """
    Resolve a (possibly absent) partial record into complete Settings.

    Raises:
        SettingsValidationError: a set field holds an invalid value
        SettingsResolutionError: the default node client could not be built
    """
    baseline = partial is None
    if partial is None:
        partial = PartialSettings()

    _require_callable("input_selection", partial.input_selection)
    _require_callable("addr_gen", partial.addr_gen)
    _require_callable("prepare_transfers", partial.prepare_transfers)

    defaulted: List[str] = []

    def _default(name: str, value: Any, factory: Any) -> Any:
        if value is not None:
            return value
        defaulted.append(name)
        return factory()

    mwm = _numeric("mwm", partial.mwm, DEFAULT_MWM)
    depth = _numeric("depth", partial.depth, DEFAULT_DEPTH)
    security_level = _security_level(partial.security_level)
    for name, value in (("mwm", partial.mwm), ("depth", partial.depth), ("security_level", partial.security_level)):
        if not value:
            defaulted.append(name)

    plugins = dict(partial.plugins or {})
    for plugin_name in plugins:
        if not isinstance(plugin_name, str) or not plugin_name:
            raise SettingsValidationError(f"plugin names must be non-empty strings, got {plugin_name!r}")

    seed_provider = _default("seed_provider", partial.seed_provider, lambda: InMemorySeedProvider(EMPTY_SEED))
    if partial.seed_provider is None:
        log_event(
            log,
            "account_empty_seed",
            level=logging.WARNING,
            msg="no seed provider given; using the empty seed, do not send funds to its addresses",
        )

    if partial.api is None:
        try:
            api = compose_api(partial.http_settings or HTTPClientSettings())
        except ClientConstructionError as exc:
            log_event(log, "settings_client_construction_failed", level=logging.ERROR, error=str(exc))
            raise SettingsResolutionError(f"cannot build default node client: {exc}") from exc
        defaulted.append("api")
    else:
        api = partial.api

    settings = Settings(
        api=api,
        store=_default("store", partial.store, InMemoryStore),
        seed_provider=seed_provider,
        mwm=mwm,
        depth=depth,
        security_level=security_level,
        time_source=_default("time_source", partial.time_source, SystemClock),
        input_selection=_default("input_selection", partial.input_selection, lambda: default_input_selection),
        event_machine=_default("event_machine", partial.event_machine, DiscardEventMachine),
        addr_gen=_default("addr_gen", partial.addr_gen, lambda: default_addr_gen(seed_provider)),
        prepare_transfers=_default(
            "prepare_transfers",
            partial.prepare_transfers,
            lambda: default_prepare_transfers(api, seed_provider),
        ),
        plugins=plugins,
    )

    log_event(
        log,
        "settings_resolved",
        baseline=baseline,
        mwm=settings.mwm,
        depth=settings.depth,
        security_level=int(settings.security_level),
        api=repr(settings.api),
        node_uri=api.uri if partial.api is None else None,
        plugins=sorted(plugins),
        defaulted=defaulted,
    )
    return settings
