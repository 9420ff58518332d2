"""
Plugin contract. Plugins (transfer pollers, promoters, ...) are started
with the account and shut down with it; settings only carry them by name.
"""

from __future__ import annotations

import abc


class Plugin(abc.ABC):
    @abc.abstractmethod
    def name(self) -> str:
        ...

    @abc.abstractmethod
    def start(self) -> None:
        ...

    @abc.abstractmethod
    def shutdown(self) -> None:
        ...
