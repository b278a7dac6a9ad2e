"""Where the settings string comes from.

Production code reads the environment variable named by
:class:`~rundebug.core.config.RuntimeConfig` (``RUNDEBUG`` by default) on every
call, so changes made by a test harness while the process runs are observed.
Tests can also push a replacement string with :meth:`SettingsSource.override`.

Usage::

    source = SettingsSource()
    with source.override("http2client=0"):
        assert source.raw() == "http2client=0"
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from .config import RuntimeConfig

__all__ = ["SettingsSource"]


class SettingsSource:
    def __init__(self, config: RuntimeConfig | None = None) -> None:
        self.config = config or RuntimeConfig()
        self._lock = threading.Lock()
        self._override_stack: list[str] = []

    @property
    def env_var(self) -> str:
        return self.config.env_var

    def raw(self) -> str:
        """Return one snapshot of the whole settings string."""

        with self._lock:
            if self._override_stack:
                return self._override_stack[-1]
        return os.environ.get(self.env_var, "")

    @contextmanager
    def override(self, raw: str) -> Iterator[None]:
        """Temporarily replace the settings string within the context.

        Overrides are stacked; the innermost one wins.
        """

        with self._lock:
            self._override_stack.append(raw)
        try:
            yield
        finally:
            with self._lock:
                self._override_stack.pop()

    def set_env(self, pairs: Mapping[str, str]) -> None:
        """Convenience helper used in scripts/tests to write the env string."""

        os.environ[self.env_var] = ",".join(f"{key}={value}" for key, value in pairs.items())
