from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

from .bisect import Site, pattern_from_settings, report_line
from .config import INTERNAL_PREFIX
from .counters import AtomicCounter
from .errors import OpaqueSettingError
from .lookup import lookup
from .source import SettingsSource

__all__ = ["INTERNAL_PREFIX", "Setting", "SettingInfo"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettingInfo:
    """Catalog entry describing a known setting."""

    name: str
    package: str = ""
    changed: str | None = None
    old: str | None = None
    opaque: bool = False


class Setting:
    """A single named flag read from the settings string.

    The value is looked up again on every access.  Names starting with ``#``
    are internal: they need no catalog entry and are never exported as metrics.
    """

    def __init__(self, raw_name: str, source: SettingsSource, info: SettingInfo | None = None) -> None:
        self._raw_name = raw_name
        self._source = source
        self._info = info
        self._non_default = AtomicCounter()

    @property
    def name(self) -> str:
        if self.internal:
            return self._raw_name[len(INTERNAL_PREFIX) :]
        return self._raw_name

    @property
    def raw_name(self) -> str:
        return self._raw_name

    @property
    def internal(self) -> bool:
        return self._raw_name.startswith(INTERNAL_PREFIX)

    @property
    def info(self) -> SettingInfo | None:
        return self._info

    @property
    def exported(self) -> bool:
        return not self.internal and self._info is not None and not self._info.opaque

    def lookup(self) -> tuple[str, bool]:
        return lookup(self._source.raw(), self.name)

    def value(self) -> str:
        return self.lookup()[0]

    def inc_non_default(self) -> None:
        """Record that a non-default value of this setting was honored."""

        if self._info is not None and self._info.opaque:
            raise OpaqueSettingError(self.name)
        self._non_default.add()

    def non_default_count(self) -> int:
        return self._non_default.load()

    def matches(self, expected: str, site: Site | None = None) -> bool:
        """Return whether the setting equals *expected*, subject to bisect forcing.

        *site* identifies the call site; by default the caller's
        ``file.py:LINE`` is used.
        """

        settings = self._source.raw()
        organic = lookup(settings, self.name)[0] == expected
        pattern = pattern_from_settings(settings, self._source.config.bisect_key)
        if pattern is None:
            return organic
        if site is None:
            site = _caller_site()
        decision = pattern.decide(self.name, site)
        if decision.forced:
            logger.debug("bisect forced %s at %s: %s", self.name, site, decision.value)
            if pattern.verbose:
                print(report_line(self.name, site), file=sys.stderr)
        return decision.apply(organic)

    def __str__(self) -> str:
        return f"{self.name}={self.value()}"

    def __repr__(self) -> str:
        return f"Setting({self._raw_name!r})"


def _caller_site() -> str:
    """Return ``file.py:LINE`` for the code that called :meth:`Setting.matches`.

    Only the file name is kept so identifiers do not depend on the working
    directory.  Same-named files in different packages therefore share sites;
    pass an explicit *site* where that matters.
    """

    frame = sys._getframe(2)
    filename = frame.f_code.co_filename.replace("\\", "/").rsplit("/", 1)[-1]
    return f"{filename}:{frame.f_lineno}"
