"""Process-wide owner of settings and their non-default counters.

A :class:`Registry` is normally built once at startup (``default_registry()``
does this lazily) and handed to whatever needs settings.  It hands out one
:class:`~rundebug.core.settings.Setting` per name and exports their counters as
``/<namespace>/non-default-behavior/<name>:events`` samples.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass

from ..data.catalog import load_catalog
from .config import RuntimeConfig
from .errors import CatalogError, UnknownSettingError
from .settings import INTERNAL_PREFIX, Setting, SettingInfo
from .source import SettingsSource

__all__ = [
    "MetricSample",
    "Registry",
    "default_registry",
    "set_default_registry",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricSample:
    name: str
    value: int | None

    @property
    def known(self) -> bool:
        return self.value is not None


class Registry:
    def __init__(
        self,
        config: RuntimeConfig | None = None,
        catalog: Iterable[SettingInfo] | None = None,
        source: SettingsSource | None = None,
    ) -> None:
        self.config = config or RuntimeConfig()
        self.source = source or SettingsSource(self.config)
        self._lock = threading.Lock()
        self._infos: dict[str, SettingInfo] = {}
        self._settings: dict[str, Setting] = {}
        entries = load_catalog(self.config.catalog_path()) if catalog is None else catalog
        for info in entries:
            self.register(info)

    # ------------------------------------------------------------------ catalog
    def register(self, info: SettingInfo) -> None:
        if not info.name or info.name.startswith(INTERNAL_PREFIX):
            raise CatalogError(f"Invalid setting name: {info.name!r}")
        with self._lock:
            existing = self._infos.get(info.name)
            if existing is not None and existing != info:
                raise CatalogError(f"Setting {info.name!r} is already registered differently")
            self._infos[info.name] = info
        logger.debug("Registered setting %s", info.name)

    def info(self, name: str) -> SettingInfo | None:
        with self._lock:
            return self._infos.get(name)

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._infos)

    # ------------------------------------------------------------------ settings
    def setting(self, raw_name: str) -> Setting:
        """Return the Setting for *raw_name*, creating it on first use."""

        with self._lock:
            setting = self._settings.get(raw_name)
            if setting is not None:
                return setting
            if raw_name.startswith(INTERNAL_PREFIX):
                info = None
            else:
                info = self._infos.get(raw_name)
                if info is None:
                    raise UnknownSettingError(raw_name)
            setting = Setting(raw_name, self.source, info)
            self._settings[raw_name] = setting
            return setting

    def settings(self) -> list[Setting]:
        return [self.setting(name) for name in self.names()]

    # ------------------------------------------------------------------ metrics
    def metric_name(self, name: str) -> str:
        return self.config.metric_name(name)

    def export(self) -> dict[str, int]:
        """Counter value for every exported setting, zero before any increment."""

        return {
            self.metric_name(setting.name): setting.non_default_count()
            for setting in self.settings()
            if setting.exported
        }

    def read_metrics(self, paths: Iterable[str]) -> list[MetricSample]:
        exported = self.export()
        return [MetricSample(name=path, value=exported.get(path)) for path in paths]


_default_lock = threading.Lock()
_default: Registry | None = None


def default_registry() -> Registry:
    global _default
    with _default_lock:
        if _default is None:
            _default = Registry(RuntimeConfig.from_env())
        return _default


def set_default_registry(registry: Registry | None) -> Registry | None:
    """Install *registry* as the process default and return the previous one."""

    global _default
    with _default_lock:
        previous, _default = _default, registry
    return previous
