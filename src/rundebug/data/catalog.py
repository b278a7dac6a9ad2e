from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..core.config import DEFAULT_CATALOG
from ..core.errors import CatalogError
from ..core.settings import INTERNAL_PREFIX, SettingInfo

__all__ = ["CatalogRepository", "load_catalog"]

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Load the list of known settings from a JSON resource."""

    def __init__(self, resource: Path | None = None) -> None:
        self._resource = resource or DEFAULT_CATALOG
        self._entries = self._decode(self._load_resource(self._resource))

    @property
    def resource(self) -> Path:
        return self._resource

    @staticmethod
    def _load_resource(path: Path) -> Any:
        try:
            with path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise CatalogError(f"cannot read settings catalog {path}: {exc}") from exc

    @staticmethod
    def _decode(payload: Any) -> tuple[SettingInfo, ...]:
        if isinstance(payload, dict):
            payload = payload.get("settings")
        if not isinstance(payload, list):
            raise CatalogError("Invalid settings catalog payload")
        entries: list[SettingInfo] = []
        seen: set[str] = set()
        for raw in payload:
            if not isinstance(raw, dict):
                raise CatalogError(f"Invalid catalog entry: {raw!r}")
            name = raw.get("name")
            if not isinstance(name, str) or not name or name.startswith(INTERNAL_PREFIX):
                raise CatalogError(f"Invalid setting name in catalog: {name!r}")
            if "," in name or "=" in name:
                raise CatalogError(f"Setting name {name!r} contains a separator")
            if name in seen:
                raise CatalogError(f"Duplicate setting {name!r} in catalog")
            seen.add(name)
            entries.append(
                SettingInfo(
                    name=name,
                    package=str(raw.get("package", "")),
                    changed=_optional_str(raw.get("changed")),
                    old=_optional_str(raw.get("old")),
                    opaque=bool(raw.get("opaque", False)),
                )
            )
        return tuple(entries)

    def entries(self) -> tuple[SettingInfo, ...]:
        return self._entries

    def names(self) -> list[str]:
        return sorted(info.name for info in self._entries)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def load_catalog(path: Path | None = None) -> tuple[SettingInfo, ...]:
    repository = CatalogRepository(path)
    logger.info("Loaded %d settings from %s", len(repository.entries()), repository.resource)
    return repository.entries()
