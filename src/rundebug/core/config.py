from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

__all__ = ["CATALOG_ENV_VAR", "DEFAULT_CATALOG", "INTERNAL_PREFIX", "RuntimeConfig"]

CATALOG_ENV_VAR: Final = "RUNDEBUG_CATALOG"
INTERNAL_PREFIX: Final = "#"
DEFAULT_CATALOG: Final = Path(__file__).resolve().parents[1] / "data" / "settings.json"


@dataclass(frozen=True)
class RuntimeConfig:
    """Where settings come from and how their counters are named."""

    env_var: str = "RUNDEBUG"
    namespace: str = "rundebug"
    bisect_key: str = "bisect"
    catalog: Path | None = None

    @classmethod
    def from_env(cls) -> RuntimeConfig:
        raw = os.environ.get(CATALOG_ENV_VAR, "").strip()
        return cls(catalog=Path(raw) if raw else None)

    def catalog_path(self) -> Path:
        return self.catalog if self.catalog is not None else DEFAULT_CATALOG

    def metric_name(self, name: str) -> str:
        return f"/{self.namespace}/non-default-behavior/{name}:events"
