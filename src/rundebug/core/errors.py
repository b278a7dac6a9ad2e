from __future__ import annotations

__all__ = [
    "CatalogError",
    "OpaqueSettingError",
    "RunDebugError",
    "UnknownSettingError",
]


class RunDebugError(Exception):
    """Base class for errors raised by rundebug."""


class UnknownSettingError(RunDebugError, LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"setting {name!r} is not listed in the catalog")
        self.name = name


class OpaqueSettingError(RunDebugError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"setting {name!r} is opaque and does not count non-default uses")
        self.name = name


class CatalogError(RunDebugError, ValueError):
    pass
