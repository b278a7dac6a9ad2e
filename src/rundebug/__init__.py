from __future__ import annotations

import sys as _sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .core.settings import Setting

# Enforce the project's minimum runtime for consistency.
if _sys.version_info[:2] < (3, 10):
    raise RuntimeError(f"rundebug requires Python 3.10 or newer; detected {_sys.version.split()[0]}")

__version__ = "0.1.0"


def new(name: str) -> Setting:
    """Return the Setting called *name* from the default registry."""

    from .core.registry import default_registry

    return default_registry().setting(name)


__all__: list[str] = ["__version__", "new"]
