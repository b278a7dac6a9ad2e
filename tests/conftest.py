from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure "src" is on sys.path for imports in tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture
def registry(monkeypatch):
    """Registry with a small catalog and an empty settings string."""

    from rundebug.core.registry import Registry
    from rundebug.core.settings import SettingInfo

    monkeypatch.delenv("RUNDEBUG", raising=False)
    catalog = [
        SettingInfo("http2client", package="net/http"),
        SettingInfo("netdns", package="net", opaque=True),
        SettingInfo("panicnil", package="runtime", changed="1.21", old="1"),
    ]
    return Registry(catalog=catalog)
