from __future__ import annotations

import json

import pytest

from rundebug.core.config import CATALOG_ENV_VAR, DEFAULT_CATALOG, RuntimeConfig
from rundebug.core.errors import CatalogError
from rundebug.core.registry import Registry
from rundebug.core.settings import SettingInfo
from rundebug.data.catalog import CatalogRepository, load_catalog


def test_packaged_catalog_loads() -> None:
    repository = CatalogRepository()
    assert repository.resource == DEFAULT_CATALOG
    names = repository.names()
    assert "http2client" in names
    assert names == sorted(names)
    netdns = next(info for info in repository.entries() if info.name == "netdns")
    assert netdns.opaque


def test_catalog_accepts_plain_list(tmp_path) -> None:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([{"name": "alpha", "package": "app", "changed": 2, "old": "1"}]), encoding="utf-8")
    assert load_catalog(path) == (SettingInfo("alpha", package="app", changed="2", old="1"),)


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        json.dumps({"settings": "nope"}),
        json.dumps(["alpha"]),
        json.dumps([{"package": "app"}]),
        json.dumps([{"name": "#internal"}]),
        json.dumps([{"name": "a,b"}]),
        json.dumps([{"name": "alpha"}, {"name": "alpha"}]),
    ],
)
def test_invalid_catalogs_raise(tmp_path, payload: str) -> None:
    path = tmp_path / "catalog.json"
    path.write_text(payload, encoding="utf-8")
    with pytest.raises(CatalogError):
        CatalogRepository(path)


def test_missing_catalog_raises(tmp_path) -> None:
    with pytest.raises(CatalogError):
        CatalogRepository(tmp_path / "missing.json")


def test_config_from_env(monkeypatch, tmp_path) -> None:
    monkeypatch.delenv(CATALOG_ENV_VAR, raising=False)
    assert RuntimeConfig.from_env().catalog_path() == DEFAULT_CATALOG

    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"settings": [{"name": "beta"}]}), encoding="utf-8")
    monkeypatch.setenv(CATALOG_ENV_VAR, str(path))
    config = RuntimeConfig.from_env()
    assert config.catalog_path() == path
    assert Registry(config).names() == ["beta"]
