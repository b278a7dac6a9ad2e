from __future__ import annotations

import pytest

from rundebug.core.bisect import marker, site_hash
from rundebug.core.source import SettingsSource


@pytest.mark.parametrize(
    ("settings", "raw_name", "expected"),
    [
        ("", "#", ""),
        ("", "#foo", ""),
        ("foo=bar", "#foo", "bar"),
        ("foo=bar,after=x", "#foo", "bar"),
        ("before=x,foo=bar,after=x", "#foo", "bar"),
        ("before=x,foo=bar", "#foo", "bar"),
        (",,,foo=bar,,,", "#foo", "bar"),
        ("foodecoy=wrong,foo=bar", "#foo", "bar"),
        ("foo=", "#foo", ""),
        ("foo", "#foo", ""),
        (",foo", "#foo", ""),
        ("foo=bar,baz", "#loooooooong", ""),
    ],
)
def test_value_reads_environment(registry, monkeypatch, settings: str, raw_name: str, expected: str) -> None:
    monkeypatch.setenv("RUNDEBUG", settings)
    assert registry.setting(raw_name).value() == expected


def test_value_is_reread_on_every_call(registry, monkeypatch) -> None:
    setting = registry.setting("http2client")
    assert setting.value() == ""
    monkeypatch.setenv("RUNDEBUG", "http2client=0")
    assert setting.value() == "0"
    assert setting.value() == "0"
    monkeypatch.setenv("RUNDEBUG", "http2client=1")
    assert setting.value() == "1"
    monkeypatch.delenv("RUNDEBUG")
    assert setting.value() == ""


def test_lookup_reports_presence(registry, monkeypatch) -> None:
    setting = registry.setting("http2client")
    monkeypatch.setenv("RUNDEBUG", "http2client")
    assert setting.lookup() == ("", True)
    assert setting.value() == ""


def test_internal_names_strip_sentinel(registry) -> None:
    setting = registry.setting("#buggy")
    assert setting.name == "buggy"
    assert setting.raw_name == "#buggy"
    assert setting.internal
    assert setting.info is None
    assert not setting.exported

    public = registry.setting("http2client")
    assert not public.internal
    assert public.exported
    assert public.info is not None and public.info.package == "net/http"


def test_str_renders_name_and_value(registry, monkeypatch) -> None:
    monkeypatch.setenv("RUNDEBUG", "panicnil=1")
    assert str(registry.setting("panicnil")) == "panicnil=1"
    assert repr(registry.setting("#foo")) == "Setting('#foo')"


def test_value_does_not_count_non_default_uses(registry, monkeypatch) -> None:
    monkeypatch.setenv("RUNDEBUG", "http2client=0")
    setting = registry.setting("http2client")
    setting.value()
    setting.value()
    assert setting.non_default_count() == 0


def test_source_override_stack(monkeypatch) -> None:
    monkeypatch.setenv("RUNDEBUG", "foo=env")
    source = SettingsSource()
    assert source.raw() == "foo=env"
    with source.override("foo=outer"):
        assert source.raw() == "foo=outer"
        with source.override(""):
            assert source.raw() == ""
        assert source.raw() == "foo=outer"
    assert source.raw() == "foo=env"


def test_source_set_env(monkeypatch) -> None:
    monkeypatch.delenv("RUNDEBUG", raising=False)
    source = SettingsSource()
    source.set_env({"foo": "1", "bar": ""})
    assert source.raw() == "foo=1,bar="


def test_matches_without_pattern_uses_organic_value(registry, monkeypatch) -> None:
    setting = registry.setting("#buggy")
    assert setting.matches("1") is False
    monkeypatch.setenv("RUNDEBUG", "buggy=1")
    assert setting.matches("1") is True
    assert setting.matches("2") is False


def test_matches_defaults_site_to_caller_location(registry, monkeypatch) -> None:
    setting = registry.setting("#buggy")
    monkeypatch.setenv("RUNDEBUG", "bisect=buggy:@test_settings.py:")
    assert setting.matches("1") is True
    monkeypatch.setenv("RUNDEBUG", "bisect=buggy:@elsewhere.py:")
    assert setting.matches("1") is False


def test_verbose_pattern_prints_marker(registry, monkeypatch, capsys) -> None:
    setting = registry.setting("#buggy")
    monkeypatch.setenv("RUNDEBUG", "bisect=buggy:v2")
    assert setting.matches("1", site=1) is False
    assert setting.matches("1", site=2) is True
    err = capsys.readouterr().err.splitlines()
    assert err == [f"{marker(site_hash('buggy', 2))} buggy 2"]


def test_quiet_pattern_prints_nothing(registry, monkeypatch, capsys) -> None:
    setting = registry.setting("#buggy")
    monkeypatch.setenv("RUNDEBUG", "bisect=buggy:2")
    assert setting.matches("1", site=2) is True
    assert capsys.readouterr().err == ""
