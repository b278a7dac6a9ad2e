from __future__ import annotations

import logging
from collections.abc import Sequence

from ...core.bisect import Site, marker, parse_pattern, site_hash
from ...core.lookup import parse
from ...core.registry import Registry
from ...core.settings import Setting
from .schemas import (
    BisectPayload,
    EnvironmentPayload,
    MetricPayload,
    MetricsPayload,
    SettingPayload,
)

__all__ = ["DebugService"]

logger = logging.getLogger(__name__)


def _setting_payload(registry: Registry, setting: Setting) -> SettingPayload:
    info = setting.info
    value, found = setting.lookup()
    return SettingPayload(
        name=setting.name,
        package=info.package if info else "",
        value=value,
        is_set=found and value != "",
        opaque=bool(info and info.opaque),
        non_default=setting.non_default_count(),
        metric=registry.metric_name(setting.name) if setting.exported else None,
        changed=info.changed if info else None,
        old=info.old if info else None,
    )


class DebugService:
    """Read-only view over a registry for the HTTP and CLI surfaces."""

    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def list_settings(self) -> list[SettingPayload]:
        return [_setting_payload(self.registry, setting) for setting in self.registry.settings()]

    def get_setting(self, name: str) -> SettingPayload:
        return _setting_payload(self.registry, self.registry.setting(name))

    def environment(self) -> EnvironmentPayload:
        raw = self.registry.source.raw()
        return EnvironmentPayload(env_var=self.registry.source.env_var, raw=raw, settings=parse(raw))

    def metrics(self, names: Sequence[str] | None = None) -> MetricsPayload:
        if names:
            samples = self.registry.read_metrics(names)
            items = [
                MetricPayload(name=s.name, kind="uint64" if s.known else "bad", value=s.value) for s in samples
            ]
        else:
            items = [
                MetricPayload(name=path, kind="uint64", value=value)
                for path, value in self.registry.export().items()
            ]
        logger.debug("Reporting %d metric samples", len(items))
        return MetricsPayload(metrics=items)

    def evaluate(self, pattern: str, setting: str, site: Site) -> BisectPayload:
        parsed = parse_pattern(pattern)
        decision = parsed.decide(setting, site) if parsed is not None else None
        hashed = site_hash(setting, site)
        return BisectPayload(
            valid=parsed is not None,
            decision=decision.value if decision is not None else "no-opinion",
            forced=bool(decision and decision.forced),
            site_hash=f"0x{hashed:016x}",
            marker=marker(hashed),
        )
