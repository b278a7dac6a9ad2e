from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "BisectPayload",
    "BisectRequest",
    "EnvironmentPayload",
    "MetricPayload",
    "MetricsPayload",
    "SettingPayload",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SettingPayload(_APIModel):
    name: str
    package: str
    value: str
    is_set: bool = Field(alias="set")
    opaque: bool
    non_default: int
    metric: str | None = None
    changed: str | None = None
    old: str | None = None


class MetricPayload(_APIModel):
    name: str
    kind: Literal["uint64", "bad"]
    value: int | None = None


class MetricsPayload(_APIModel):
    metrics: list[MetricPayload]


class EnvironmentPayload(_APIModel):
    env_var: str
    raw: str
    settings: dict[str, str]


class BisectRequest(BaseModel):
    pattern: str
    setting: str
    site: int | str


class BisectPayload(_APIModel):
    valid: bool
    decision: str
    forced: bool
    site_hash: str
    marker: str
