"""Debug feature: read-only service and API router over a settings registry."""

from .router import create_debug_router
from .schemas import (
    BisectPayload,
    BisectRequest,
    EnvironmentPayload,
    MetricPayload,
    MetricsPayload,
    SettingPayload,
)
from .service import DebugService

__all__ = [
    "BisectPayload",
    "BisectRequest",
    "DebugService",
    "EnvironmentPayload",
    "MetricPayload",
    "MetricsPayload",
    "SettingPayload",
    "create_debug_router",
]
