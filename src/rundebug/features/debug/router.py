from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from ...core.errors import UnknownSettingError
from .schemas import BisectRequest
from .service import DebugService

__all__ = ["create_debug_router"]


class _DebugController:
    def __init__(self, service: DebugService) -> None:
        self.service = service

    def settings(self) -> JSONResponse:
        return JSONResponse({"settings": [payload.to_dict() for payload in self.service.list_settings()]})

    def setting(self, name: str) -> JSONResponse:
        try:
            payload = self.service.get_setting(name)
        except UnknownSettingError as exc:
            raise HTTPException(404, str(exc)) from exc
        return JSONResponse(payload.to_dict())

    def environment(self) -> JSONResponse:
        return JSONResponse(self.service.environment().to_dict())

    def metrics(self, names: list[str] | None) -> JSONResponse:
        return JSONResponse(self.service.metrics(names).to_dict())

    def bisect(self, body: BisectRequest) -> JSONResponse:
        return JSONResponse(self.service.evaluate(body.pattern, body.setting, body.site).to_dict())


def create_debug_router(service: DebugService) -> APIRouter:
    controller = _DebugController(service)
    router = APIRouter(prefix="/api/v1/debug", tags=["debug"])

    @router.get("/settings")
    def list_settings() -> JSONResponse:
        return controller.settings()

    @router.get("/settings/{name}")
    def get_setting(name: str) -> JSONResponse:
        return controller.setting(name)

    @router.get("/env")
    def get_environment() -> JSONResponse:
        return controller.environment()

    @router.get("/metrics")
    def get_metrics(name: list[str] | None = Query(default=None)) -> JSONResponse:
        return controller.metrics(name)

    @router.post("/bisect")
    def post_bisect(body: BisectRequest) -> JSONResponse:
        return controller.bisect(body)

    return router
