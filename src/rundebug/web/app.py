from __future__ import annotations

import logging
import os

from fastapi import FastAPI

from ..core.registry import Registry, default_registry
from ..features.debug import DebugService, create_debug_router

__all__ = ["create_app", "main"]

logger = logging.getLogger(__name__)


def create_app(registry: Registry | None = None) -> FastAPI:
    registry = registry or default_registry()
    app = FastAPI(title="rundebug")
    app.include_router(create_debug_router(DebugService(registry)))

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    logger.info("Serving %d settings read from $%s", len(registry.names()), registry.source.env_var)
    return app


def main() -> None:  # pragma: no cover - runner
    import uvicorn

    host = os.environ.get("BIND", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run(create_app(), host=host, port=port, factory=False)


if __name__ == "__main__":  # pragma: no cover
    main()
