# src/ps_app/api/main.py
from fastapi import FastAPI

from ps_app.core.config import get_settings
from ps_app.core.logging import configure_logging
from ps_app.core.registry import load_module_routers
from ps_app.version import get_version


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Photo Sort", version=get_version())
    configure_logging(
        level="DEBUG" if settings.DEBUG else "INFO", json=settings.LOG_JSON
    )

    for r in load_module_routers():
        app.include_router(r, prefix="/api")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
