# src/destscore/api/app.py
"""
FastAPI application wiring.

`create_app()` builds the app (CORS + routes); the module-level `app` is what an
ASGI server imports: `uvicorn destscore.api.app:app`.

CORS env:
- DESTSCORE_CORS_ORIGINS="http://localhost:3000,https://example.org"
- DESTSCORE_CORS_ALLOW_LOCAL=0 turns off the localhost fallback used when no origins are listed
"""

from __future__ import annotations

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from destscore.config.settings import get_settings
from destscore.core.env import env_flag, env_list
from destscore.core.logging import configure_logging

from .routes import router

_LOCALHOST_ORIGIN_REGEX = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"


def _add_cors(app: FastAPI) -> None:
    origins = env_list("DESTSCORE_CORS_ORIGINS")
    regex = None if origins or not env_flag("DESTSCORE_CORS_ALLOW_LOCAL", True) else _LOCALHOST_ORIGIN_REGEX
    if not origins and regex is None:
        return
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_origin_regex=regex,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=f"{get_settings().app.name} API", version="0.1.0")
    _add_cors(app)
    app.include_router(router)

    @app.get("/healthz", include_in_schema=False)
    def healthz() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
