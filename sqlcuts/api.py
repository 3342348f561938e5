"""
FastAPI app entry point exposing the query/update intents over HTTP.
Run with `uvicorn sqlcuts.api:app`.
"""
from __future__ import annotations


from fastapi import FastAPI

from .db import get_settings
from .logs import configure_logging
from .version import APP_NAME, __version__


app = FastAPI(title=f"{APP_NAME}-api", version=__version__)


@app.on_event("startup")
def on_startup():
    configure_logging(get_settings()["log_level"])


from .routes import base as base_routes
from .routes import intents as intent_routes

app.include_router(base_routes.router)
app.include_router(intent_routes.router)
