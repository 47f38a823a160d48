"""FastAPI app entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from booru_importer.api.routes import router
from booru_importer.config import get_settings
from booru_importer.logging_config import setup_logging
from booru_importer.scrape import build_default_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # Logging first so everything after it is JSON
    setup_logging(settings.log_level)
    logger.info("starting booru importer")

    registry = build_default_registry(settings)

    app.state.settings = settings
    app.state.registry = registry

    logger.info(
        "booru importer ready",
        extra={
            "engines": [e.name for e in registry.engines],
            "tagging_enabled": bool(settings.tagging_server_url),
        },
    )

    yield

    logger.info("shutting down booru importer")


app = FastAPI(title="Booru Importer", lifespan=lifespan)
app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}
