"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from confluence_approval.config import ConfluenceConfig, Settings
from confluence_approval.errors import ConfigurationError
from confluence_approval.webhook import handler as webhook_handler
from confluence_approval.webhook.handler import router as webhook_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Requests still get a 500 until this is fixed; health checks keep working
    try:
        ConfluenceConfig.from_settings(settings)
    except ConfigurationError as exc:
        logger.error("%s", exc)

    webhook_handler.configure(settings)

    logger.info("Confluence approval webhook server started")
    yield
    logger.info("Confluence approval webhook server stopped")


app = FastAPI(title="Confluence SOP Approval", lifespan=lifespan)
app.include_router(webhook_router)


@app.get("/health")
async def health():
    return webhook_handler.health_payload()


# Registered last: any other GET is a health check
@app.get("/{path:path}")
async def health_any_path(path: str):
    return webhook_handler.health_payload()


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "confluence_approval.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
