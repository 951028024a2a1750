"""FastAPI application entry point.

Assembles the webhook and health routers and configures logging on
startup.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from slackrelay import __version__
from slackrelay.api.health import router as health_router
from slackrelay.api.webhook import router as webhook_router
from slackrelay.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup."""
    cfg = get_settings()
    logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")
    logger.info("SlackRelay v%s starting up (config file: %s)", __version__, cfg.config_path)

    yield

    logger.info("SlackRelay shut down")


app = FastAPI(
    title="SlackRelay",
    version=__version__,
    description="Relay inbound webhooks to the Slack Web API.",
    lifespan=lifespan,
)

app.include_router(webhook_router)
app.include_router(health_router)


def main() -> None:
    """Run the application via Uvicorn when invoked as ``python -m slackrelay.main``."""
    import uvicorn

    cfg = get_settings()
    uvicorn.run(
        "slackrelay.main:app",
        host=cfg.host,
        port=cfg.port,
        log_level=cfg.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
