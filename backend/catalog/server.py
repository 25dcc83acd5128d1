"""Process entry point: load configuration, configure logging, serve."""

from __future__ import annotations

import logging
import sys

import uvicorn
from pydantic import ValidationError

from catalog.core.config import Settings, get_settings, missing_settings
from catalog.main import create_app

logger = logging.getLogger("catalog")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load_settings() -> Settings:
    """Build settings or exit the process when required variables are missing."""
    try:
        return get_settings()
    except ValidationError as exc:
        configure_logging()
        missing = missing_settings(exc)
        for name in missing:
            logger.error(f"Missing required environment variable: {name}")
        if not missing:
            logger.error(f"Invalid configuration: {exc}")
        logger.error("Please check your .env file and ensure all required variables are set.")
        sys.exit(1)


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)

    app = create_app(settings)

    logger.info(f"Server running on port {settings.port}")
    logger.info(f"Admin panel: http://localhost:{settings.port}/admin")
    logger.info(f"Website: http://localhost:{settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
