"""Application entry point."""

import logging
import os
import sys

import uvicorn

from runcaster.config import Config
from runcaster.app import create_app

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure root logging from LOG_LEVEL (default INFO)."""
    log_level = (os.getenv("LOG_LEVEL", "INFO") or "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Per-request client logs are noisy; keep warnings and errors
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main():
    """Run the rewards API."""
    setup_logging()
    config = Config.from_env()

    if not config.supabase_url or not config.supabase_service_key:
        logger.error("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")
        sys.exit(1)

    app = create_app(config)
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
    )


if __name__ == "__main__":
    main()
