"""
Notebook API - Command-Line Entry Point
=======================================

What:  `python -m notebook_api` (or the `notebook-api` console script).
How:   Loads settings, exits with status 1 if they are invalid (for example
       DATABASE_URL is missing), then serves `notebook_api.main:app` with
       uvicorn on the configured host and port.
"""

import logging
import sys

import uvicorn
from pydantic import ValidationError

logger = logging.getLogger("notebook_api")


def main() -> int:
    try:
        from notebook_api.config import settings
    except ValidationError as e:
        logging.basicConfig(level=logging.ERROR, format="%(levelname)s %(name)s: %(message)s")
        missing = ", ".join(str(err["loc"][0]).upper() for err in e.errors() if err.get("loc"))
        logger.critical("Invalid configuration (%s): %s", missing or "settings", e)
        return 1

    from notebook_api.main import setup_logging

    setup_logging(settings.log_level)
    logger.info("Starting server on http://%s:%d", settings.host, settings.port)
    uvicorn.run(
        "notebook_api.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
