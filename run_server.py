import sys

import uvicorn

from weatherdash.config import settings
from weatherdash.errors import StoreError
from weatherdash.main import create_app
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


def build_app_or_exit():
    """
    Build the app, exiting with status 1 if the favorites store is misconfigured
    (e.g. WEATHERDASH_FAVORITES_DATABASE_URL unset) or unreachable.
    """
    try:
        return create_app()
    except (ValueError, StoreError) as exc:
        logger.error(f"Favorites store unavailable: {exc}")
        logger.error("Set WEATHERDASH_FAVORITES_DATABASE_URL (or WEATHERDASH_FAVORITES_STORE=memory for dev).")
        sys.exit(1)


if __name__ == "__main__":
    setup_logging(level=settings.log_level, job_name="weatherdash")
    app = build_app_or_exit()

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        reload=False,
    )
