"""Process-level setup shared by entry points."""

import logging

from hackorsnooze.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging with the level from settings unless given."""
    settings = get_settings()
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
    logger = logging.getLogger(__name__)
    logger.debug(f"Environment: {settings.environment}, API: {settings.api_base_url}")
