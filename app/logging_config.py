import logging

from app.config import get_settings

_LOGGING_CONFIGURED = False


def configure_logging() -> None:
    """Configura o logging do processo a partir do LOG_LEVEL (só na primeira chamada)."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    level_name = get_settings().LOG_LEVEL.upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    _LOGGING_CONFIGURED = True
