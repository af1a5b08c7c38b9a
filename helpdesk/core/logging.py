"""
Process-wide logging for the helpdesk service.

Every module logs through ``logging.getLogger(__name__)``; this module only
decides where records go and how loud the libraries underneath may be.
"""
import logging
import sys

from helpdesk.core.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# engine/driver chatter we only want when something goes wrong
QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "multipart")


def setup_logging(settings: Settings) -> None:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    # SQL_ECHO asks for statements, so let the engine logger through
    if settings.SQL_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    logging.getLogger(__name__).debug(
        f"Logging ready for {settings.APP_NAME} at {settings.LOG_LEVEL}"
    )
