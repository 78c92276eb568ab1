"""Environment configuration and logging setup."""

import logging
import os

import logfire
from dotenv import load_dotenv

load_dotenv()

DEFAULT_PROGRAM = os.getenv("NSPIRE_DEFAULT_PROGRAM", "standard")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN")


def configure_logging(level: str | None = None) -> None:
    """Configure stdlib logging and, when a token is present, Logfire.

    Called by the host application; importing the package never touches
    logging configuration.
    """
    level = (level or LOG_LEVEL).upper()
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=getattr(logging, level, logging.INFO),
    )

    # Ship log records to Logfire for observability
    if LOGFIRE_TOKEN:
        logfire.configure(token=LOGFIRE_TOKEN)
        logging.getLogger("nspire").addHandler(logfire.LogfireLoggingHandler())
