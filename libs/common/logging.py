import json
import logging
import sys
from typing import Optional

from libs.common.config import get_settings

# Attributes every LogRecord has; anything else arrived through ``extra=``
_RESERVED = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}

# Chatty libraries under the storage and HTTP layers
NOISY_LOGGERS = ("httpx", "httpcore", "aiosqlite", "sqlalchemy.engine")


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line, for log shipping outside local development.

    Fields passed with ``extra=`` (storage key, product id, order id, ...)
    are copied to the top level of the object.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Install a single stdout handler on the root logger.

    ``level`` overrides ``LOG_LEVEL`` from the settings.
    """
    settings = get_settings()
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    if settings.ENVIRONMENT == "local":
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
        )
    else:
        formatter = JsonFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    # Replace, never stack, handlers on repeated calls
    root_logger.handlers[:] = [handler]

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Module logger; call with ``__name__``.
    """
    return logging.getLogger(name)
