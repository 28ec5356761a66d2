"""Process-wide logging setup."""

import logging
import sys
import time


class ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        ts = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(record.created))
        base = f"{ts} : {record.levelname:<7} : {record.name} : {record.getMessage()}"

        if record.exc_info:
            base += f"\n{self.formatException(record.exc_info)}"

        return base


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger with a single stdout handler."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(numeric_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(ConsoleFormatter())
    root.addHandler(handler)

    # Access logs duplicate our own connect/disconnect lines
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logging initialized: level=%s", level.upper())
