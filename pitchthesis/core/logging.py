# pitchthesis/core/logging.py
import logging
from pitchthesis.config import settings

# attributes every LogRecord carries; anything else came in through `extra=`
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class ContextFormatter(logging.Formatter):
    """Timestamped line followed by the record's extra fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {k: v for k, v in vars(record).items() if k not in _RESERVED}
        if context:
            line += " " + " ".join(f"{k}={v}" for k, v in context.items())
        return line


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(f"pitchthesis.{name}")
    if not logger.handlers:
        logger.setLevel(settings.log_level)
        handler = logging.StreamHandler()
        handler.setFormatter(ContextFormatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
