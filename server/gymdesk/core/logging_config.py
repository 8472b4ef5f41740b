import logging
import sys


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the root logger once; repeated calls only adjust the level."""

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if not any(getattr(handler, "_gymdesk", False) for handler in root_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        handler._gymdesk = True  # type: ignore[attr-defined]
        root_logger.addHandler(handler)

    # SQL echo stays off unless explicitly debugging
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    return root_logger
