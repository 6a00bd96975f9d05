"""
Asset Allocation Engine - Logger Configuration
Centralized logging with loguru

Sinks are opt-in: importing the engine never touches the host
application's loguru handlers. Call setup_logging() to attach the
engine's own console and file sinks.
"""
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from allocation_engine.config import settings


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>\n{exception}"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}\n{exception}"

# Handler ids added by setup_logging; the only ones it ever removes
_handler_ids: List[int] = []


def _formatter(template: str):
    """Build a format callable that falls back to the module name for unbound records."""
    unbound = template.replace("{extra[name]}", "{name}")

    def format_record(record) -> str:
        return template if "name" in record["extra"] else unbound

    return format_record


def reset_logging() -> None:
    """Remove the sinks previously added by setup_logging."""
    while _handler_ids:
        logger.remove(_handler_ids.pop())


def setup_logging(
    level: Optional[str] = None,
    log_to_file: Optional[bool] = None,
    log_dir: Optional[str] = None,
) -> None:
    """
    (Re)configure engine log sinks.

    Arguments left as None fall back to settings. Handlers added by the
    host application are left in place.
    """
    level = level or ("DEBUG" if settings.DEBUG else settings.LOG_LEVEL)
    log_to_file = settings.LOG_TO_FILE if log_to_file is None else log_to_file

    reset_logging()

    _handler_ids.append(
        logger.add(sys.stdout, colorize=True, format=_formatter(CONSOLE_FORMAT), level=level)
    )

    if log_to_file:
        log_path = Path(log_dir or settings.LOG_DIR)
        log_path.mkdir(parents=True, exist_ok=True)

        # Every allocation run at DEBUG, errors on their own
        for filename, file_level in (("allocation.log", "DEBUG"), ("error.log", "ERROR")):
            _handler_ids.append(
                logger.add(
                    log_path / filename,
                    rotation="10 MB",
                    retention="30 days",
                    compression="gz",
                    format=_formatter(FILE_FORMAT),
                    level=file_level,
                )
            )


def get_logger(name: str = __name__):
    """
    Get a logger bound to a component name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logger.bind(name=name)


# Export configured logger
__all__ = ["logger", "get_logger", "reset_logging", "setup_logging"]
