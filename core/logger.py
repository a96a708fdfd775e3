from __future__ import annotations
import re
import sys

from loguru import logger

from .config import config

# Tokens travel as a query parameter, so URLs in log lines carry them
_TOKEN_PATTERN = re.compile(r"(token=)[^&\s'\"]+")


def _redact(record) -> None:
    record["message"] = _TOKEN_PATTERN.sub(r"\1***", record["message"])
    record["extra"].setdefault("component", "app")


logger.remove()
logger.configure(patcher=_redact)
logger.add(
    sys.stdout,
    level=config.log_level,
    enqueue=True,
    backtrace=False,
    diagnose=False,
    colorize=True,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level}</level> | {extra[component]} | {message}",
)
logger.add(
    config.log_file,
    rotation="20 MB",
    retention="14 days",
    compression="zip",
    level=config.log_level,
    enqueue=True,
    serialize=True,  # JSON logs for better analysis
)


def get_logger(name: str = "app"):
    return logger.bind(component=name)
