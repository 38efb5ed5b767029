import os
import sys

from loguru import logger

from core.config import settings


def setup_logging(log_level: str = None, log_dir: str = None):
    """Configure loguru with a daily rotating file sink and a console sink."""
    log_level = log_level or settings.LOG_LEVEL
    log_dir = log_dir or settings.LOG_DIR

    os.makedirs(log_dir, exist_ok=True)

    logger.remove()
    logger.add(
        os.path.join(log_dir, "ledger_{time:YYYY-MM-DD}.log"),
        rotation="1 day",
        retention="30 days",
        level=log_level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}",
    )
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level}</level> | <cyan>{name}:{function}:{line}</cyan> | {message}",
    )
    return logger
