"""
Loglama yapılandırması.
Her modül kendi adıyla bir logger alır; seviye ayarlardan okunur.
"""
import logging
import sys

from katalog.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level() -> int:
    """DEBUG açıksa DEBUG, değilse LOG_LEVEL; tanınmayan değerlerde INFO."""
    settings = get_settings()
    if settings.DEBUG:
        return logging.DEBUG
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """Standart çıktıya yazan, tek handler'lı logger döndürür."""
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(resolve_level())
    return logger
