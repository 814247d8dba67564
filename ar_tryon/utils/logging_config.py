"""
Logging setup for the ar_tryon package.

Handlers are attached once to the package logger ("ar_tryon"); module
loggers are children of it and propagate their records upward.
"""
import logging
import logging.handlers
from pathlib import Path
from typing import List, Optional

from .config_loader import ConfigSection, get_config

PACKAGE_LOGGER = 'ar_tryon'

_configured = False


def _level(name: Optional[str], default: int) -> int:
    return getattr(logging, str(name).upper(), default) if name else default


def _build_handlers(section: ConfigSection, formatter: logging.Formatter) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []

    if section.get('console.enabled', True):
        console = logging.StreamHandler()
        console.setLevel(_level(section.get('console.level'), logging.INFO))
        console.setFormatter(formatter)
        handlers.append(console)

    if section.get('file.enabled', False):
        log_dir = Path(section.get('file.directory', 'logs'))
        log_dir.mkdir(parents=True, exist_ok=True)

        rotating = logging.handlers.RotatingFileHandler(
            log_dir / section.get('file.filename', 'ar_tryon.log'),
            maxBytes=section.get('file.max_bytes', 10 * 1024 * 1024),
            backupCount=section.get('file.backup_count', 5),
            encoding='utf-8'
        )
        rotating.setLevel(_level(section.get('file.level'), logging.DEBUG))
        rotating.setFormatter(formatter)
        handlers.append(rotating)

    return handlers


def setup_logging(level: Optional[str] = None, force: bool = False) -> logging.Logger:
    """
    패키지 로거 설정 (config.yaml의 logging 섹션)

    Args:
        level: 설정 파일의 logging.level 대신 사용할 레벨 (예: 'DEBUG')
        force: 이미 설정된 경우에도 핸들러를 다시 구성

    Returns:
        logging.Logger: 'ar_tryon' 패키지 로거
    """
    global _configured

    logger = logging.getLogger(PACKAGE_LOGGER)
    if _configured and not force:
        if level:
            logger.setLevel(_level(level, logger.level))
        return logger

    section = ConfigSection(get_config().get('logging', {}) or {})
    formatter = logging.Formatter(
        section.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
        datefmt=section.get('date_format')
    )

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in _build_handlers(section, formatter):
        logger.addHandler(handler)

    logger.setLevel(_level(level or section.get('level'), logging.INFO))
    _configured = True
    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    모듈 로거 (보통 get_logger(__name__))

    패키지 밖의 이름(예: '__main__')은 'ar_tryon.<name>' 아래에 둔다.
    """
    setup_logging()

    if not name or name == PACKAGE_LOGGER:
        return logging.getLogger(PACKAGE_LOGGER)
    if not name.startswith(PACKAGE_LOGGER + '.'):
        name = f"{PACKAGE_LOGGER}.{name.strip('_') or 'app'}"
    return logging.getLogger(name)
