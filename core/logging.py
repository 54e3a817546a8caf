"""
로깅 설정

finledger 웹 서버와 스크립트 공통. 콘솔(stdout) + 프로세스별 일 단위 로그 파일.

    from core.logging import setup_logging
    setup_logging("web")
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Paths

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7

# 요청/쿼리마다 로그를 남기는 라이브러리 로거는 WARNING 이상만
NOISY_LOGGERS = ("aiosqlite", "httpcore", "httpx", "asyncio", "uvicorn.access")

_LOG_DIRS = {
    "web": Paths.WEB_LOGS_DIR,
    "scripts": Paths.SCRIPTS_LOGS_DIR,
}


def get_log_file_path(process_name: str) -> Path:
    """프로세스별 로그 파일 경로 (logs/<process>/<process>.log)"""
    log_dir = _LOG_DIRS.get(process_name, Paths.LOGS_DIR)
    return log_dir / f"{process_name}.log"


def _to_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def _daily_file_handler(log_file: Path) -> TimedRotatingFileHandler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.suffix = "%Y-%m-%d"
    return handler


def apply_log_levels(console_level: int | str, file_level: int | str) -> None:
    """settings.yaml의 콘솔/파일 레벨을 설치된 핸들러에 반영

    setup_logging은 설정 로드 전에 호출되므로 lifespan에서 다시 맞춤.
    """
    for handler in logging.getLogger().handlers:
        # TimedRotatingFileHandler도 StreamHandler 하위 클래스
        if isinstance(handler, TimedRotatingFileHandler):
            handler.setLevel(_to_level(file_level))
        elif isinstance(handler, logging.StreamHandler):
            handler.setLevel(_to_level(console_level))


def setup_logging(
    process_name: str,
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.INFO,
) -> logging.Logger:
    """루트 로거에 콘솔/파일 핸들러 설치 (기존 핸들러는 교체)"""
    log_file = get_log_file_path(process_name)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    file_handler = _daily_file_handler(log_file)
    for handler in (console_handler, file_handler):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    apply_log_levels(console_level, file_level)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.debug(
        f"Logging ready for {process_name}",
        extra={"log_file": str(log_file)},
    )
    return root_logger
