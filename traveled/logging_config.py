"""
로깅 설정 모듈

- 콘솔
- traveled_YYYYMMDD.log: 전체 애플리케이션 로그
- error.log: ERROR 이상
- share_audit.log: 공유 생성/삭제, Rate limit 초과 기록
"""
import logging
import logging.handlers
from datetime import datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ERROR_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5

# 감사 로그로 모을 로거
AUDIT_LOGGERS = (
    "traveled.services.share_service",
    "traveled.services.storage_service",
    "traveled.middleware.rate_limiter",
)

NOISY_LOGGERS = ("uvicorn.access", "watchfiles", "httpx", "httpcore", "PIL", "multipart")


def _rotating_handler(path: Path, level: int, fmt: str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, DATE_FORMAT))
    return handler


def setup_logging(log_dir: str = "logs", log_level: str = "INFO"):
    """
    애플리케이션 로깅 설정

    Args:
        log_dir: 로그 파일이 저장될 디렉토리
        log_level: 로깅 레벨
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    # 재호출 시 핸들러 중복 방지
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root_logger.addHandler(console_handler)

    root_logger.addHandler(
        _rotating_handler(
            log_path / f"traveled_{datetime.now().strftime('%Y%m%d')}.log",
            logging.DEBUG,
            LOG_FORMAT,
        )
    )
    root_logger.addHandler(_rotating_handler(log_path / "error.log", logging.ERROR, ERROR_FORMAT))

    audit_handler = _rotating_handler(log_path / "share_audit.log", logging.INFO, LOG_FORMAT)
    for name in AUDIT_LOGGERS:
        audit_logger = logging.getLogger(name)
        for handler in audit_logger.handlers[:]:
            audit_logger.removeHandler(handler)
        audit_logger.addHandler(audit_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"로깅 초기화: {log_path.absolute()} (레벨 {log_level})")
