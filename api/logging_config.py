"""API 로깅 설정 — 콘솔 + 로테이션 파일.

크롤러/추출 엔진은 loguru로 기록하므로 loguru 출력을 표준 logging으로
넘겨 같은 핸들러(콘솔, cardad.log)에 한 번만 찍히게 한다.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from loguru import logger

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))

HANDLER_PREFIX = "cardad."


class PropagateHandler(logging.Handler):
    """loguru 레코드를 같은 이름의 표준 logger로 전달."""

    def emit(self, record: logging.LogRecord):
        logging.getLogger(record.name).handle(record)


def _installed(root: logging.Logger) -> bool:
    return any((h.get_name() or "").startswith(HANDLER_PREFIX) for h in root.handlers)


def setup_logging(log_dir: Path | None = None, level: str | None = None) -> bool:
    """루트 logger에 핸들러 설치. 이미 설치돼 있으면 아무것도 하지 않고 False."""
    root_logger = logging.getLogger()
    if _installed(root_logger):
        return False

    level_no = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    root_logger.setLevel(level_no)

    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stdout)
    console.set_name(HANDLER_PREFIX + "console")
    console.setFormatter(fmt)
    console.setLevel(level_no)
    root_logger.addHandler(console)

    log_dir = log_dir or LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_dir / "cardad.log",
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.set_name(HANDLER_PREFIX + "file")
    file_handler.setFormatter(fmt)
    root_logger.addHandler(file_handler)

    # loguru 기본 stderr 싱크 대신 표준 logging으로 전달
    logger.remove()
    logger.add(PropagateHandler(), level=level_no, format="{message}")

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    return True
