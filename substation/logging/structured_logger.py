"""
구조화 로깅 설정 모듈입니다.

setup_logging()은 root 로거를 한 번에 구성합니다.

    콘솔  - 항상 stderr (stdout은 CLI 출력 전용)
    파일  - system.log_to_file이 True일 때 log_dir/app.log, 10MB x 5개 순환
    포맷  - json: python-json-logger, 레코드마다 session_id / module / level 필드
            text: "시각 [세션 앞 8자] 레벨 로거: 메시지"

사용 예시:
    >>> setup_logging(config)
    >>> StructuredLogger.get("substation.script.parser").info("파싱 완료", extra={"events": 120})
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
import uuid
from pathlib import Path
from typing import Optional

from pythonjsonlogger import jsonlogger

from substation.config.schema import AppConfig, SystemConfig

LOG_FILE_NAME = "app.log"
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

# setup_logging()에서 확정된 현재 세션 ID
_SESSION_ID = ""


def setup_logging(config: AppConfig, session_id: Optional[str] = None) -> None:
    """
    root 로거의 핸들러를 교체합니다. 여러 번 호출해도 핸들러가 누적되지 않습니다.

    session_id 우선순위: 인자 > config.system.session_id > 새 UUID
    """
    global _SESSION_ID

    system = config.system
    _SESSION_ID = session_id or system.session_id or str(uuid.uuid4())
    level = logging.getLevelName(system.log_level)

    root = logging.getLogger()
    for old_handler in list(root.handlers):
        root.removeHandler(old_handler)
        old_handler.close()
    root.setLevel(level)

    formatter = _make_formatter(system.log_format, _SESSION_ID)
    for new_handler in _build_handlers(system):
        new_handler.setLevel(level)
        new_handler.setFormatter(formatter)
        root.addHandler(new_handler)

    logging.getLogger(__name__).debug(
        f"로깅 구성: level={system.log_level}, format={system.log_format}, "
        f"log_to_file={system.log_to_file}, session_id={_SESSION_ID}"
    )


def _build_handlers(system: SystemConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if system.log_to_file:
        log_path = Path(system.log_dir) / LOG_FILE_NAME
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=LOG_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding="utf-8",
            ))
        except OSError as file_error:
            # 파일 로그를 못 열어도 콘솔 로그로 계속 진행
            print(f"로그 파일을 열 수 없습니다: {log_path} ({file_error})", file=sys.stderr)
    return handlers


def _make_formatter(log_format: str, session_id: str) -> logging.Formatter:
    if log_format == "json":
        return _JsonFormatter(session_id=session_id)
    return _TextFormatter(session_id=session_id)


class _JsonFormatter(jsonlogger.JsonFormatter):
    """레코드마다 session_id / module / level 필드를 붙이는 JSON 포맷터입니다."""

    def __init__(self, session_id: str = "") -> None:
        super().__init__(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
            json_ensure_ascii=False,
        )
        self.session_id = session_id

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.update(
            session_id=self.session_id,
            module=record.name,
            level=record.levelname,
        )


class _TextFormatter(logging.Formatter):
    """사람이 읽는 한 줄 포맷입니다. 세션 ID는 앞 8자만 표시합니다."""

    def __init__(self, session_id: str = "") -> None:
        prefix = session_id[:8] or "no-sid"
        super().__init__(
            f"%(asctime)s [{prefix}] %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


class StructuredLogger:
    """logging.getLogger 래퍼입니다. 반환값은 표준 Logger 그대로입니다."""

    @staticmethod
    def get(name: str) -> logging.Logger:
        return logging.getLogger(name)

    @staticmethod
    def get_session_id() -> str:
        return _SESSION_ID
