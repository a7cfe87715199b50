"""
구조화 로깅 모듈 단위 테스트

검증 조건:
- JSON 포맷 로그에 session_id, level, module 필드 포함
- 콘솔 핸들러는 stderr 사용 (stdout은 직렬화 결과 출력용)
- log_to_file 활성화 시에만 RotatingFileHandler 생성
- text 포맷 세션 접두어
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
from io import StringIO

import pytest

from substation.config.schema import AppConfig
from substation.logging.structured_logger import (
    LOG_BACKUP_COUNT,
    LOG_MAX_BYTES,
    StructuredLogger,
    _JsonFormatter,
    _TextFormatter,
    setup_logging,
)


# =========================================================================
# 픽스처
# =========================================================================

@pytest.fixture(autouse=True)
def reset_root_logger():
    """각 테스트 후 root logger 핸들러 초기화."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()


@pytest.fixture
def config_json(tmp_path):
    config = AppConfig()
    config.system.log_level = "DEBUG"
    config.system.log_format = "json"
    config.system.log_dir = str(tmp_path / "logs")
    config.system.session_id = "test-session-001"
    return config


@pytest.fixture
def config_file_logging(config_json):
    config_json.system.log_to_file = True
    return config_json


def _rotating_handler():
    return next(
        (handler for handler in logging.getLogger().handlers
         if isinstance(handler, logging.handlers.RotatingFileHandler)),
        None,
    )


def _capture(formatter: logging.Formatter, name: str, level: int, message: str, **extra) -> str:
    """메모리 스트림 핸들러로 한 건의 로그 출력을 캡처합니다."""
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    logger = logging.getLogger(name)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        logger.log(level, message, extra=extra or None)
    finally:
        logger.removeHandler(handler)
    return stream.getvalue().strip()


# =========================================================================
# setup_logging 테스트
# =========================================================================

class TestSetupLogging:
    def test_console_handler_on_stderr(self, config_json):
        setup_logging(config_json)
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].stream is sys.stderr

    def test_no_file_by_default(self, config_json, tmp_path):
        setup_logging(config_json)
        assert _rotating_handler() is None
        assert not (tmp_path / "logs").exists()

    def test_session_id_argument_wins(self, config_json):
        setup_logging(config_json, session_id="custom-sid")
        assert StructuredLogger.get_session_id() == "custom-sid"

    def test_session_id_from_config(self, config_json):
        setup_logging(config_json)
        assert StructuredLogger.get_session_id() == "test-session-001"

    def test_session_id_auto_uuid_when_empty(self, config_json):
        config_json.system.session_id = ""
        setup_logging(config_json)
        session_id = StructuredLogger.get_session_id()
        assert len(session_id) == 36
        assert session_id.count("-") == 4

    def test_log_level_applied(self, config_json):
        config_json.system.log_level = "WARNING"
        setup_logging(config_json)
        assert logging.getLogger().level == logging.WARNING

    def test_repeated_setup_replaces_handlers(self, config_file_logging):
        setup_logging(config_file_logging)
        handler_count = len(logging.getLogger().handlers)
        setup_logging(config_file_logging)
        assert len(logging.getLogger().handlers) == handler_count


# =========================================================================
# 로그 파일 순환 설정 테스트
# =========================================================================

class TestRotatingFile:
    def test_file_handler_limits(self, config_file_logging):
        setup_logging(config_file_logging)
        rotating = _rotating_handler()
        assert rotating is not None
        assert rotating.maxBytes == LOG_MAX_BYTES == 10 * 1024 * 1024
        assert rotating.backupCount == LOG_BACKUP_COUNT == 5

    def test_log_file_written(self, config_file_logging, tmp_path):
        setup_logging(config_file_logging)
        logging.getLogger("substation.test").info("파일 기록 확인")
        _rotating_handler().flush()
        content = (tmp_path / "logs" / "app.log").read_text(encoding="utf-8")
        assert "파일 기록 확인" in content


# =========================================================================
# 포맷터 테스트
# =========================================================================

class TestJsonFormat:
    def test_common_fields(self):
        output = _capture(_JsonFormatter(session_id="abc"), "json.fields", logging.INFO, "메시지 확인")
        data = json.loads(output)
        assert data["session_id"] == "abc"
        assert data["level"] == "INFO"
        assert data["module"] == "json.fields"
        assert data["message"] == "메시지 확인"

    def test_extra_fields_included(self):
        output = _capture(_JsonFormatter(), "json.extra", logging.INFO, "파싱 완료", events=120)
        assert json.loads(output)["events"] == 120

    def test_non_ascii_not_escaped(self):
        """한글 메시지가 \\uXXXX 이스케이프 없이 그대로 기록되어야 함"""
        output = _capture(_JsonFormatter(), "json.korean", logging.INFO, "자막 파일 저장")
        assert "자막 파일 저장" in output
        assert "\\u" not in output


class TestTextFormat:
    def test_session_prefix(self):
        output = _capture(_TextFormatter(session_id="text-session-002"), "text.sid", logging.INFO, "텍스트 로그")
        assert "[text-ses]" in output
        assert "텍스트 로그" in output

    def test_without_session(self):
        output = _capture(_TextFormatter(), "text.nosid", logging.ERROR, "오류 메시지")
        assert "[no-sid]" in output
        assert "ERROR" in output


# =========================================================================
# StructuredLogger 팩토리 테스트
# =========================================================================

class TestStructuredLogger:
    def test_get_returns_named_logger(self):
        logger = StructuredLogger.get("substation.script.parser")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "substation.script.parser"

    def test_same_name_same_instance(self):
        assert StructuredLogger.get("shared.module") is StructuredLogger.get("shared.module")
