"""
구조화 로깅 패키지

StructuredLogger를 외부에서 임포트하기 위한 패키지 초기화입니다.
"""

from substation.logging.structured_logger import StructuredLogger, setup_logging

__all__ = ["StructuredLogger", "setup_logging"]
