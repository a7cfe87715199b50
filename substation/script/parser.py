"""
섹션 드라이버 모듈입니다.

역할:
- 디코딩된 전체 텍스트를 줄 단위로 한 번 순회하며 현재 섹션(Context) 유지
- [섹션] 헤더 인식, Styles/Events는 바로 다음 줄의 Format: 헤더로 컬럼 순서 확정
- 섹션별 하위 파서(Script Info / Style / Event / Fonts / Graphics)로 줄 전달
- 첫 번째 에러에서 전체 파싱 중단 (부분 복구 없음)

처리 흐름:
    텍스트 -> 줄 분할 -> [섹션] ? 컨텍스트 전환 : 현재 컨텍스트 하위 파서
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Iterator, Optional

from substation.config.schema import ParserConfig
from substation.script.attachments import Fonts, Graphics
from substation.script.errors import MissingFormatHeaderError
from substation.script.events import EventFormat, Events, EventType
from substation.script.record import parse_format_header
from substation.script.script_info import ScriptInfo, ScriptInfoKey, ScriptType
from substation.script.styles import StyleFormat, V4Styles

logger = logging.getLogger(__name__)

_BOM = "\ufeff"
# 줄 구분은 CR/LF만 사용 (splitlines()와 달리 U+2028, 폼피드 등은 줄 안에 유지)
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class Context(Enum):
    """현재 해석 중인 섹션입니다."""
    NONE = "none"
    SCRIPT_INFO = "script info"
    STYLES = "styles"
    EVENTS = "events"
    FONTS = "fonts"
    GRAPHICS = "graphics"


# 대괄호 안 섹션 이름(소문자) -> (컨텍스트, 스타일 헤더가 지정하는 버전)
_SECTIONS: dict[str, tuple[Context, Optional[ScriptType]]] = {
    "script info": (Context.SCRIPT_INFO, None),
    "v4 styles": (Context.STYLES, ScriptType.V4),
    "v4+ styles": (Context.STYLES, ScriptType.V4_PLUS),
    "events": (Context.EVENTS, None),
    "fonts": (Context.FONTS, None),
    "graphics": (Context.GRAPHICS, None),
}


class SsaParser:
    """
    줄 단위 상태 기계입니다.

    파싱이 끝나면 script_info / styles / events / fonts / graphics 속성에
    결과가 남고, resolve_version()으로 문서 버전을 결정합니다.
    """

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self._config = config or ParserConfig()
        self.context = Context.NONE
        # 스타일 섹션 헤더에서 확인한 버전 (없으면 None)
        self.version: Optional[ScriptType] = None
        # 섹션을 읽지 못했으면 File이 결정된 버전의 기본 컬럼 순서를 사용
        self.has_styles_section = False
        self.has_events_section = False
        self.script_info = ScriptInfo()
        self.styles = V4Styles()
        self.events = Events()
        self.fonts = Fonts()
        self.graphics = Graphics()

    def parse(self, text: str) -> None:
        """
        전체 텍스트를 해석합니다.

        에러:
            ScriptError 하위 클래스: 첫 번째로 실패한 줄의 에러를 그대로 전파
        """
        lines = iter(_LINE_BREAK.split(text.lstrip(_BOM)))
        for raw_line in lines:
            line = raw_line.strip()
            if not line:
                continue
            if line.startswith("[") and line.endswith("]") and self._enter_section(line, lines):
                continue
            self._dispatch(line)

    def resolve_version(self) -> ScriptType:
        """스타일 섹션 헤더 > 선언된 ScriptType > 설정 기본값 순으로 버전을 결정합니다."""
        if self.version is not None:
            return self.version
        declared = self.script_info.get_script_type()
        if declared is not None:
            return declared
        return ScriptType(self._config.default_version)

    # -------------------------------------------------------------------------
    # 섹션 전환
    # -------------------------------------------------------------------------

    def _enter_section(self, line: str, lines: Iterator[str]) -> bool:
        """
        [섹션] 줄을 처리합니다.

        반환값:
            bool: 섹션 줄을 소비했으면 True. preserve 정책에서 알 수 없는
                  섹션이면 False를 반환해 현재 컨텍스트로 그대로 전달
        """
        name = line[1:-1].strip().lower()
        section = _SECTIONS.get(name)
        if section is None:
            if self._config.unknown_sections == "preserve":
                logger.warning(f"알 수 없는 섹션, 현재 컨텍스트 유지: {line} (context={self.context.value})")
                return False
            logger.warning(f"알 수 없는 섹션, 본문 무시: {line}")
            self.context = Context.NONE
            return True

        context, version = section
        if context is Context.STYLES:
            self.version = version
            self.has_styles_section = True
            header = self._next_header(lines, line)
            self.styles = V4Styles(parse_format_header(header, StyleFormat))
        elif context is Context.EVENTS:
            self.has_events_section = True
            header = self._next_header(lines, line)
            self.events = Events(parse_format_header(header, EventFormat))

        self.context = context
        logger.debug(f"섹션 전환: {line} -> {context.value}")
        return True

    def _next_header(self, lines: Iterator[str], section_line: str) -> str:
        """섹션 헤더 다음의 비어있지 않은 줄을 Format 헤더로 읽습니다."""
        for raw_line in lines:
            header = raw_line.strip()
            if header:
                return header
        raise MissingFormatHeaderError(section_line)

    # -------------------------------------------------------------------------
    # 하위 파서
    # -------------------------------------------------------------------------

    def _dispatch(self, line: str) -> None:
        if self.context is Context.SCRIPT_INFO:
            self.script_info.parse_line(line)
        elif self.context is Context.STYLES:
            self.parse_style_line(line)
        elif self.context is Context.EVENTS:
            self.parse_event_line(line)
        elif self.context is Context.FONTS:
            self.fonts.parse_line(line)
        elif self.context is Context.GRAPHICS:
            self.graphics.parse_line(line)

    def parse_style_line(self, line: str) -> None:
        """
        "Style: v1,v2,..." 줄을 현재 컬럼 순서에 맞춰 스타일로 추가합니다.

        값이 컬럼보다 적으면 남은 슬롯은 미설정, 많으면 초과분은 무시합니다.
        """
        if line.startswith(";"):
            return
        prefix, separator, body = line.partition(":")
        if not separator or prefix.strip().lower() != "style":
            logger.debug(f"Style 줄이 아니므로 무시: {line}")
            return

        style = self.styles.new_style()
        style.fill(body.strip().split(","))
        self.styles.add(style)

    def parse_event_line(self, line: str) -> None:
        """
        "<EventType>: v1,v2,...,vN" 줄을 이벤트로 추가합니다.

        분할 횟수를 컬럼 수로 제한하므로 마지막 컬럼(보통 Text)이
        쉼표를 포함한 나머지 텍스트 전체를 받습니다.

        에러:
            ScriptParseError: 알 수 없는 이벤트 타입
        """
        if line.startswith(";"):
            return
        type_text, separator, body = line.partition(":")
        if not separator:
            logger.debug(f"콜론이 없는 이벤트 줄 무시: {line}")
            return
        if type_text.strip().lower() == "format":
            logger.warning(f"Events 섹션 안의 중복 Format 줄 무시: {line}")
            return

        event_type = EventType.from_name(type_text)
        column_count = len(self.events.order())
        event = self.events.new_event(event_type)
        if column_count:
            event.fill(body.strip().split(",", column_count - 1))
        self.events.push(event)

    # -------------------------------------------------------------------------
    # 결과
    # -------------------------------------------------------------------------

    def backfill_script_type(self, version: ScriptType) -> None:
        """Script Info에 ScriptType이 없으면 결정된 버전으로 채웁니다."""
        if self.script_info.get_property(ScriptInfoKey.ScriptType) is None:
            self.script_info.set_script_type(version)
