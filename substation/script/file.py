"""
스크립트 문서(File) 모듈입니다.

역할:
- 버전, Script Info, Styles, Events, Fonts, Graphics를 하나의 문서로 묶음
- 바이트/문자열/파일 경로에서 파싱, 텍스트/파일로 직렬화
- 입력에 ScriptType이 없으면 결정된 버전으로 채움

사용 예시:
    >>> script = File.load("episode01.ass")
    >>> script.script_info.set_title("1화")
    >>> script.save("episode01.fixed.ass")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from substation.config.schema import ParserConfig, WriterConfig
from substation.script.attachments import Fonts, Graphics
from substation.script.errors import InvalidTextEncodingError, ScriptIOError
from substation.script.events import V4_EVENT_ORDER, V4_PLUS_EVENT_ORDER, Events
from substation.script.parser import SsaParser
from substation.script.script_info import ScriptInfo, ScriptInfoKey, ScriptType
from substation.script.styles import V4_PLUS_STYLE_ORDER, V4_STYLE_ORDER, V4Styles

logger = logging.getLogger(__name__)


class File:
    """
    SSA/ASS 스크립트 문서 전체입니다.

    속성:
        version: 문서 버전 (V4 또는 V4+). 스타일 섹션 헤더를 결정
        script_info / styles / events / fonts / graphics: 각 섹션 데이터
    """

    def __init__(
        self,
        version: ScriptType = ScriptType.V4_PLUS,
        script_info: Optional[ScriptInfo] = None,
        styles: Optional[V4Styles] = None,
        events: Optional[Events] = None,
        fonts: Optional[Fonts] = None,
        graphics: Optional[Graphics] = None,
    ) -> None:
        self.version = version
        self.script_info = script_info if script_info is not None else ScriptInfo()
        if styles is None:
            styles = V4Styles(V4_STYLE_ORDER if version is ScriptType.V4 else V4_PLUS_STYLE_ORDER)
        self.styles = styles
        if events is None:
            events = Events(V4_EVENT_ORDER if version is ScriptType.V4 else V4_PLUS_EVENT_ORDER)
        self.events = events
        self.fonts = fonts if fonts is not None else Fonts()
        self.graphics = graphics if graphics is not None else Graphics()

        if self.script_info.get_property(ScriptInfoKey.ScriptType) is None:
            self.script_info.set_script_type(version)

    @classmethod
    def new(cls, version: ScriptType = ScriptType.V4_PLUS) -> File:
        """버전에 맞는 기본 컬럼 순서를 가진 빈 문서를 만듭니다."""
        return cls(version)

    # =========================================================================
    # 파싱
    # =========================================================================

    @classmethod
    def parse(cls, data: bytes, config: Optional[ParserConfig] = None) -> File:
        """
        UTF-8 바이트열을 파싱합니다.

        에러:
            InvalidTextEncodingError: 엄격한 UTF-8 디코딩 실패
            ScriptError 하위 클래스: 파싱 실패
        """
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as decode_error:
            logger.error(f"UTF-8 디코딩 실패: {decode_error}")
            raise InvalidTextEncodingError() from decode_error
        return cls.from_str(text, config)

    @classmethod
    def from_str(cls, text: str, config: Optional[ParserConfig] = None) -> File:
        """이미 디코딩된 텍스트를 파싱합니다."""
        parser = SsaParser(config)
        parser.parse(text)

        version = parser.resolve_version()
        parser.backfill_script_type(version)
        script = cls(
            version=version,
            script_info=parser.script_info,
            styles=parser.styles if parser.has_styles_section else None,
            events=parser.events if parser.has_events_section else None,
            fonts=parser.fonts,
            graphics=parser.graphics,
        )
        logger.info(
            f"스크립트 파싱 완료: version={version.value}, "
            f"styles={len(script.styles)}, events={len(script.events)}"
        )
        return script

    @classmethod
    def load(cls, path: str | Path, config: Optional[ParserConfig] = None) -> File:
        """
        파일을 읽어 파싱합니다.

        에러:
            ScriptIOError: 파일 읽기 실패
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as file_error:
            logger.error(f"스크립트 파일 읽기 실패: {path} ({file_error})")
            raise ScriptIOError(f"스크립트 파일 읽기 실패: {path}") from file_error
        logger.debug(f"스크립트 파일 읽기: {path} ({len(data)} bytes)")
        return cls.parse(data, config)

    # =========================================================================
    # 직렬화
    # =========================================================================

    def serialize(self, config: Optional[WriterConfig] = None) -> str:
        """
        문서 전체를 텍스트로 출력합니다.

        섹션 순서: [Script Info], 버전별 스타일 섹션, [Events],
        비어있지 않은 [Fonts] / [Graphics]. 섹션 사이는 빈 줄 하나.
        """
        config = config or WriterConfig()
        line_ending = config.line_ending

        sections = [
            ("[Script Info]", self.script_info.serialize(line_ending)),
            (self.version.styles_header, self.styles.serialize(line_ending)),
            ("[Events]", self.events.serialize(line_ending)),
        ]
        if config.write_attachments:
            sections.extend(
                (attachment.header, attachment.serialize(line_ending))
                for attachment in (self.fonts, self.graphics)
                if attachment
            )

        text = line_ending.join(header + line_ending + body for header, body in sections)
        logger.debug(f"스크립트 직렬화 완료: {len(sections)}개 섹션, {len(text)}자")
        return text

    def save(self, path: str | Path, config: Optional[WriterConfig] = None) -> None:
        """
        UTF-8로 파일에 저장합니다.

        에러:
            ScriptIOError: 파일 쓰기 실패
        """
        path = Path(path)
        text = self.serialize(config)
        try:
            path.write_bytes(text.encode("utf-8"))
        except OSError as file_error:
            logger.error(f"스크립트 파일 저장 실패: {path} ({file_error})")
            raise ScriptIOError(f"스크립트 파일 저장 실패: {path}") from file_error
        logger.info(f"스크립트 저장 완료: {path}")

    def __str__(self) -> str:
        return self.serialize()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, File):
            return NotImplemented
        return (
            self.version is other.version
            and self.script_info == other.script_info
            and self._style_rows() == other._style_rows()
            and list(self.events) == list(other.events)
            and list(self.fonts) == list(other.fonts)
            and list(self.graphics) == list(other.graphics)
        )

    __hash__ = None  # type: ignore[assignment]

    def _style_rows(self) -> tuple[list, list]:
        return self.styles.order(), list(self.styles)
