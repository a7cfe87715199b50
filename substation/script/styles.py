"""
V4 / V4+ Styles 섹션 모듈입니다.

역할:
- StyleFormat: 스타일 컬럼 태그, 별칭(Colour/Color), 기본값, 파싱 규칙
- Style: 컬럼 순서로 고정된 스타일 레코드
- V4Styles: 컬럼 순서 + 스타일 목록 (Name 컬럼 필수, 이름으로 조회)

사용 예시:
    >>> styles = V4Styles()
    >>> style = styles.new_style()
    >>> style.set(StyleFormat.Name, "Default")
    >>> styles.add(style)
    >>> styles.get("Default") is style
    True
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional, Sequence

from substation.script.errors import InvalidTypeError, MissingStyleNameColumnError
from substation.script.record import ColumnTag, Record
from substation.script.value import Value, parse_float, parse_int

logger = logging.getLogger(__name__)


class StyleFormat(ColumnTag):
    """스타일 컬럼 태그입니다. 값은 정식 표시 이름입니다."""
    Name = "Name"
    Fontname = "Fontname"
    Fontsize = "Fontsize"
    PrimaryColour = "PrimaryColour"
    SecondaryColour = "SecondaryColour"
    TertiaryColour = "TertiaryColour"
    OutlineColour = "OutlineColour"
    BackColour = "BackColour"
    Bold = "Bold"
    Italic = "Italic"
    Underline = "Underline"
    StrikeOut = "StrikeOut"
    ScaleX = "ScaleX"
    ScaleY = "ScaleY"
    Spacing = "Spacing"
    Angle = "Angle"
    BorderStyle = "BorderStyle"
    Outline = "Outline"
    Shadow = "Shadow"
    Alignment = "Alignment"
    MarginL = "MarginL"
    MarginR = "MarginR"
    MarginV = "MarginV"
    AlphaLevel = "AlphaLevel"
    Encoding = "Encoding"

    @classmethod
    def aliases(cls) -> dict[str, ColumnTag]:
        return _STYLE_ALIASES

    def parse_value(self, src: str) -> Value:
        """태그별 규칙으로 필드 텍스트를 Value로 변환합니다."""
        if self in _STRING_TAGS:
            return Value.string(src)
        if self in _FLOAT_TAGS:
            return parse_float(src)
        return parse_int(src)

    def default_value(self) -> Value:
        """슬롯이 비어 있을 때 직렬화에 사용할 값입니다."""
        return Value.coerce(_STYLE_DEFAULTS[self])


_STYLE_ALIASES: dict[str, ColumnTag] = {
    "PrimaryColor": StyleFormat.PrimaryColour,
    "SecondaryColor": StyleFormat.SecondaryColour,
    "TertiaryColor": StyleFormat.TertiaryColour,
    "OutlineColor": StyleFormat.OutlineColour,
    "BackColor": StyleFormat.BackColour,
}

_COLOUR_TAGS = frozenset({
    StyleFormat.PrimaryColour,
    StyleFormat.SecondaryColour,
    StyleFormat.TertiaryColour,
    StyleFormat.OutlineColour,
    StyleFormat.BackColour,
})

_STRING_TAGS = frozenset({StyleFormat.Name, StyleFormat.Fontname}) | _COLOUR_TAGS

_FLOAT_TAGS = frozenset({
    StyleFormat.Fontsize,
    StyleFormat.ScaleX,
    StyleFormat.ScaleY,
    StyleFormat.Spacing,
    StyleFormat.Angle,
    StyleFormat.Outline,
    StyleFormat.Shadow,
    StyleFormat.AlphaLevel,
})

# 불투명 검정 (&HAABBGGRR)
OPAQUE_BLACK = "&H00000000"

_STYLE_DEFAULTS = {
    StyleFormat.Name: "Default",
    StyleFormat.Fontname: "Arial",
    StyleFormat.Fontsize: 20.0,
    StyleFormat.PrimaryColour: OPAQUE_BLACK,
    StyleFormat.SecondaryColour: OPAQUE_BLACK,
    StyleFormat.TertiaryColour: OPAQUE_BLACK,
    StyleFormat.OutlineColour: OPAQUE_BLACK,
    StyleFormat.BackColour: OPAQUE_BLACK,
    StyleFormat.Bold: 0,
    StyleFormat.Italic: 0,
    StyleFormat.Underline: 0,
    StyleFormat.StrikeOut: 0,
    StyleFormat.ScaleX: 100.0,
    StyleFormat.ScaleY: 100.0,
    StyleFormat.Spacing: 0.0,
    StyleFormat.Angle: 0.0,
    StyleFormat.BorderStyle: 1,
    StyleFormat.Outline: 0.0,
    StyleFormat.Shadow: 0.0,
    StyleFormat.Alignment: 2,
    StyleFormat.MarginL: 10,
    StyleFormat.MarginR: 10,
    StyleFormat.MarginV: 10,
    StyleFormat.AlphaLevel: 0.0,
    StyleFormat.Encoding: 1,
}

# V4+ (ASS) 표준 컬럼 순서
V4_PLUS_STYLE_ORDER: tuple[StyleFormat, ...] = (
    StyleFormat.Name,
    StyleFormat.Fontname,
    StyleFormat.Fontsize,
    StyleFormat.PrimaryColour,
    StyleFormat.SecondaryColour,
    StyleFormat.OutlineColour,
    StyleFormat.BackColour,
    StyleFormat.Bold,
    StyleFormat.Italic,
    StyleFormat.Underline,
    StyleFormat.StrikeOut,
    StyleFormat.ScaleX,
    StyleFormat.ScaleY,
    StyleFormat.Spacing,
    StyleFormat.Angle,
    StyleFormat.BorderStyle,
    StyleFormat.Outline,
    StyleFormat.Shadow,
    StyleFormat.Alignment,
    StyleFormat.MarginL,
    StyleFormat.MarginR,
    StyleFormat.MarginV,
    StyleFormat.Encoding,
)

# V4 (SSA) 표준 컬럼 순서
V4_STYLE_ORDER: tuple[StyleFormat, ...] = (
    StyleFormat.Name,
    StyleFormat.Fontname,
    StyleFormat.Fontsize,
    StyleFormat.PrimaryColour,
    StyleFormat.SecondaryColour,
    StyleFormat.TertiaryColour,
    StyleFormat.BackColour,
    StyleFormat.Bold,
    StyleFormat.Italic,
    StyleFormat.BorderStyle,
    StyleFormat.Outline,
    StyleFormat.Shadow,
    StyleFormat.Alignment,
    StyleFormat.MarginL,
    StyleFormat.MarginR,
    StyleFormat.MarginV,
    StyleFormat.AlphaLevel,
    StyleFormat.Encoding,
)


class Style(Record):
    """스타일 레코드입니다. 슬롯은 소속 V4Styles의 현재 컬럼 순서로 만들어집니다."""

    def __init__(self, styles: V4Styles) -> None:
        super().__init__(styles.order())

    @property
    def name(self) -> Optional[str]:
        value = self.get(StyleFormat.Name)
        return value.as_str() if value is not None else None


class V4Styles:
    """
    Styles 섹션 컨테이너입니다.

    역할:
    - 선언된 컬럼 순서 보관 (Name 필수)
    - (이름, 스타일) 목록 보관. 중복 이름은 거부하지 않고 뒤에 추가되며
      조회는 첫 번째 일치 항목을 반환
    """

    def __init__(self, order: Optional[Sequence[StyleFormat]] = None) -> None:
        """
        파라미터:
            order: 컬럼 순서. None이면 V4+ 표준 순서

        에러:
            MissingStyleNameColumnError: 순서에 Name 태그가 없을 때
        """
        order = list(order) if order is not None else list(V4_PLUS_STYLE_ORDER)
        if StyleFormat.Name not in order:
            raise MissingStyleNameColumnError()
        self._order: list[StyleFormat] = order
        self._styles: list[tuple[str, Style]] = []

    def order(self) -> list[StyleFormat]:
        return self._order

    def new_style(self) -> Style:
        return Style(self)

    def add(self, style: Style) -> None:
        """
        스타일을 추가합니다.

        에러:
            MissingStyleNameColumnError: Name 슬롯이 비어 있을 때
            InvalidTypeError: Name 값이 문자열이 아닐 때
        """
        value = style.get(StyleFormat.Name)
        if value is None:
            raise MissingStyleNameColumnError()
        name = value.as_str()
        if name is None:
            raise InvalidTypeError("str")
        self._styles.append((name, style))
        logger.debug(f"스타일 추가: {name}")

    def get(self, name: str) -> Optional[Style]:
        for style_name, style in self._styles:
            if style_name == name:
                return style
        return None

    def get_mut(self, name: str) -> Optional[Style]:
        """저장된 Style 객체 자체를 반환합니다 (제자리 수정용)."""
        return self.get(name)

    def remove(self, name: str) -> None:
        """이름이 일치하는 모든 스타일을 제거합니다."""
        self._styles = [(n, s) for n, s in self._styles if n != name]

    def clear(self) -> None:
        self._styles.clear()

    def names(self) -> list[str]:
        return [name for name, _ in self._styles]

    def __iter__(self) -> Iterator[tuple[str, Style]]:
        return iter(list(self._styles))

    def __len__(self) -> int:
        return len(self._styles)

    def serialize(self, line_ending: str = "\n") -> str:
        """Format: 줄과 스타일 줄들을 출력합니다."""
        lines = ["Format: " + ", ".join(tag.display_name for tag in self._order)]
        lines.extend(f"Style: {style.serialize()}" for _, style in self._styles)
        return "".join(line + line_ending for line in lines)

    def __str__(self) -> str:
        return self.serialize()
