"""
Script Info 섹션 모듈입니다.

역할:
- 삽입 순서를 유지하는 (키, Value) 속성 저장소
- 같은 키 재설정 시 원래 위치에서 값만 교체
- 주석 줄(; 또는 !)은 예약 키 ";" 아래 하나의 LIST 속성에 누적
- 알려진 키(Title, PlayResX 등)는 타입이 있는 getter/setter 제공
- 알 수 없는 키는 원문 문자열로 보존

사용 예시:
    >>> info = ScriptInfo()
    >>> info.set_title("제목")
    >>> info.add_comment("생성 도구 정보")
    >>> print(info)
    Title: 제목
    ; 생성 도구 정보
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterator, Mapping, Optional

from substation.script.errors import ScriptParseError, UnknownFormatVersionError
from substation.script.value import Value, parse_float, parse_int

logger = logging.getLogger(__name__)


class ScriptInfoKey(str, Enum):
    """알려진 Script Info 키입니다. 값은 파일에 쓰이는 정식 철자입니다."""
    Comment = ";"
    Title = "Title"
    OriginalScript = "Original Script"
    OriginalTranslation = "Original Translation"
    OriginalEditing = "Original Editing"
    OriginalTiming = "Original Timing"
    SynchPoint = "Synch Point"
    ScriptUpdatedBy = "Script Updated By"
    UpdateDetails = "Update Details"
    ScriptType = "ScriptType"
    Collisions = "Collisions"
    PlayResX = "PlayResX"
    PlayResY = "PlayResY"
    PlayDepth = "PlayDepth"
    Timer = "Timer"
    WrapStyle = "WrapStyle"
    ScaledBorderAndShadow = "ScaledBorderAndShadow"

    @classmethod
    def lookup(cls, name: str) -> Optional[ScriptInfoKey]:
        """키 이름을 대소문자 무관하게 찾습니다. 알 수 없는 키는 None."""
        lowered = name.strip().lower()
        for member in cls:
            if member is not cls.Comment and member.value.lower() == lowered:
                return member
        return None


_TEXT_KEYS = frozenset({
    ScriptInfoKey.Title,
    ScriptInfoKey.OriginalScript,
    ScriptInfoKey.OriginalTranslation,
    ScriptInfoKey.OriginalEditing,
    ScriptInfoKey.OriginalTiming,
    ScriptInfoKey.SynchPoint,
    ScriptInfoKey.ScriptUpdatedBy,
    ScriptInfoKey.UpdateDetails,
})

_INT_KEYS = frozenset({
    ScriptInfoKey.PlayResX,
    ScriptInfoKey.PlayResY,
    ScriptInfoKey.PlayDepth,
    ScriptInfoKey.WrapStyle,
})


class ScriptType(str, Enum):
    """
    스크립트 포맷 버전입니다.

    값은 ScriptType 속성 텍스트이며 styles_header는 해당 버전의 스타일 섹션 헤더입니다.
    """
    V4 = "v4.00"
    V4_PLUS = "v4.00+"

    @classmethod
    def parse(cls, src: str) -> ScriptType:
        """
        에러:
            UnknownFormatVersionError: v4.00 / v4.00+ 가 아닐 때
        """
        lowered = src.strip().lower()
        for member in cls:
            if member.value == lowered:
                return member
        raise UnknownFormatVersionError(src)

    @property
    def styles_header(self) -> str:
        return "[V4 Styles]" if self is ScriptType.V4 else "[V4+ Styles]"


class Collisions(str, Enum):
    """자막 충돌 처리 방식입니다."""
    Normal = "Normal"
    Reverse = "Reverse"

    @classmethod
    def parse(cls, src: str) -> Collisions:
        """
        에러:
            ScriptParseError: Normal / Reverse 가 아닐 때
        """
        lowered = src.strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        raise ScriptParseError("Collisions", f"알 수 없는 충돌 처리 방식입니다: '{src}'")


class ScriptInfo:
    """
    Script Info 속성 저장소입니다.

    속성 수가 수십 개 수준이므로 리스트 선형 탐색으로 관리합니다.
    """

    def __init__(self) -> None:
        self._properties: list[tuple[str, Value]] = []

    # -------------------------------------------------------------------------
    # 범용 속성 API
    # -------------------------------------------------------------------------

    def add_property(self, key: str, value: Any) -> None:
        """키가 이미 있으면 제자리에서 값을 교체하고, 없으면 끝에 추가합니다."""
        key = _key_text(key)
        value = Value.coerce(value)
        for index, (existing, _) in enumerate(self._properties):
            if existing == key:
                self._properties[index] = (key, value)
                return
        self._properties.append((key, value))

    def add_properties(self, properties: Mapping[str, Any]) -> None:
        for key, value in properties.items():
            self.add_property(key, value)

    def get_property(self, key: str) -> Optional[Value]:
        key = _key_text(key)
        for existing, value in self._properties:
            if existing == key:
                return value
        return None

    def get_property_mut(self, key: str) -> Optional[Value]:
        """저장된 Value 객체 자체를 반환합니다 (제자리 수정용)."""
        return self.get_property(key)

    def remove_property(self, key: str) -> None:
        key = _key_text(key)
        self._properties = [(k, v) for k, v in self._properties if k != key]

    def clear(self) -> None:
        self._properties.clear()

    def __iter__(self) -> Iterator[tuple[str, Value]]:
        return iter(list(self._properties))

    def __len__(self) -> int:
        return len(self._properties)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get_property(key) is not None

    # -------------------------------------------------------------------------
    # 주석
    # -------------------------------------------------------------------------

    def add_comment(self, comment: str) -> None:
        """주석을 예약 키 아래 LIST 속성 끝에 추가합니다."""
        comments = self.get_comments()
        if comments is None:
            self.add_property(ScriptInfoKey.Comment, Value.list_of([Value.string(comment)]))
        else:
            comments.append(Value.string(comment))

    def get_comments(self) -> Optional[list[Value]]:
        value = self.get_property(ScriptInfoKey.Comment)
        return value.as_list() if value is not None else None

    # -------------------------------------------------------------------------
    # 알려진 키 접근자
    # -------------------------------------------------------------------------

    def _get_str(self, key: ScriptInfoKey) -> Optional[str]:
        value = self.get_property(key)
        return value.as_str() if value is not None else None

    def _get_int(self, key: ScriptInfoKey) -> Optional[int]:
        value = self.get_property(key)
        return value.as_int() if value is not None else None

    def set_title(self, title: str) -> None:
        self.add_property(ScriptInfoKey.Title, Value.string(title))

    def get_title(self) -> Optional[str]:
        return self._get_str(ScriptInfoKey.Title)

    def set_original_script(self, original_script: str) -> None:
        self.add_property(ScriptInfoKey.OriginalScript, Value.string(original_script))

    def get_original_script(self) -> Optional[str]:
        return self._get_str(ScriptInfoKey.OriginalScript)

    def set_original_translation(self, original_translation: str) -> None:
        self.add_property(ScriptInfoKey.OriginalTranslation, Value.string(original_translation))

    def get_original_translation(self) -> Optional[str]:
        return self._get_str(ScriptInfoKey.OriginalTranslation)

    def set_original_editing(self, original_editing: str) -> None:
        self.add_property(ScriptInfoKey.OriginalEditing, Value.string(original_editing))

    def get_original_editing(self) -> Optional[str]:
        return self._get_str(ScriptInfoKey.OriginalEditing)

    def set_original_timing(self, original_timing: str) -> None:
        self.add_property(ScriptInfoKey.OriginalTiming, Value.string(original_timing))

    def get_original_timing(self) -> Optional[str]:
        return self._get_str(ScriptInfoKey.OriginalTiming)

    def set_synch_point(self, synch_point: str) -> None:
        self.add_property(ScriptInfoKey.SynchPoint, Value.string(synch_point))

    def get_synch_point(self) -> Optional[str]:
        return self._get_str(ScriptInfoKey.SynchPoint)

    def set_script_updated_by(self, script_updated_by: str) -> None:
        self.add_property(ScriptInfoKey.ScriptUpdatedBy, Value.string(script_updated_by))

    def get_script_updated_by(self) -> Optional[str]:
        return self._get_str(ScriptInfoKey.ScriptUpdatedBy)

    def set_update_details(self, update_details: str) -> None:
        self.add_property(ScriptInfoKey.UpdateDetails, Value.string(update_details))

    def get_update_details(self) -> Optional[str]:
        return self._get_str(ScriptInfoKey.UpdateDetails)

    def set_script_type(self, script_type: ScriptType) -> None:
        self.add_property(ScriptInfoKey.ScriptType, Value.string(script_type.value))

    def get_script_type(self) -> Optional[ScriptType]:
        """저장된 ScriptType을 반환합니다. 값이 없거나 해석할 수 없으면 None."""
        text = self._get_str(ScriptInfoKey.ScriptType)
        if text is None:
            return None
        try:
            return ScriptType.parse(text)
        except UnknownFormatVersionError:
            logger.debug(f"ScriptType 값을 해석할 수 없음: {text}")
            return None

    def set_collisions(self, collisions: Collisions) -> None:
        self.add_property(ScriptInfoKey.Collisions, Value.string(collisions.value))

    def get_collisions(self) -> Optional[Collisions]:
        text = self._get_str(ScriptInfoKey.Collisions)
        if text is None:
            return None
        try:
            return Collisions.parse(text)
        except ScriptParseError:
            logger.debug(f"Collisions 값을 해석할 수 없음: {text}")
            return None

    def set_play_res_x(self, play_res_x: int) -> None:
        self.add_property(ScriptInfoKey.PlayResX, Value.integer(play_res_x))

    def get_play_res_x(self) -> Optional[int]:
        return self._get_int(ScriptInfoKey.PlayResX)

    def set_play_res_y(self, play_res_y: int) -> None:
        self.add_property(ScriptInfoKey.PlayResY, Value.integer(play_res_y))

    def get_play_res_y(self) -> Optional[int]:
        return self._get_int(ScriptInfoKey.PlayResY)

    def set_play_depth(self, play_depth: int) -> None:
        self.add_property(ScriptInfoKey.PlayDepth, Value.integer(play_depth))

    def get_play_depth(self) -> Optional[int]:
        return self._get_int(ScriptInfoKey.PlayDepth)

    def set_timer(self, timer: float) -> None:
        self.add_property(ScriptInfoKey.Timer, Value.real(float(timer)))

    def get_timer(self) -> Optional[float]:
        value = self.get_property(ScriptInfoKey.Timer)
        return value.as_float() if value is not None else None

    def set_wrap_style(self, wrap_style: int) -> None:
        self.add_property(ScriptInfoKey.WrapStyle, Value.integer(wrap_style))

    def get_wrap_style(self) -> Optional[int]:
        return self._get_int(ScriptInfoKey.WrapStyle)

    def set_scaled_border_and_shadow(self, scaled_border_and_shadow: bool) -> None:
        self.add_property(ScriptInfoKey.ScaledBorderAndShadow, Value.boolean(scaled_border_and_shadow))

    def get_scaled_border_and_shadow(self) -> Optional[bool]:
        value = self.get_property(ScriptInfoKey.ScaledBorderAndShadow)
        return value.as_bool() if value is not None else None

    # -------------------------------------------------------------------------
    # 줄 단위 파싱 / 직렬화
    # -------------------------------------------------------------------------

    def parse_line(self, line: str) -> None:
        """
        Script Info 섹션의 한 줄을 해석해 저장합니다.

        - ";" 또는 "!"로 시작하는 줄은 주석
        - "키: 값" 줄은 알려진 키면 타입 규칙 적용, 아니면 문자열로 저장
        - 콜론이 없는 줄은 무시

        에러:
            UnknownFormatVersionError, ScriptParseError, IntParseError, FloatParseError
        """
        if line.startswith((";", "!")):
            self.add_comment(line[1:].strip())
            return

        key_text, separator, raw_value = line.partition(":")
        if not separator:
            logger.debug(f"콜론이 없는 Script Info 줄 무시: {line}")
            return
        raw_value = raw_value.strip()
        key = ScriptInfoKey.lookup(key_text)

        if key is None:
            self.add_property(key_text.strip(), Value.string(raw_value))
        elif key in _TEXT_KEYS:
            self.add_property(key, Value.string(raw_value))
        elif key is ScriptInfoKey.ScriptType:
            self.set_script_type(ScriptType.parse(raw_value))
        elif key is ScriptInfoKey.Collisions:
            self.set_collisions(Collisions.parse(raw_value))
        elif key in _INT_KEYS:
            self.add_property(key, parse_int(raw_value))
        elif key is ScriptInfoKey.Timer:
            self.add_property(key, parse_float(raw_value))
        elif key is ScriptInfoKey.ScaledBorderAndShadow:
            self.set_scaled_border_and_shadow(raw_value.lower() == "yes")

    def serialize(self, line_ending: str = "\n") -> str:
        """속성마다 "키: 값" 한 줄, 주석은 항목마다 "; 텍스트" 한 줄로 출력합니다."""
        lines = []
        for key, value in self._properties:
            if key == ScriptInfoKey.Comment.value:
                lines.extend(f"; {item}" for item in value.as_list() or [])
            elif key == ScriptInfoKey.ScaledBorderAndShadow.value and value.as_bool() is not None:
                lines.append(f"{key}: {'yes' if value.as_bool() else 'no'}")
            else:
                lines.append(f"{key}: {value}")
        return "".join(line + line_ending for line in lines)

    def __str__(self) -> str:
        return self.serialize()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScriptInfo):
            return NotImplemented
        return self._properties == other._properties

    __hash__ = None  # type: ignore[assignment]


def _key_text(key: str) -> str:
    """ScriptInfoKey 멤버는 정식 철자 문자열로 변환합니다."""
    if isinstance(key, ScriptInfoKey):
        return key.value
    return key
