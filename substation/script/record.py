"""
스키마 기반 레코드 공통 모듈입니다.

역할:
- ColumnTag: 컬럼 태그 열거형의 공통 기반 (대소문자 무관 이름/별칭 해석)
- Record: 섹션의 Format: 헤더 순서로 고정된 (태그, 선택적 Value) 슬롯 목록
- parse_format_header: "Format: a, b, c" 줄을 태그 순서로 변환

레코드 규칙:
- 슬롯 구성(태그와 순서)은 생성 시점에 고정되며 값만 바뀝니다
- set/get/remove는 태그가 처음 일치하는 슬롯에 적용됩니다
- 직렬화 시 값이 없는 슬롯은 태그의 기본값으로 출력되어
  항상 헤더의 컬럼 수와 같은 필드 수를 가집니다
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Iterator, Optional, Sequence, TypeVar

from substation.script.errors import ScriptParseError
from substation.script.value import Value

TagT = TypeVar("TagT", bound="ColumnTag")


class ColumnTag(Enum):
    """
    컬럼 태그 열거형의 기반 클래스입니다.

    멤버 값(value)이 표시용 정식 이름입니다. 하위 클래스는 aliases(),
    parse_value(), default_value()를 구현합니다.
    """

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def aliases(cls) -> dict[str, ColumnTag]:
        """정식 이름 외에 입력으로 허용하는 철자 -> 태그 매핑입니다."""
        return {}

    @classmethod
    def accepted_names(cls) -> list[str]:
        """입력으로 허용되는 모든 철자 목록입니다."""
        return [member.value for member in cls] + list(cls.aliases())

    @classmethod
    def from_name(cls: type[TagT], name: str) -> TagT:
        """
        컬럼 이름을 태그로 해석합니다 (대소문자 무관, 별칭 포함).

        에러:
            ScriptParseError: 알 수 없는 이름. 허용되는 모든 철자를 메시지에 포함
        """
        lowered = name.strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        for alias, member in cls.aliases().items():
            if alias.lower() == lowered:
                return member  # type: ignore[return-value]
        raise ScriptParseError(
            cls.__name__,
            f"알 수 없는 컬럼 '{name}', 허용 값: {', '.join(cls.accepted_names())}",
        )

    def parse_value(self, src: str) -> Value:
        raise NotImplementedError

    def default_value(self) -> Value:
        raise NotImplementedError

    def format_value(self, value: Value) -> str:
        """값을 레코드 필드 텍스트로 출력합니다."""
        return str(value)


def parse_format_header(line: str, tag_type: type[TagT]) -> list[TagT]:
    """
    "Format: a, b, c" 줄을 태그 순서 목록으로 변환합니다.

    파라미터:
        line: Format 줄 원문
        tag_type: StyleFormat 또는 EventFormat

    에러:
        ScriptParseError: "Format" 접두어가 없거나 알 수 없는 컬럼 이름
    """
    prefix, separator, body = line.partition(":")
    if not separator or prefix.strip().lower() != "format":
        raise ScriptParseError(tag_type.__name__, f"Format: 줄이 아닙니다: '{line}'")
    return [tag_type.from_name(token) for token in body.split(",")]


class Record:
    """
    (태그, 선택적 Value) 슬롯 목록입니다.

    Style / Event의 공통 구현이며 순서와 멤버십은 생성 시 고정됩니다.
    """

    def __init__(self, order: Sequence[ColumnTag]) -> None:
        self._slots: list[list[Any]] = [[tag, None] for tag in order]

    def _slot(self, tag: ColumnTag) -> Optional[list[Any]]:
        for slot in self._slots:
            if slot[0] is tag:
                return slot
        return None

    def set(self, tag: ColumnTag, value: Any) -> None:
        """태그가 처음 일치하는 슬롯에 값을 저장합니다. 순서에 없는 태그는 무시합니다."""
        slot = self._slot(tag)
        if slot is not None:
            slot[1] = Value.coerce(value)

    def get(self, tag: ColumnTag) -> Optional[Value]:
        """슬롯 값을 반환합니다. 값이 없거나 순서에 없는 태그면 None."""
        slot = self._slot(tag)
        return slot[1] if slot is not None else None

    def get_mut(self, tag: ColumnTag) -> Optional[Value]:
        """저장된 Value 객체 자체를 반환합니다. LIST 값 등을 제자리에서 수정할 때 사용합니다."""
        return self.get(tag)

    def remove(self, tag: ColumnTag) -> None:
        """슬롯을 미설정 상태로 되돌립니다."""
        slot = self._slot(tag)
        if slot is not None:
            slot[1] = None

    def order(self) -> list[ColumnTag]:
        return [slot[0] for slot in self._slots]

    def fill(self, fields: Iterable[str]) -> None:
        """필드 텍스트를 선언 순서대로 파싱해 저장합니다. 부족한 필드는 미설정으로 남습니다."""
        for field, slot in zip(fields, self._slots):
            slot[1] = slot[0].parse_value(field)

    def serialize(self) -> str:
        """모든 슬롯을 선언 순서로 출력합니다. 미설정 슬롯은 태그 기본값을 사용합니다."""
        fields = []
        for tag, value in self._slots:
            fields.append(tag.format_value(value if value is not None else tag.default_value()))
        return ",".join(fields)

    def __iter__(self) -> Iterator[tuple[ColumnTag, Optional[Value]]]:
        for tag, value in self._slots:
            yield tag, value

    def __len__(self) -> int:
        return len(self._slots)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record) or type(self) is not type(other):
            return NotImplemented
        return self._slots == other._slots

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self.serialize()
