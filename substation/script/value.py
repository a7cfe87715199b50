"""
범용 필드 값 모델 모듈입니다.

역할:
- 스크립트의 모든 필드 값을 담는 닫힌 tagged union(Value) 정의
- 변형 간 암묵적 변환 없음: 변형이 다르면 항상 다른 값
- 필드 텍스트 -> 정수/실수 Value 변환 헬퍼(parse_int, parse_float)

사용 예시:
    >>> Value.integer(10) == Value.integer(10)
    True
    >>> Value.integer(1) == Value.real(1.0)
    False
    >>> str(Value.real(100.0))
    '100'
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Optional

from substation.script.effect import Effect
from substation.script.errors import FloatParseError, IntParseError, InvalidTypeError
from substation.script.timecode import format_duration


@dataclass(frozen=True)
class Text:
    """이벤트 본문 텍스트 래퍼입니다. 일반 문자열(Str)과 구분되는 변형입니다."""
    raw: str

    def __str__(self) -> str:
        return self.raw


class ValueKind(str, Enum):
    """Value 변형 구분자입니다."""
    STR = "str"
    INT = "int"
    FLOAT = "float"
    BOOLEAN = "boolean"
    LIST = "list"
    DURATION = "duration"
    EFFECT = "effect"
    TEXT = "text"


@dataclass(eq=False)
class Value:
    """
    필드 값 컨테이너입니다.

    필드:
        kind: 변형 구분자
        data: 변형별 실제 값 (str, int, float, bool, list[Value], timedelta, Effect, Text)

    LIST 변형의 data는 변경 가능한 리스트이므로 as_list()로 받은 리스트를
    직접 수정하면 저장된 값이 바뀝니다.
    """
    kind: ValueKind
    data: Any

    # -------------------------------------------------------------------------
    # 생성자
    # -------------------------------------------------------------------------

    @classmethod
    def string(cls, text: str) -> Value:
        return cls(ValueKind.STR, text)

    @classmethod
    def integer(cls, number: int) -> Value:
        return cls(ValueKind.INT, number)

    @classmethod
    def real(cls, number: float) -> Value:
        return cls(ValueKind.FLOAT, number)

    @classmethod
    def boolean(cls, flag: bool) -> Value:
        return cls(ValueKind.BOOLEAN, flag)

    @classmethod
    def list_of(cls, items: list[Value]) -> Value:
        return cls(ValueKind.LIST, items)

    @classmethod
    def duration(cls, elapsed: timedelta) -> Value:
        return cls(ValueKind.DURATION, elapsed)

    @classmethod
    def effect(cls, effect: Effect) -> Value:
        return cls(ValueKind.EFFECT, effect)

    @classmethod
    def text(cls, text: Text) -> Value:
        return cls(ValueKind.TEXT, text)

    @classmethod
    def coerce(cls, obj: Any) -> Value:
        """
        일반 파이썬 객체를 대응하는 Value 변형으로 감쌉니다.

        bool은 int보다 먼저 검사합니다. Value는 그대로 반환합니다.

        에러:
            InvalidTypeError: 대응하는 변형이 없는 타입
        """
        if isinstance(obj, Value):
            return obj
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, int):
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.real(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, Text):
            return cls.text(obj)
        if isinstance(obj, timedelta):
            return cls.duration(obj)
        if isinstance(obj, Effect):
            return cls.effect(obj)
        if isinstance(obj, list):
            return cls.list_of([cls.coerce(item) for item in obj])
        raise InvalidTypeError(
            "str | int | float | bool | list | timedelta | Effect | Text | Value"
        )

    # -------------------------------------------------------------------------
    # 타입별 접근자 (변형이 다르면 None)
    # -------------------------------------------------------------------------

    def _payload(self, kind: ValueKind) -> Any:
        return self.data if self.kind is kind else None

    def as_str(self) -> Optional[str]:
        return self._payload(ValueKind.STR)

    def as_int(self) -> Optional[int]:
        return self._payload(ValueKind.INT)

    def as_float(self) -> Optional[float]:
        return self._payload(ValueKind.FLOAT)

    def as_bool(self) -> Optional[bool]:
        return self._payload(ValueKind.BOOLEAN)

    def as_list(self) -> Optional[list[Value]]:
        return self._payload(ValueKind.LIST)

    def as_duration(self) -> Optional[timedelta]:
        return self._payload(ValueKind.DURATION)

    def as_effect(self) -> Optional[Effect]:
        return self._payload(ValueKind.EFFECT)

    def as_text(self) -> Optional[Text]:
        return self._payload(ValueKind.TEXT)

    # -------------------------------------------------------------------------
    # 비교 및 출력
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.kind is other.kind and self.data == other.data

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        if self.kind is ValueKind.FLOAT:
            return _format_float(self.data)
        if self.kind is ValueKind.BOOLEAN:
            return "true" if self.data else "false"
        if self.kind is ValueKind.LIST:
            return "[" + ", ".join(str(item) for item in self.data) + "]"
        if self.kind is ValueKind.DURATION:
            return format_duration(self.data)
        return str(self.data)


# =============================================================================
# 헬퍼 함수
# =============================================================================

def _format_float(number: float) -> str:
    """정수값 실수는 소수부 없이 출력합니다 (100.0 -> "100")."""
    if math.isfinite(number) and number.is_integer():
        return str(int(number))
    return repr(number)


def parse_int(src: str) -> Value:
    """
    필드 텍스트를 INT Value로 변환합니다.

    에러:
        IntParseError: 정수 형식이 아닐 때 (원인 ValueError 연결)
    """
    if "_" in src:
        raise IntParseError(src)
    try:
        return Value.integer(int(src))
    except ValueError as exc:
        raise IntParseError(src) from exc


def parse_float(src: str) -> Value:
    """
    필드 텍스트를 FLOAT Value로 변환합니다.

    에러:
        FloatParseError: 실수 형식이 아닐 때 (원인 ValueError 연결)
    """
    if "_" in src:
        raise FloatParseError(src)
    try:
        return Value.real(float(src))
    except ValueError as exc:
        raise FloatParseError(src) from exc
