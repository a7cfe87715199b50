"""
Events 섹션 모듈입니다.

역할:
- EventFormat: 이벤트 컬럼 태그, 별칭, 기본값, 파싱 규칙
- EventType: Dialogue / Comment / Picture / Sound / Movie / Command
- Event: 이벤트 타입 + 컬럼 순서로 고정된 레코드
- Events: 컬럼 순서 + 이벤트 목록
"""

from __future__ import annotations

import logging
from datetime import timedelta
from enum import Enum
from typing import Iterator, Optional, Sequence

from substation.script.effect import Effect
from substation.script.errors import ScriptParseError
from substation.script.record import ColumnTag, Record
from substation.script.timecode import parse_duration
from substation.script.value import Value, parse_int

logger = logging.getLogger(__name__)

_MARKED_PREFIX = "marked="


class EventFormat(ColumnTag):
    """이벤트 컬럼 태그입니다. 값은 정식 표시 이름입니다."""
    Layer = "Layer"
    Marked = "Marked"
    Start = "Start"
    End = "End"
    Style = "Style"
    Name = "Name"
    MarginL = "MarginL"
    MarginR = "MarginR"
    MarginV = "MarginV"
    Effect = "Effect"
    Text = "Text"

    @classmethod
    def aliases(cls) -> dict[str, ColumnTag]:
        return _EVENT_ALIASES

    def parse_value(self, src: str) -> Value:
        """
        태그별 규칙으로 필드 텍스트를 Value로 변환합니다.

        - Start/End: 타임코드
        - Effect: 실패하지 않는 Effect 분류
        - Marked: "Marked=N" 또는 정수
        - Layer/Margin*: 정수
        - Style/Name/Text: 원문 문자열
        """
        if self in (EventFormat.Start, EventFormat.End):
            return Value.duration(parse_duration(src.strip()))
        if self is EventFormat.Effect:
            return Value.effect(Effect.classify(src))
        if self is EventFormat.Marked:
            return _parse_marked(src)
        if self in (EventFormat.Style, EventFormat.Name, EventFormat.Text):
            return Value.string(src)
        return parse_int(src)

    def default_value(self) -> Value:
        if self in (EventFormat.Start, EventFormat.End):
            return Value.duration(timedelta(0))
        if self is EventFormat.Effect:
            return Value.effect(Effect.none())
        if self is EventFormat.Style:
            return Value.string("Default")
        if self in (EventFormat.Name, EventFormat.Text):
            return Value.string("")
        # Layer, Marked, Margin*: 0은 스타일 여백을 그대로 사용한다는 의미
        return Value.integer(0)

    def format_value(self, value: Value) -> str:
        if self is EventFormat.Marked and value.as_int() is not None:
            return f"Marked={value.as_int()}"
        return str(value)


_EVENT_ALIASES: dict[str, ColumnTag] = {
    "Actor": EventFormat.Name,
}


def _parse_marked(src: str) -> Value:
    text = src.strip()
    if text.lower().startswith(_MARKED_PREFIX):
        text = text[len(_MARKED_PREFIX):]
    return parse_int(text)


# V4+ (ASS) 표준 컬럼 순서
V4_PLUS_EVENT_ORDER: tuple[EventFormat, ...] = (
    EventFormat.Layer,
    EventFormat.Start,
    EventFormat.End,
    EventFormat.Style,
    EventFormat.Name,
    EventFormat.MarginL,
    EventFormat.MarginR,
    EventFormat.MarginV,
    EventFormat.Effect,
    EventFormat.Text,
)

# V4 (SSA) 표준 컬럼 순서
V4_EVENT_ORDER: tuple[EventFormat, ...] = (
    EventFormat.Marked,
    EventFormat.Start,
    EventFormat.End,
    EventFormat.Style,
    EventFormat.Name,
    EventFormat.MarginL,
    EventFormat.MarginR,
    EventFormat.MarginV,
    EventFormat.Effect,
    EventFormat.Text,
)


class EventType(str, Enum):
    """이벤트 줄 종류입니다."""
    Dialogue = "Dialogue"
    Comment = "Comment"
    Picture = "Picture"
    Sound = "Sound"
    Movie = "Movie"
    Command = "Command"

    @classmethod
    def from_name(cls, name: str) -> EventType:
        """
        이벤트 타입 이름을 해석합니다 (대소문자 무관).

        에러:
            ScriptParseError: 알 수 없는 이벤트 타입
        """
        lowered = name.strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        raise ScriptParseError("EventType", f"알 수 없는 이벤트 타입입니다: '{name}'")


class Event(Record):
    """이벤트 레코드입니다. 슬롯은 소속 Events의 현재 컬럼 순서로 만들어집니다."""

    def __init__(self, event_type: EventType, events: Events) -> None:
        super().__init__(events.order())
        self.event_type = event_type

    def serialize(self) -> str:
        return f"{self.event_type.value}: {super().serialize()}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.event_type is other.event_type and super().__eq__(other)

    __hash__ = None  # type: ignore[assignment]


class Events:
    """Events 섹션 컨테이너입니다. 컬럼 순서와 이벤트 목록을 보관합니다."""

    def __init__(self, order: Optional[Sequence[EventFormat]] = None) -> None:
        """
        파라미터:
            order: 컬럼 순서. None이면 V4+ 표준 순서
        """
        self._order: list[EventFormat] = (
            list(order) if order is not None else list(V4_PLUS_EVENT_ORDER)
        )
        self._events: list[Event] = []

    def order(self) -> list[EventFormat]:
        return self._order

    def new_event(self, event_type: EventType = EventType.Dialogue) -> Event:
        return Event(event_type, self)

    def push(self, event: Event) -> None:
        self._events.append(event)

    def get(self, index: int) -> Optional[Event]:
        if 0 <= index < len(self._events):
            return self._events[index]
        return None

    def remove(self, index: int) -> None:
        """범위 밖 인덱스는 get()과 같이 아무것도 하지 않습니다."""
        if 0 <= index < len(self._events):
            del self._events[index]

    def clear(self) -> None:
        self._events.clear()

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def serialize(self, line_ending: str = "\n") -> str:
        """Format: 줄과 이벤트 줄들을 출력합니다."""
        lines = ["Format: " + ", ".join(tag.display_name for tag in self._order)]
        lines.extend(event.serialize() for event in self._events)
        return "".join(line + line_ending for line in lines)

    def __str__(self) -> str:
        return self.serialize()
