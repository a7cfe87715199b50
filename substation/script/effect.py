"""
이벤트 Effect 필드 문법 모듈입니다.

역할:
- Karaoke / Scroll up / Scroll down / Banner 지시문과 ';' 구분 텍스트 간 양방향 변환
- classify(): 절대 실패하지 않는 분류 함수. 인식하지 못한 텍스트는 Unknown(원문)으로 보존
- parse(): 인식된 키워드의 필드가 잘못되면 ScriptParseError를 발생시키는 엄격한 파서

Effect 텍스트 형식:
    Karaoke
    Scroll up;y1;y2;delay[;fadeawayheight]
    Scroll down;y1;y2;delay[;fadeawayheight]
    Banner;delay;lefttoright(1|0)[;fadeawayheight]
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from substation.script.errors import ScriptParseError

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


class EffectKind(str, Enum):
    """Effect 변형(variant) 구분자입니다."""
    NONE = "none"
    UNKNOWN = "unknown"
    KARAOKE = "karaoke"
    SCROLL_UP = "scroll up"
    SCROLL_DOWN = "scroll down"
    BANNER = "banner"


# 각 키워드가 요구하는 최소/최대 필드 수 (키워드 토큰 제외)
_FIELD_COUNTS = {
    EffectKind.SCROLL_UP: (3, 4),
    EffectKind.SCROLL_DOWN: (3, 4),
    EffectKind.BANNER: (2, 3),
}


@dataclass(frozen=True)
class Effect:
    """
    이벤트 Effect 값입니다.

    필드:
        kind: 변형 구분자
        raw: UNKNOWN일 때 원본 텍스트
        y1, y2: 스크롤 영역 세로 범위 (SCROLL_UP/SCROLL_DOWN)
        delay: 스크롤 속도 지연값 (SCROLL_*/BANNER)
        lefttoright: 배너 진행 방향 (BANNER)
        fadeawayheight: 선택적 페이드 높이 (SCROLL_*/BANNER)
    """
    kind: EffectKind
    raw: Optional[str] = None
    y1: Optional[int] = None
    y2: Optional[int] = None
    delay: Optional[int] = None
    lefttoright: Optional[bool] = None
    fadeawayheight: Optional[int] = None

    @classmethod
    def none(cls) -> Effect:
        return cls(EffectKind.NONE)

    @classmethod
    def unknown(cls, raw: str) -> Effect:
        return cls(EffectKind.UNKNOWN, raw=raw)

    @classmethod
    def karaoke(cls) -> Effect:
        return cls(EffectKind.KARAOKE)

    @classmethod
    def scroll_up(
        cls, y1: int, y2: int, delay: int, fadeawayheight: Optional[int] = None
    ) -> Effect:
        return cls(EffectKind.SCROLL_UP, y1=y1, y2=y2, delay=delay, fadeawayheight=fadeawayheight)

    @classmethod
    def scroll_down(
        cls, y1: int, y2: int, delay: int, fadeawayheight: Optional[int] = None
    ) -> Effect:
        return cls(EffectKind.SCROLL_DOWN, y1=y1, y2=y2, delay=delay, fadeawayheight=fadeawayheight)

    @classmethod
    def banner(
        cls, delay: int, lefttoright: bool, fadeawayheight: Optional[int] = None
    ) -> Effect:
        return cls(EffectKind.BANNER, delay=delay, lefttoright=lefttoright, fadeawayheight=fadeawayheight)

    @classmethod
    def classify(cls, raw: str) -> Effect:
        """
        Effect 텍스트를 분류합니다. 예외를 발생시키지 않습니다.

        - 빈 텍스트는 NONE
        - 인식된 키워드 + 올바른 필드는 해당 변형
        - 그 외(모르는 키워드, 필드 누락/초과/비숫자)는 UNKNOWN(raw)로 원문 보존
        """
        if not raw.strip():
            return cls.none()
        parts = raw.split(";")
        kind = _keyword_kind(parts[0])
        if kind is None:
            return cls.unknown(raw)
        if kind is EffectKind.KARAOKE:
            return cls.karaoke()

        effect = _build_directive(kind, parts[1:])
        return effect if effect is not None else cls.unknown(raw)

    @classmethod
    def parse(cls, raw: str) -> Effect:
        """
        Effect 텍스트를 엄격하게 파싱합니다.

        인식된 키워드(scroll up/scroll down/banner)의 필드가 부족하거나
        숫자가 아니면 ScriptParseError를 발생시킵니다. 모르는 키워드는
        classify()와 동일하게 UNKNOWN을 반환합니다.
        """
        effect = cls.classify(raw)
        if effect.kind is EffectKind.UNKNOWN:
            parts = raw.split(";")
            kind = _keyword_kind(parts[0])
            if kind is not None:
                minimum, maximum = _FIELD_COUNTS[kind]
                fields = parts[1:]
                if len(fields) < minimum:
                    raise ScriptParseError("Effect", f"{kind.value} 필드가 부족합니다: '{raw}'")
                if len(fields) > maximum:
                    raise ScriptParseError("Effect", f"{kind.value} 필드가 너무 많습니다: '{raw}'")
                raise ScriptParseError("Effect", f"{kind.value} 필드가 정수가 아닙니다: '{raw}'")
        return effect

    def __str__(self) -> str:
        if self.kind is EffectKind.NONE:
            return ""
        if self.kind is EffectKind.UNKNOWN:
            return self.raw or ""
        if self.kind is EffectKind.KARAOKE:
            return "Karaoke"

        if self.kind is EffectKind.BANNER:
            fields = ["Banner", str(self.delay), "1" if self.lefttoright else "0"]
        else:
            keyword = "Scroll up" if self.kind is EffectKind.SCROLL_UP else "Scroll down"
            fields = [keyword, str(self.y1), str(self.y2), str(self.delay)]
        if self.fadeawayheight is not None:
            fields.append(str(self.fadeawayheight))
        return ";".join(fields)


# =============================================================================
# 헬퍼 함수
# =============================================================================

def _keyword_kind(token: str) -> Optional[EffectKind]:
    """첫 토큰(대소문자 무관)을 EffectKind로 변환합니다. 모르는 키워드는 None."""
    lowered = token.strip().lower()
    for kind in (EffectKind.KARAOKE, EffectKind.SCROLL_UP, EffectKind.SCROLL_DOWN, EffectKind.BANNER):
        if lowered == kind.value:
            return kind
    return None


def _read_int(token: str) -> Optional[int]:
    token = token.strip()
    if not _INT_PATTERN.fullmatch(token):
        return None
    return int(token)


def _build_directive(kind: EffectKind, fields: list[str]) -> Optional[Effect]:
    """scroll/banner 필드를 정수로 읽어 Effect를 만듭니다. 형식이 맞지 않으면 None."""
    minimum, maximum = _FIELD_COUNTS[kind]
    if not minimum <= len(fields) <= maximum:
        return None
    numbers = [_read_int(field) for field in fields]
    if any(number is None for number in numbers):
        return None

    fadeawayheight = numbers[maximum - 1] if len(numbers) == maximum else None
    if kind is EffectKind.BANNER:
        return Effect.banner(numbers[0], numbers[1] == 1, fadeawayheight)
    if kind is EffectKind.SCROLL_UP:
        return Effect.scroll_up(numbers[0], numbers[1], numbers[2], fadeawayheight)
    return Effect.scroll_down(numbers[0], numbers[1], numbers[2], fadeawayheight)
