"""
타임코드 코덱 모듈입니다.

역할:
- "H:MM:SS.cc" 텍스트 <-> datetime.timedelta 양방향 변환
- 소수부는 초 단위 십진 소수로 해석 (".5" = 500ms, ".88" = 880ms, ".880" = 880ms)
- 직렬화 시 밀리초가 10의 배수이면 두 자리(centisecond), 아니면 세 자리로 출력

사용 예시:
    >>> parse_duration("0:01:02.50")
    datetime.timedelta(seconds=62, microseconds=500000)
    >>> format_duration(timedelta(seconds=62, milliseconds=500))
    '0:01:02.50'
"""

from __future__ import annotations

from datetime import timedelta

from substation.script.errors import IntParseError, ScriptParseError, TimecodeRangeError

MS_PER_HOUR = 3_600_000
MS_PER_MINUTE = 60_000
MS_PER_SECOND = 1_000

_ONE_MS = timedelta(milliseconds=1)


def _parse_component(text: str) -> int:
    """타임코드 구성요소 하나를 부호 없는 정수로 변환합니다."""
    # 부호, 공백, 비 ASCII 숫자는 허용하지 않음
    if not (text.isascii() and text.isdigit()):
        raise IntParseError(text)
    return int(text)


def parse_duration(src: str) -> timedelta:
    """
    타임코드 문자열을 timedelta로 변환합니다.

    파라미터:
        src: "H:MM:SS.cc" 형식의 문자열

    반환값:
        timedelta: 0부터의 경과 시간 (밀리초 해상도)

    에러:
        ScriptParseError: '.' 또는 ':' 분할 개수가 맞지 않을 때
        IntParseError: 숫자가 아닌 구성요소
        TimecodeRangeError: hour >= 24, minute/second >= 60, 소수부 3자리 초과
    """
    clock_and_fraction = src.split(".")
    if len(clock_and_fraction) != 2:
        raise ScriptParseError("Duration", f"잘못된 타임코드 형식입니다: '{src}'")
    clock, fraction = clock_and_fraction

    parts = clock.split(":")
    if len(parts) != 3:
        raise ScriptParseError("Duration", f"잘못된 타임코드 형식입니다: '{src}'")

    hours = _parse_component(parts[0])
    if hours >= 24:
        raise TimecodeRangeError("hour", src)
    minutes = _parse_component(parts[1])
    if minutes >= 60:
        raise TimecodeRangeError("minute", src)
    seconds = _parse_component(parts[2])
    if seconds >= 60:
        raise TimecodeRangeError("second", src)

    # 소수부는 초의 십진 소수: 3자리까지 밀리초로 정규화
    fraction_value = _parse_component(fraction)
    if len(fraction) > 3:
        raise TimecodeRangeError("fraction", src)
    millis = fraction_value * 10 ** (3 - len(fraction))

    total_ms = (
        hours * MS_PER_HOUR
        + minutes * MS_PER_MINUTE
        + seconds * MS_PER_SECOND
        + millis
    )
    return timedelta(milliseconds=total_ms)


def format_duration(duration: timedelta) -> str:
    """
    timedelta를 "H:MM:SS.cc" 문자열로 변환합니다.

    음수 시간은 0으로 출력합니다.
    """
    total_ms = max(0, duration // _ONE_MS)
    hours = total_ms // MS_PER_HOUR
    minutes = (total_ms % MS_PER_HOUR) // MS_PER_MINUTE
    seconds = (total_ms % MS_PER_MINUTE) // MS_PER_SECOND
    millis = total_ms % MS_PER_SECOND

    if millis % 10 == 0:
        fraction = f"{millis // 10:02d}"
    else:
        fraction = f"{millis:03d}"
    return f"{hours}:{minutes:02d}:{seconds:02d}.{fraction}"
