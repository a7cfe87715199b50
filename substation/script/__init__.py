"""
SSA/ASS 스크립트 핵심 패키지입니다.

사용 예시:
    >>> from substation.script import File
    >>> script = File.load("sample.ass")
    >>> for event in script.events:
    ...     print(event.get(EventFormat.Text))
"""

from substation.script.attachments import Fonts, Graphics
from substation.script.effect import Effect, EffectKind
from substation.script.errors import (
    FloatParseError,
    IntParseError,
    InvalidTextEncodingError,
    InvalidTypeError,
    MissingFormatHeaderError,
    MissingStyleNameColumnError,
    ScriptError,
    ScriptIOError,
    ScriptParseError,
    TimecodeRangeError,
    UnknownFormatVersionError,
)
from substation.script.events import Event, EventFormat, Events, EventType
from substation.script.file import File
from substation.script.script_info import Collisions, ScriptInfo, ScriptInfoKey, ScriptType
from substation.script.styles import Style, StyleFormat, V4Styles
from substation.script.timecode import format_duration, parse_duration
from substation.script.value import Text, Value, ValueKind

__all__ = [
    "Collisions",
    "Effect",
    "EffectKind",
    "Event",
    "EventFormat",
    "EventType",
    "Events",
    "File",
    "FloatParseError",
    "Fonts",
    "Graphics",
    "IntParseError",
    "InvalidTextEncodingError",
    "InvalidTypeError",
    "MissingFormatHeaderError",
    "MissingStyleNameColumnError",
    "ScriptError",
    "ScriptIOError",
    "ScriptInfo",
    "ScriptInfoKey",
    "ScriptParseError",
    "ScriptType",
    "Style",
    "StyleFormat",
    "Text",
    "TimecodeRangeError",
    "UnknownFormatVersionError",
    "V4Styles",
    "Value",
    "ValueKind",
    "format_duration",
    "parse_duration",
]
