"""
File 문서 단위 테스트

검증 조건:
- 기본 문서 생성 (V4+ / V4 컬럼 순서, ScriptType 자동 설정)
- 바이트 파싱: 엄격한 UTF-8, BOM 제거, ScriptType 채우기
- 직렬화 -> 재파싱 시 동일 문서 (round trip)
- 섹션 구성, 줄바꿈 설정, Fonts/Graphics 출력 여부
- 파일 입출력 에러 래핑
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from substation.config.schema import WriterConfig
from substation.script.effect import Effect
from substation.script.errors import InvalidTextEncodingError, ScriptIOError, ScriptParseError
from substation.script.events import V4_EVENT_ORDER, EventFormat
from substation.script.file import File
from substation.script.script_info import ScriptType
from substation.script.styles import V4_PLUS_STYLE_ORDER, V4_STYLE_ORDER, StyleFormat
from substation.script.value import Value


# =============================================================================
# 테스트 데이터
# =============================================================================

SAMPLE_ASS = """
[Script Info]
; Script generated by Aegisub 9530-cibuilds-79a0655eb
; http://www.aegisub.org/
Title: [SweetSub] Oniichan ha Oshimai! - 05
ScriptType: v4.00+
WrapStyle: 0
ScaledBorderAndShadow: yes
YCbCr Matrix: TV.709
PlayResX: 1920
PlayResY: 1080

[V4+ Styles]
Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding
Style: Default,Source Han Sans SC Medium,90,&H00FFFFFF,&H00000000,&H00000000,&H00000000,0,0,0,0,100,100,0.1,0,1,3,0,2,30,30,25,1
Style: RUBY,Source Han Sans SC Medium,45,&H00FFFFFF,&H00000000,&H00000000,&H00000000,0,0,0,0,100,100,0.1,0,1,2.5,0,2,30,30,25,1

[Events]
Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
Comment: 0,0:00:00.00,0:00:00.00,Default,,0,0,0,,--- OP ---
Dialogue: 0,0:00:01.5,0:00:04.00,Default,,0,0,0,Scroll up;10;200;5,{\\fad(200,0)}Hello, World!
Dialogue: 1,0:00:05.00,0:00:07.25,RUBY,Actor,0,0,0,Fade;1,你好，世界！

[Fonts]
fontname: custom.ttf

[Graphics]
filename: logo.png
"""

SAMPLE_SSA = """[Script Info]
Title: legacy
[V4 Styles]
Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, TertiaryColour, BackColour, Bold, Italic, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, AlphaLevel, Encoding
Style: Default,Tahoma,24,16777215,65535,65535,-2147483640,-1,0,1,1,2,2,30,30,30,0,0
[Events]
Format: Marked, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
Dialogue: Marked=0,0:00:01.00,0:00:02.00,Default,,0000,0000,0000,Karaoke,Hi
"""


@pytest.fixture
def sample() -> File:
    return File.parse(SAMPLE_ASS.encode("utf-8"))


# =============================================================================
# 생성 테스트
# =============================================================================

class TestNew:
    def test_default_is_v4_plus(self):
        script = File()
        assert script.version is ScriptType.V4_PLUS
        assert script.styles.order() == list(V4_PLUS_STYLE_ORDER)
        assert script.script_info.get_script_type() is ScriptType.V4_PLUS

    def test_new_v4(self):
        script = File.new(ScriptType.V4)
        assert script.styles.order() == list(V4_STYLE_ORDER)
        assert script.events.order() == list(V4_EVENT_ORDER)
        assert "[V4 Styles]" in str(script)

    def test_empty_document_sections(self):
        script = File()
        script.script_info.set_title("T")
        sections = script.serialize().split("\n\n")
        assert [section.split("\n", 1)[0] for section in sections] == [
            "[Script Info]", "[V4+ Styles]", "[Events]",
        ]
        assert sections[0] == "[Script Info]\nScriptType: v4.00+\nTitle: T"


# =============================================================================
# 파싱 테스트
# =============================================================================

class TestParse:
    def test_sections_populated(self, sample):
        assert sample.version is ScriptType.V4_PLUS
        assert sample.script_info.get_play_res_x() == 1920
        assert sample.script_info.get_scaled_border_and_shadow() is True
        assert sample.styles.names() == ["Default", "RUBY"]
        assert len(sample.events) == 3
        assert list(sample.fonts) == ["custom.ttf"]
        assert list(sample.graphics) == ["logo.png"]

    def test_event_fields(self, sample):
        dialogue = sample.events.get(1)
        assert dialogue.get(EventFormat.Start) == Value.duration(timedelta(milliseconds=1500))
        assert dialogue.get(EventFormat.Effect) == Value.effect(Effect.scroll_up(10, 200, 5))
        assert dialogue.get(EventFormat.Text) == Value.string("{\\fad(200,0)}Hello, World!")

        unknown_effect = sample.events.get(2).get(EventFormat.Effect)
        assert unknown_effect == Value.effect(Effect.unknown("Fade;1"))

    def test_style_numbers(self, sample):
        style = sample.styles.get("RUBY")
        assert style.get(StyleFormat.Fontsize) == Value.real(45.0)
        assert style.get(StyleFormat.Outline) == Value.real(2.5)

    def test_invalid_utf8(self):
        with pytest.raises(InvalidTextEncodingError) as exc_info:
            File.parse(b"[Script Info]\nTitle: \xff\xfe\n")
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_bom_dropped(self):
        script = File.parse("[Script Info]\nTitle: x\n".encode("utf-8-sig"))
        assert script.script_info.get_title() == "x"

    def test_parse_error_propagates(self):
        with pytest.raises(ScriptParseError):
            File.from_str("[Events]\nFormat: Layer, Bogus\n")

    def test_script_type_backfilled(self):
        script = File.from_str("[Script Info]\nTitle: x\n")
        assert script.version is ScriptType.V4_PLUS
        assert script.script_info.get_script_type() is ScriptType.V4_PLUS

    def test_declared_script_type_kept(self):
        script = File.from_str("[Script Info]\nScriptType: v4.00+\n[V4 Styles]\nFormat: Name\n")
        assert script.version is ScriptType.V4
        assert script.script_info.get_script_type() is ScriptType.V4_PLUS

    def test_declared_v4_without_sections(self):
        """스타일/이벤트 섹션이 없으면 ScriptType 버전의 기본 컬럼 순서를 사용"""
        script = File.from_str("[Script Info]\nScriptType: v4.00\n")
        assert script.version is ScriptType.V4
        assert script.styles.order() == list(V4_STYLE_ORDER)
        assert StyleFormat.TertiaryColour in script.styles.order()
        assert script.events.order() == list(V4_EVENT_ORDER)

    def test_events_header_kept_without_styles(self):
        script = File.from_str("[Script Info]\nScriptType: v4.00\n[Events]\nFormat: Start, End, Text\n")
        assert script.styles.order() == list(V4_STYLE_ORDER)
        assert script.events.order() == [EventFormat.Start, EventFormat.End, EventFormat.Text]

    def test_v4_document(self):
        script = File.from_str(SAMPLE_SSA)
        assert script.version is ScriptType.V4
        assert script.styles.get("Default").get(StyleFormat.AlphaLevel) == Value.real(0.0)
        event = script.events.get(0)
        assert event.get(EventFormat.Marked) == Value.integer(0)
        assert event.get(EventFormat.Effect) == Value.effect(Effect.karaoke())


# =============================================================================
# 직렬화 / round trip 테스트
# =============================================================================

class TestSerialize:
    def test_round_trip(self, sample):
        assert File.from_str(sample.serialize()) == sample

    def test_serialize_is_stable(self, sample):
        text = sample.serialize()
        assert File.from_str(text).serialize() == text

    def test_v4_round_trip(self):
        script = File.from_str(SAMPLE_SSA)
        text = script.serialize()
        assert "[V4 Styles]" in text
        assert "Dialogue: Marked=0,0:00:01.00,0:00:02.00,Default,,0,0,0,Karaoke,Hi" in text
        assert File.from_str(text) == script

    def test_timecode_normalized(self, sample):
        assert "Dialogue: 0,0:00:01.50,0:00:04.00,Default,," in sample.serialize()

    def test_unknown_effect_preserved(self, sample):
        assert ",Fade;1,你好，世界！" in sample.serialize()

    def test_comments_and_booleans(self, sample):
        text = sample.serialize()
        assert "; Script generated by Aegisub 9530-cibuilds-79a0655eb\n" in text
        assert "ScaledBorderAndShadow: yes\n" in text
        assert "YCbCr Matrix: TV.709\n" in text

    def test_attachments_written(self, sample):
        text = sample.serialize()
        assert text.endswith("[Fonts]\nfontname: custom.ttf\n\n[Graphics]\nfilename: logo.png\n")

    def test_attachments_suppressed(self, sample):
        text = sample.serialize(WriterConfig(write_attachments=False))
        assert "[Fonts]" not in text
        assert "[Graphics]" not in text

    def test_crlf(self, sample):
        text = sample.serialize(WriterConfig(line_ending="\r\n"))
        assert "\r\n\r\n[Events]\r\n" in text
        assert "\n" not in text.replace("\r\n", "")

    def test_edit_then_serialize(self):
        script = File()
        style = script.styles.new_style()
        style.set(StyleFormat.Name, "Main")
        script.styles.add(style)
        event = script.events.new_event()
        event.set(EventFormat.Start, timedelta(seconds=1))
        event.set(EventFormat.End, timedelta(seconds=2, milliseconds=5))
        event.set(EventFormat.Text, "안녕")
        script.events.push(event)

        text = script.serialize()
        assert "Style: Main,Arial,20," in text
        assert "Dialogue: 0,0:00:01.00,0:00:02.005,Default,,0,0,0,,안녕\n" in text


# =============================================================================
# 파일 입출력 테스트
# =============================================================================

class TestFileIO:
    def test_save_and_load(self, sample, tmp_path):
        path = tmp_path / "episode.ass"
        sample.save(path)
        assert File.load(path) == sample

    def test_save_keeps_crlf(self, sample, tmp_path):
        path = tmp_path / "episode.ass"
        sample.save(path, WriterConfig(line_ending="\r\n"))
        assert b"\r\n" in path.read_bytes()

    def test_load_missing(self, tmp_path):
        with pytest.raises(ScriptIOError) as exc_info:
            File.load(tmp_path / "missing.ass")
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_save_into_missing_directory(self, sample, tmp_path):
        with pytest.raises(ScriptIOError):
            sample.save(tmp_path / "no" / "such" / "dir.ass")
