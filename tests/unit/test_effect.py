"""
Effect 문법 단위 테스트

검증 조건:
- classify()는 절대 예외를 발생시키지 않고 모르는 텍스트를 원문 그대로 보존
- parse()는 인식된 키워드의 잘못된 필드에 ScriptParseError 발생
- 정식 텍스트 출력 형식
"""

from __future__ import annotations

import pytest

from substation.script.effect import Effect, EffectKind
from substation.script.errors import ScriptParseError


# =============================================================================
# classify 테스트
# =============================================================================

class TestClassify:
    def test_empty_is_none(self):
        assert Effect.classify("").kind is EffectKind.NONE
        assert Effect.classify("   ").kind is EffectKind.NONE

    def test_karaoke_case_insensitive(self):
        assert Effect.classify("Karaoke") == Effect.karaoke()
        assert Effect.classify("karaoke") == Effect.karaoke()

    def test_scroll_up(self):
        assert Effect.classify("Scroll up;10;200;5") == Effect.scroll_up(10, 200, 5)

    def test_scroll_down_with_fade(self):
        effect = Effect.classify("Scroll down;0;100;2;30")
        assert effect == Effect.scroll_down(0, 100, 2, fadeawayheight=30)

    def test_banner(self):
        effect = Effect.classify("Banner;3;1")
        assert effect.kind is EffectKind.BANNER
        assert effect.delay == 3
        assert effect.lefttoright is True
        assert effect.fadeawayheight is None

    def test_banner_right_to_left_with_fade(self):
        assert Effect.classify("Banner;3;0;20") == Effect.banner(3, False, 20)

    def test_unknown_keyword_preserved(self):
        effect = Effect.classify("Fade;1;2")
        assert effect.kind is EffectKind.UNKNOWN
        assert effect.raw == "Fade;1;2"

    @pytest.mark.parametrize("raw", [
        "Scroll up;10",
        "Scroll up;10;20;30;40;50",
        "Banner;fast;1",
    ])
    def test_malformed_known_keyword_is_unknown(self, raw):
        effect = Effect.classify(raw)
        assert effect.kind is EffectKind.UNKNOWN
        assert effect.raw == raw


# =============================================================================
# parse (엄격 모드) 테스트
# =============================================================================

class TestParse:
    def test_valid_directive(self):
        assert Effect.parse("Scroll up;1;2;3") == Effect.scroll_up(1, 2, 3)

    def test_too_few_fields(self):
        with pytest.raises(ScriptParseError) as exc_info:
            Effect.parse("Scroll up;10")
        assert exc_info.value.context == "Effect"
        assert "Scroll up;10" in str(exc_info.value)

    def test_too_many_fields(self):
        with pytest.raises(ScriptParseError):
            Effect.parse("Banner;1;1;1;1")

    def test_non_integer_field(self):
        with pytest.raises(ScriptParseError):
            Effect.parse("Banner;a;1")

    def test_unknown_keyword_not_an_error(self):
        assert Effect.parse("Fade") == Effect.unknown("Fade")


# =============================================================================
# 텍스트 출력 테스트
# =============================================================================

class TestFormat:
    def test_none_is_empty(self):
        assert str(Effect.none()) == ""

    def test_karaoke(self):
        assert str(Effect.karaoke()) == "Karaoke"

    def test_scroll_down(self):
        assert str(Effect.scroll_down(1, 2, 3)) == "Scroll down;1;2;3"

    def test_banner_with_fade(self):
        assert str(Effect.banner(5, False, 10)) == "Banner;5;0;10"

    def test_unknown_keeps_raw(self):
        assert str(Effect.unknown("whatever;x")) == "whatever;x"

    def test_classified_text_formats_back(self):
        for raw in ("Karaoke", "Scroll up;10;200;5", "Banner;3;1;20"):
            assert str(Effect.classify(raw)) == raw
