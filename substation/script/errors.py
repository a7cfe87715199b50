"""
스크립트 파싱/직렬화 에러 정의 모듈입니다.

역할:
- 모든 에러의 공통 기반 클래스 ScriptError 제공
- 섹션 드라이버는 첫 번째 에러에서 전체 파싱을 중단하고 그대로 전파
- Effect 분류(classify)는 예외를 발생시키지 않으므로 여기 에러를 사용하지 않음

사용 예시:
    >>> try:
    ...     File.parse(raw_bytes)
    ... except ScriptError as exc:
    ...     print(f"파싱 실패: {exc}")
"""

from __future__ import annotations


class ScriptError(Exception):
    """스크립트 처리 중 발생하는 에러의 기본 클래스입니다."""
    pass


class UnknownFormatVersionError(ScriptError):
    """ScriptType 값이 v4.00 / v4.00+ 가 아닐 때 발생하는 에러입니다."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(f"알 수 없는 스크립트 버전입니다: '{version}'")


class ScriptParseError(ScriptError):
    """
    구조화된 파싱 에러입니다.

    필드:
        context: 파싱 대상 구성요소 이름 (예: "Duration", "StyleFormat")
        message: 문제가 된 원본 텍스트를 포함한 설명
    """

    def __init__(self, context: str, message: str) -> None:
        self.context = context
        self.message = message
        super().__init__(f"{context} 파싱 실패: {message}")


class MissingFormatHeaderError(ScriptParseError):
    """Styles/Events 섹션 헤더 다음에 Format: 줄이 없을 때 발생합니다."""

    def __init__(self, section: str) -> None:
        super().__init__(section, "섹션 헤더 다음에 Format: 줄이 없습니다")


class TimecodeRangeError(ScriptParseError):
    """타임코드 구성요소(hour/minute/second/fraction)가 허용 범위를 벗어났을 때 발생합니다."""

    def __init__(self, component: str, src: str) -> None:
        self.component = component
        super().__init__("Duration", f"{component} 값이 범위를 벗어났습니다: '{src}'")


class IntParseError(ScriptError):
    """정수 변환 실패 에러입니다. 원인 ValueError는 __cause__로 연결됩니다."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"정수로 변환할 수 없습니다: '{text}'")


class FloatParseError(ScriptError):
    """실수 변환 실패 에러입니다. 원인 ValueError는 __cause__로 연결됩니다."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"실수로 변환할 수 없습니다: '{text}'")


class MissingStyleNameColumnError(ScriptError):
    """스타일 컬럼 순서에 Name이 없거나 스타일에 Name 값이 없을 때 발생합니다."""

    def __init__(self) -> None:
        super().__init__("스타일 Name 컬럼을 찾을 수 없습니다")


class InvalidTypeError(ScriptError):
    """값의 타입(variant)이 기대와 다를 때 발생하는 에러입니다."""

    def __init__(self, expected: str) -> None:
        self.expected = expected
        super().__init__(f"잘못된 타입입니다. 기대 타입: {expected}")


class InvalidTextEncodingError(ScriptError):
    """입력 바이트가 올바른 UTF-8이 아닐 때 발생하는 에러입니다."""

    def __init__(self) -> None:
        super().__init__("올바른 UTF-8 인코딩이 아닙니다")


class ScriptIOError(ScriptError):
    """파일 읽기/쓰기 실패 에러입니다. 원인 OSError는 __cause__로 연결됩니다."""
    pass
