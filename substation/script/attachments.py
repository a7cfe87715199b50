"""
Fonts / Graphics 섹션 모듈입니다.

두 섹션 모두 "접두어:이름" 줄에서 이름만 모은 평면 문자열 목록입니다.
내장 바이너리(uuencode) 데이터 줄은 보존하지 않습니다.
"""

from __future__ import annotations


class _NameList(list):
    """접두어 한 개를 떼어 이름만 모으는 목록입니다."""

    prefix = ""
    header = ""

    def parse_line(self, line: str) -> None:
        """접두어(대소문자 무관)로 시작하는 줄의 이름을 추가합니다. 그 외 줄은 무시합니다."""
        if line[:len(self.prefix)].lower() == self.prefix:
            self.append(line[len(self.prefix):].strip())

    def serialize(self, line_ending: str = "\n") -> str:
        return "".join(f"{self.prefix} {name}{line_ending}" for name in self)


class Fonts(_NameList):
    """[Fonts] 섹션의 폰트 이름 목록입니다."""

    prefix = "fontname:"
    header = "[Fonts]"


class Graphics(_NameList):
    """[Graphics] 섹션의 파일 이름 목록입니다."""

    prefix = "filename:"
    header = "[Graphics]"
