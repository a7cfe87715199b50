"""
substation 설정 스키마 모듈입니다.

config.yaml의 세 섹션을 Pydantic v2 모델로 정의합니다.

    system  - 로그 레벨/포맷/파일 저장, 세션 ID
    parser  - 알 수 없는 섹션 처리, 기본 스크립트 버전
    writer  - 줄바꿈 문자, Fonts/Graphics 출력 여부

누락된 섹션과 필드는 기본값으로 채워지고, 허용 목록이 있는 문자열 필드는
validator에서 대소문자를 정규화합니다.

사용 예시:
    >>> config = AppConfig(**{"parser": {"unknown_sections": "Preserve"}})
    >>> config.parser.unknown_sections
    'preserve'
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


def _one_of(field_name: str, value: str, allowed: tuple[str, ...]) -> str:
    """value가 allowed 중 하나인지 확인합니다. 아니면 ValueError."""
    if value not in allowed:
        raise ValueError(f"{field_name}은(는) {allowed} 중 하나여야 합니다. 입력값: {value!r}")
    return value


# =============================================================================
# system 섹션
# =============================================================================

class SystemConfig(BaseModel):
    """로깅과 세션 식별 설정입니다."""
    log_level: str = Field(default="INFO", description="DEBUG | INFO | WARNING | ERROR | CRITICAL")
    log_format: str = Field(default="text", description="json | text")
    # 기본은 콘솔(stderr)만, True이면 log_dir/app.log 순환 파일 추가
    log_to_file: bool = Field(default=False, description="로그 파일 저장 여부")
    log_dir: str = Field(default="output/logs", description="로그 파일 디렉토리")
    # 비어 있으면 setup_logging()에서 UUID 생성
    session_id: str = Field(default="", description="로그에 붙는 세션 ID")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return _one_of("log_level", value.upper(), ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"))

    @field_validator("log_format")
    @classmethod
    def normalize_log_format(cls, value: str) -> str:
        return _one_of("log_format", value.lower(), ("json", "text"))


# =============================================================================
# parser 섹션
# =============================================================================

class ParserConfig(BaseModel):
    """
    섹션 드라이버 동작 설정입니다.

    unknown_sections:
        suspend  - 알 수 없는 [섹션]의 본문을 버림 (기본)
        preserve - 알 수 없는 [섹션] 줄을 무시하고 직전 섹션으로 계속 해석
    default_version:
        스타일 섹션 헤더도 ScriptType도 없을 때 사용할 버전
    """
    unknown_sections: str = Field(default="suspend", description="suspend | preserve")
    default_version: str = Field(default="v4.00+", description="v4.00 | v4.00+")

    @field_validator("unknown_sections")
    @classmethod
    def normalize_unknown_sections(cls, value: str) -> str:
        return _one_of("unknown_sections", value.lower(), ("suspend", "preserve"))

    @field_validator("default_version")
    @classmethod
    def normalize_default_version(cls, value: str) -> str:
        return _one_of("default_version", value.lower(), ("v4.00", "v4.00+"))


# =============================================================================
# writer 섹션
# =============================================================================

class WriterConfig(BaseModel):
    """직렬화 출력 설정입니다."""
    line_ending: str = Field(default="\n", description="LF 또는 CRLF")
    # 비어 있지 않은 Fonts/Graphics 목록을 섹션으로 출력
    write_attachments: bool = Field(default=True, description="Fonts/Graphics 섹션 출력 여부")

    @field_validator("line_ending")
    @classmethod
    def normalize_line_ending(cls, value: str) -> str:
        """YAML/환경변수에서 온 이스케이프 표기("\\r\\n")도 실제 문자로 바꿉니다."""
        unescaped = value.replace("\\r", "\r").replace("\\n", "\n")
        return _one_of("line_ending", unescaped, ("\n", "\r\n"))


# =============================================================================
# 루트 모델
# =============================================================================

class AppConfig(BaseModel):
    """config.yaml 전체입니다. 섹션이 없으면 기본값 모델이 생성됩니다."""
    system: SystemConfig = Field(default_factory=SystemConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    writer: WriterConfig = Field(default_factory=WriterConfig)
