"""
substation 설정 로더 모듈입니다.

config.yaml(선택) -> SSA_ 환경변수 -> AppConfig 검증 순서로 설정을 만듭니다.
환경변수 이름은 SSA_<섹션>_<필드> 형식입니다. 문자열 필드는 원문 그대로,
그 외 필드(bool 등)는 값을 YAML 스칼라로 해석합니다.

    SSA_PARSER_UNKNOWN_SECTIONS=preserve  -> parser.unknown_sections = "preserve"
    SSA_WRITER_WRITE_ATTACHMENTS=false    -> writer.write_attachments = False

사용 예시:
    >>> manager = ConfigManager()
    >>> manager.load("config.yaml")
    >>> manager.get("writer.line_ending")
    '\\n'
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import ValidationError

from substation.config.schema import AppConfig

logger = logging.getLogger(__name__)

# 환경변수 오버라이드 접두사
ENV_PREFIX = "SSA_"

_MISSING = object()


class ConfigLoadError(Exception):
    """설정을 만들 수 없을 때 발생하는 에러의 기본 클래스입니다."""
    pass


class ConfigValidationError(ConfigLoadError):
    """AppConfig 스키마 검증에 실패했을 때 발생합니다."""
    pass


class ConfigFileNotFoundError(ConfigLoadError):
    """지정한 설정 파일이 없을 때 발생합니다."""
    pass


class ConfigManager:
    """
    설정 한 벌을 로드해 보관하는 매니저입니다.

    load() 또는 load_defaults()로 만든 AppConfig가 활성 설정이 되며,
    get()으로 "섹션.필드" 경로 조회를 제공합니다.
    """

    def __init__(self) -> None:
        self._config: Optional[AppConfig] = None
        self._source: Optional[Path] = None

    @property
    def config(self) -> Optional[AppConfig]:
        """활성 설정. 아직 로드하지 않았으면 None."""
        return self._config

    @property
    def source(self) -> Optional[Path]:
        """활성 설정을 읽어온 파일 경로. 기본값으로 만들었으면 None."""
        return self._source

    def load(self, filepath: str | Path) -> AppConfig:
        """
        YAML 파일을 읽어 환경변수 오버라이드를 적용하고 검증합니다.

        에러:
            ConfigFileNotFoundError: 파일이 없을 때
            ConfigLoadError: 읽기 실패, YAML 문법 오류, 최상위가 매핑이 아닐 때
            ConfigValidationError: 스키마 검증 실패
        """
        path = Path(filepath)
        if not path.is_file():
            message = f"설정 파일이 없습니다: {path}"
            logger.error(message)
            raise ConfigFileNotFoundError(message)

        raw_config = _read_yaml(path)
        config = self._activate(raw_config, source=path)
        logger.info(
            f"설정 로드: {path} "
            f"(log_level={config.system.log_level}, "
            f"unknown_sections={config.parser.unknown_sections})"
        )
        return config

    def load_defaults(self) -> AppConfig:
        """설정 파일 없이 기본값에 환경변수 오버라이드만 적용합니다."""
        config = self._activate({}, source=None)
        logger.debug("기본 설정 사용")
        return config

    def get(self, key: str, default: Any = None) -> Any:
        """
        "parser.unknown_sections" 같은 점 경로로 설정값을 조회합니다.

        경로 중간에 없는 이름이 있으면 default를 반환합니다.

        에러:
            RuntimeError: 로드 전에 호출했을 때
        """
        if self._config is None:
            raise RuntimeError("설정이 로드되지 않았습니다. load() 또는 load_defaults()를 먼저 호출하세요.")

        node: Any = self._config
        for name in key.split("."):
            if isinstance(node, Mapping):
                node = node.get(name, _MISSING)
            else:
                node = getattr(node, name, _MISSING)
            if node is _MISSING:
                logger.debug(f"설정 키 없음: {key}")
                return default
        return node

    def validate_schema(self, raw_config: dict) -> bool:
        """딕셔너리가 AppConfig로 검증되는지 여부만 반환합니다."""
        try:
            AppConfig(**raw_config)
        except ValidationError as validation_error:
            logger.warning(f"스키마 검증 실패: {validation_error.error_count()}건")
            return False
        return True

    def _activate(self, raw_config: dict, source: Optional[Path]) -> AppConfig:
        merged = _merge_env_overrides(raw_config, os.environ)
        try:
            config = AppConfig(**merged)
        except ValidationError as validation_error:
            for line in _describe_errors(validation_error):
                logger.error(f"설정 검증 실패 - {line}")
            raise ConfigValidationError(
                f"설정 스키마 검증 실패: {validation_error.error_count()}건"
            ) from validation_error

        self._config = config
        self._source = source
        return config


# =============================================================================
# 헬퍼 함수
# =============================================================================

def _read_yaml(path: Path) -> dict:
    """YAML 파일을 매핑으로 읽습니다. 빈 파일은 빈 딕셔너리입니다."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as file_error:
        logger.error(f"설정 파일 읽기 실패: {path}", exc_info=True)
        raise ConfigLoadError(f"설정 파일 읽기 실패: {file_error}") from file_error
    except yaml.YAMLError as yaml_error:
        logger.error(f"YAML 문법 오류: {path}", exc_info=True)
        raise ConfigLoadError(f"YAML 문법 오류: {yaml_error}") from yaml_error

    if data is None:
        logger.warning(f"설정 파일이 비어 있어 기본값을 사용합니다: {path}")
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"설정 파일 최상위는 매핑이어야 합니다: {type(data).__name__}")
    return data


def _merge_env_overrides(raw_config: dict, environ: Mapping[str, str]) -> dict:
    """
    SSA_<섹션>_<필드> 환경변수를 설정 딕셔너리에 덮어씁니다.

    첫 번째 밑줄이 섹션과 필드의 구분자입니다. 원본 딕셔너리는 바꾸지 않습니다.
    """
    merged = {name: dict(section) if isinstance(section, dict) else section
              for name, section in raw_config.items()}

    for env_key, env_value in environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        section_name, _, field_name = env_key[len(ENV_PREFIX):].lower().partition("_")
        if not field_name:
            logger.debug(f"환경변수 무시 (필드 이름 없음): {env_key}")
            continue

        section = merged.setdefault(section_name, {})
        if not isinstance(section, dict):
            logger.debug(f"환경변수 무시 ({section_name} 섹션이 매핑이 아님): {env_key}")
            continue
        if _field_annotation(section_name, field_name) is str:
            section[field_name] = env_value
        else:
            section[field_name] = _scalar(env_value)
        logger.info(f"환경변수 오버라이드: {env_key} -> {section_name}.{field_name}")

    return merged


def _field_annotation(section_name: str, field_name: str) -> Any:
    """AppConfig에서 섹션.필드의 타입을 찾습니다. 없는 이름이면 None."""
    section_field = AppConfig.model_fields.get(section_name)
    if section_field is None:
        return None
    field = section_field.annotation.model_fields.get(field_name)
    return field.annotation if field is not None else None


def _scalar(text: str) -> Any:
    """환경변수 값을 YAML 스칼라로 해석합니다 (true/false, 정수 등). 해석 불가면 원문."""
    try:
        value = yaml.safe_load(text)
    except yaml.YAMLError:
        return text
    if value is None or isinstance(value, (dict, list)):
        return text
    return value


def _describe_errors(validation_error: ValidationError) -> list[str]:
    lines = []
    for detail in validation_error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        lines.append(f"{location}: {detail['msg']} (입력값: {detail.get('input', 'N/A')!r})")
    return lines
