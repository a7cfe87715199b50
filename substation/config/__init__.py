"""
설정 패키지

AppConfig 스키마와 YAML 기반 ConfigManager를 제공합니다.
"""

from substation.config.config_manager import ConfigLoadError, ConfigManager
from substation.config.schema import AppConfig, ParserConfig, SystemConfig, WriterConfig

__all__ = [
    "AppConfig",
    "ConfigLoadError",
    "ConfigManager",
    "ParserConfig",
    "SystemConfig",
    "WriterConfig",
]
