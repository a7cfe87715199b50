"""
substation 커맨드라인 진입점

역할:
- 설정 로드(config.yaml 또는 기본값) 후 구조화 로깅 초기화
- check: 스크립트를 파싱하고 버전/스타일/이벤트 수 요약 출력
- normalize: 파싱 후 표준 형식으로 다시 직렬화 (stdout 또는 -o 파일)
- info: Script Info 속성을 JSON으로 출력
- ScriptError 발생 시 에러 메시지를 stderr로 출력하고 종료 코드 1 반환

실행 예시:
    python main.py check episode01.ass
    python main.py normalize episode01.ass -o episode01.clean.ass
    python main.py --log-level DEBUG info episode01.ass
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from substation.config.config_manager import ConfigLoadError, ConfigManager
from substation.config.schema import AppConfig
from substation.logging.structured_logger import setup_logging
from substation.script.errors import ScriptError
from substation.script.file import File
from substation.script.value import ValueKind

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"


# =============================================================================
# 명령 구현
# =============================================================================

def _command_check(script: File, args: argparse.Namespace, config: AppConfig) -> None:
    print(
        f"{args.file}: version={script.version.value}, "
        f"styles={len(script.styles)}, events={len(script.events)}, "
        f"fonts={len(script.fonts)}, graphics={len(script.graphics)}"
    )


def _command_normalize(script: File, args: argparse.Namespace, config: AppConfig) -> None:
    if args.output:
        script.save(args.output, config.writer)
        return
    # 줄바꿈 문자를 설정값 그대로 유지
    sys.stdout.write(script.serialize(config.writer))
    sys.stdout.flush()


def _command_info(script: File, args: argparse.Namespace, config: AppConfig) -> None:
    properties = {}
    for key, value in script.script_info:
        if value.kind is ValueKind.LIST:
            properties[key] = [str(item) for item in value.as_list()]
        elif value.kind in (ValueKind.INT, ValueKind.FLOAT, ValueKind.BOOLEAN):
            properties[key] = value.data
        else:
            properties[key] = str(value)
    print(json.dumps(properties, ensure_ascii=False, indent=2))


_COMMANDS = {
    "check": _command_check,
    "normalize": _command_normalize,
    "info": _command_info,
}


# =============================================================================
# 진입점
# =============================================================================

def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """커맨드라인 인자를 파싱합니다."""
    parser = argparse.ArgumentParser(
        description="substation: SSA/ASS 자막 스크립트 검사 및 정규화 도구"
    )
    parser.add_argument(
        "--config", default=None,
        help=f"설정 파일 경로 (기본: {DEFAULT_CONFIG_PATH}가 있으면 사용)"
    )
    parser.add_argument(
        "--log-level", help="로그 레벨 (config.yaml 오버라이드)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="스크립트 파싱 후 요약 출력")
    check_parser.add_argument("file", help="스크립트 파일 경로")

    normalize_parser = subparsers.add_parser("normalize", help="스크립트를 표준 형식으로 재출력")
    normalize_parser.add_argument("file", help="스크립트 파일 경로")
    normalize_parser.add_argument("-o", "--output", help="출력 파일 경로 (기본: stdout)")

    info_parser = subparsers.add_parser("info", help="Script Info 속성을 JSON으로 출력")
    info_parser.add_argument("file", help="스크립트 파일 경로")

    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> AppConfig:
    """설정 파일(또는 기본값)을 로드하고 커맨드라인 오버라이드를 적용합니다."""
    manager = ConfigManager()
    if args.config:
        config = manager.load(args.config)
    elif Path(DEFAULT_CONFIG_PATH).exists():
        config = manager.load(DEFAULT_CONFIG_PATH)
    else:
        config = manager.load_defaults()

    if args.log_level:
        # Pydantic 모델을 재생성해 validator를 다시 거치게 함
        config_dict = config.model_dump()
        config_dict["system"]["log_level"] = args.log_level
        config = AppConfig(**config_dict)
    return config


def main(argv: Optional[list[str]] = None) -> int:
    """
    CLI 메인 함수입니다.

    반환값:
        int: 종료 코드 (0 성공, 1 스크립트 에러, 2 설정 에러)
    """
    args = _parse_args(argv)

    try:
        config = _load_config(args)
    except (ConfigLoadError, ValueError) as config_error:
        print(f"설정 로드 실패: {config_error}", file=sys.stderr)
        return 2

    setup_logging(config)
    logger.debug(f"명령 실행: {args.command} {args.file}")

    try:
        script = File.load(args.file, config.parser)
        _COMMANDS[args.command](script, args, config)
    except ScriptError as script_error:
        logger.error(f"{args.command} 실패: {script_error}")
        print(f"{args.file}: {script_error}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
