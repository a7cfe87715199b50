"""
substation: SSA/ASS 자막 스크립트 파서 및 직렬화 라이브러리입니다.

하위 패키지:
- script: 값 모델, 섹션 스키마, 파서, 문서(File)
- config: YAML 설정 스키마 및 로더
- logging: 구조화 로깅 설정
"""

__version__ = "0.1.0"
