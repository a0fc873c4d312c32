"""
TypeScript 생성 모듈
TableSchema 목록을 TypeScript 선언으로 변환합니다.
"""

from schema_extractor.generator.type_mapping import TypeMapper
from schema_extractor.generator.typescript_generator import TypeScriptGenerator

__all__ = ["TypeMapper", "TypeScriptGenerator"]
