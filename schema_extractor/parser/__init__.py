"""
CREATE TABLE 파서 모듈
SQL 텍스트 -> RawTableDefinition -> FieldSchema 변환을 담당합니다.
TableSchema 조립은 schema_extractor.parser.table_extractor를 사용합니다.
"""

from schema_extractor.parser.ddl_types import (
    FieldConstraint,
    FieldConstraintType,
    FieldSchema,
    ForeignKeyReference,
    RawTableDefinition,
    SQLDialect,
    TableConstraint,
    TableConstraintType,
    TableSchema,
)
from schema_extractor.parser.sql_parser import SQLParser
from schema_extractor.parser.field_parser import FieldParser

__all__ = [
    'SQLDialect',
    'FieldConstraint',
    'FieldConstraintType',
    'FieldSchema',
    'ForeignKeyReference',
    'RawTableDefinition',
    'TableConstraint',
    'TableConstraintType',
    'TableSchema',
    'SQLParser',
    'FieldParser',
]
