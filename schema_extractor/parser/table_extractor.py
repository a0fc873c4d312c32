"""
테이블 스키마 추출 모듈
SQLParser와 FieldParser를 조합하여 완전한 TableSchema를 만듭니다.

**역할**: CREATE TABLE 단위 오케스트레이션
- SQLParser로 테이블명과 컬럼 정의 원문 추출
- FieldParser로 컬럼 파싱
- 같은 원문을 다시 스캔하여 테이블 제약조건(PK, FK, UNIQUE, INDEX) 추출
- 테이블 수/컬럼 수 한도 검증
"""

import re
from typing import Dict, List, Optional

from schema_extractor.dto.options_dto import (
    DEFAULT_EXTRACTOR_OPTIONS,
    DEFAULT_VALIDATION_LIMITS,
    ExtractorOptions,
    ValidationLimits,
)
from schema_extractor.errors import ParseError
from schema_extractor.parser.ddl_types import (
    FieldSchema,
    ForeignKeyReference,
    RawTableDefinition,
    TableConstraint,
    TableConstraintType,
    TableSchema,
)
from schema_extractor.parser.field_parser import FieldParser
from schema_extractor.parser.scanner import mask_comments, mask_quoted, strip_identifier_quotes
from schema_extractor.parser.sql_parser import SQLParser
from schema_extractor.utils.logger import setup_logger
from schema_extractor.utils.validation import validate_field_count, validate_table_count

logger = setup_logger("table_extractor")

_NAME = r'(?:`[^`]+`|"[^"]+"|\w+)'
# 제약조건/인덱스 이름 자리에 올 수 없는 키워드
_CONSTRAINT_NAME = (
    r'(?!(?:CHECK|REFERENCES|NOT|NULL|DEFAULT|CONSTRAINT|PRIMARY|FOREIGN|KEY|INDEX|USING)\b)' + _NAME
)

# 테이블 제약조건 패턴 (호출마다 finditer로 새로 순회)
TABLE_CONSTRAINT_PATTERNS = {
    'PRIMARY_KEY': re.compile(
        r'(?:^|\s|,)\s*(?:CONSTRAINT\s+(' + _NAME + r')\s+)?PRIMARY\s+KEY\s*\(([^)]+)\)',
        re.IGNORECASE
    ),
    'FOREIGN_KEY': re.compile(
        r'(?:^|\s|,)\s*(?:CONSTRAINT\s+(' + _NAME + r')\s+)?FOREIGN\s+KEY\s*\(([^)]+)\)\s*'
        r'REFERENCES\s+(' + _NAME + r')\s*\(([^)]+)\)',
        re.IGNORECASE
    ),
    'UNIQUE': re.compile(
        r'(?:^|\s|,)\s*(?:CONSTRAINT\s+(' + _NAME + r')\s+)?UNIQUE(?:\s+(?:KEY|INDEX))?(?:\s+(' + _CONSTRAINT_NAME + r'))?\s*\(([^)]+)\)',
        re.IGNORECASE
    ),
    # 앞에 UNIQUE / PRIMARY / FOREIGN이 붙은 KEY는 group 1로 잡아서 INDEX 집계에서 제외
    'INDEX': re.compile(
        r'(?:^|\s|,)\s*(?:(UNIQUE|PRIMARY|FOREIGN)\s+)?(?:KEY|INDEX)\s+(' + _CONSTRAINT_NAME + r')\s*\(([^)]+)\)',
        re.IGNORECASE
    ),
}


class TableExtractor:
    """SQL 텍스트에서 TableSchema 목록을 추출하는 클래스"""

    @staticmethod
    def extract_tables(
        sql: str,
        options: Optional[ExtractorOptions] = None,
        limits: Optional[ValidationLimits] = None
    ) -> List[TableSchema]:
        """
        SQL 텍스트의 모든 CREATE TABLE 문을 TableSchema로 변환합니다.

        Args:
            sql: CREATE TABLE 문을 포함하는 SQL 텍스트
            options: 추출 옵션 (None이면 기본값)
            limits: 테이블 수/컬럼 수 한도 (None이면 기본값)

        Returns:
            선언 순서대로 정렬된 TableSchema 리스트

        Raises:
            ParseError: 파싱에 실패한 경우. 테이블 단위 오류에는
                테이블명과 줄 번호가 포함됩니다.
        """
        if not isinstance(sql, str) or not sql.strip():
            raise ParseError('Invalid SQL input: must be a non-empty string')

        options = options or DEFAULT_EXTRACTOR_OPTIONS
        limits = limits or DEFAULT_VALIDATION_LIMITS

        raw_tables = SQLParser.parse(sql)
        validate_table_count(len(raw_tables), limits)

        tables: List[TableSchema] = []
        seen: Dict[str, str] = {}
        for raw_table in raw_tables:
            try:
                table = TableExtractor._extract_table_schema(raw_table, options)
                validate_field_count(len(table.fields), table.name, limits)
            except ParseError as e:
                raise ParseError(
                    f"Error extracting table '{raw_table.name}': {e.message}",
                    raw_table.line_number,
                    position=e.position
                ) from e

            key = table.name if options.case_sensitive else table.name.lower()
            if key in seen:
                logger.warning(f"중복된 테이블 정의: {table.name} (기존: {seen[key]}, line {raw_table.line_number})")
            seen[key] = table.name
            tables.append(table)

        logger.info(f"테이블 {len(tables)}개 파싱 완료")
        return tables

    @staticmethod
    def extract_single_table(sql: str, options: Optional[ExtractorOptions] = None) -> TableSchema:
        """
        CREATE TABLE 문이 정확히 하나인 SQL에서 TableSchema를 추출합니다.

        Raises:
            ParseError: 테이블이 없거나 둘 이상인 경우
        """
        tables = TableExtractor.extract_tables(sql, options)
        if len(tables) != 1:
            raise ParseError(f"Expected single table, found {len(tables)} tables")
        return tables[0]

    @staticmethod
    def has_valid_tables(sql: str) -> bool:
        """유효한 테이블 정의가 있는지 확인합니다. 예외를 발생시키지 않습니다."""
        try:
            return len(TableExtractor.extract_tables(sql)) > 0
        except Exception:
            return False

    @staticmethod
    def _extract_table_schema(raw_table: RawTableDefinition, options: ExtractorOptions) -> TableSchema:
        fields = FieldParser.parse_fields(raw_table.fields_string)
        if not fields:
            raise ParseError(f"No field definitions found for table: {raw_table.name}", raw_table.line_number)

        if not options.include_comments:
            fields = [TableExtractor._without_comment(f) for f in fields]

        return TableSchema(
            name=raw_table.name,
            fields=tuple(fields),
            constraints=tuple(TableExtractor.extract_table_constraints(raw_table.fields_string)),
            comment=raw_table.comment if options.include_comments else None,
        )

    @staticmethod
    def extract_table_constraints(fields_string: str) -> List[TableConstraint]:
        """
        컬럼 정의 원문에서 테이블 제약조건을 추출합니다.

        패턴 종류별로 전체 텍스트를 독립적으로 스캔하므로 같은 종류의 제약조건이
        여러 개 있어도 모두 추출됩니다. 결과 순서는 PK, FK, UNIQUE, INDEX 순이며
        각 종류 안에서는 등장 순서를 따릅니다.
        """
        # 주석과 문자열 리터럴 안의 키워드는 무시 (위치는 원문과 동일)
        text = mask_comments(fields_string)
        masked = mask_quoted(text)
        constraints: List[TableConstraint] = []

        def group(match: re.Match, index: int) -> Optional[str]:
            if match.group(index) is None:
                return None
            return text[match.start(index):match.end(index)]

        for match in TABLE_CONSTRAINT_PATTERNS['PRIMARY_KEY'].finditer(masked):
            fields = TableExtractor.parse_field_list(group(match, 2))
            if fields:
                constraints.append(TableConstraint(
                    type=TableConstraintType.PRIMARY_KEY,
                    fields=tuple(fields),
                    name=TableExtractor._clean_name(group(match, 1)),
                ))

        for match in TABLE_CONSTRAINT_PATTERNS['FOREIGN_KEY'].finditer(masked):
            fields = TableExtractor.parse_field_list(group(match, 2))
            reference_fields = TableExtractor.parse_field_list(group(match, 4))
            if fields and reference_fields:
                constraints.append(TableConstraint(
                    type=TableConstraintType.FOREIGN_KEY,
                    fields=tuple(fields),
                    reference=ForeignKeyReference(
                        table=strip_identifier_quotes(group(match, 3)),
                        fields=tuple(reference_fields),
                    ),
                    name=TableExtractor._clean_name(group(match, 1)),
                ))

        for match in TABLE_CONSTRAINT_PATTERNS['UNIQUE'].finditer(masked):
            fields = TableExtractor.parse_field_list(group(match, 3))
            if fields:
                constraints.append(TableConstraint(
                    type=TableConstraintType.UNIQUE,
                    fields=tuple(fields),
                    name=TableExtractor._clean_name(group(match, 2) or group(match, 1)),
                ))

        for match in TABLE_CONSTRAINT_PATTERNS['INDEX'].finditer(masked):
            if match.group(1):
                continue
            fields = TableExtractor.parse_field_list(group(match, 3))
            if fields:
                constraints.append(TableConstraint(
                    type=TableConstraintType.INDEX,
                    fields=tuple(fields),
                    name=TableExtractor._clean_name(group(match, 2)),
                ))

        return constraints

    @staticmethod
    def parse_field_list(field_list: Optional[str]) -> List[str]:
        """쉼표로 구분된 컬럼 목록을 따옴표를 제거한 이름 리스트로 변환합니다."""
        if not field_list:
            return []
        names = (strip_identifier_quotes(name) for name in field_list.split(','))
        return [name for name in names if name]

    @staticmethod
    def _clean_name(name: Optional[str]) -> Optional[str]:
        return strip_identifier_quotes(name) if name else None

    @staticmethod
    def _without_comment(field: FieldSchema) -> FieldSchema:
        if field.comment is None:
            return field
        return FieldSchema(
            name=field.name,
            type=field.type,
            nullable=field.nullable,
            default_value=field.default_value,
            constraints=field.constraints,
            comment=None,
        )
