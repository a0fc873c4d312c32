"""
컬럼 정의 파서

CREATE TABLE 본문의 컬럼 정의 목록을 개별 정의로 분리하고,
각 정의를 name / TYPE / 나머지 속성으로 분해합니다.
나머지 속성(NOT NULL, DEFAULT, COMMENT, 제약조건)은 순서에 상관없이
패턴별로 독립적으로 검사합니다.
"""

import re
from typing import List, Optional

from schema_extractor.errors import ParseError
from schema_extractor.parser.ddl_types import FieldConstraint, FieldConstraintType, FieldSchema
from schema_extractor.parser.scanner import find_matching_paren, mask_quoted, split_top_level
from schema_extractor.utils.logger import setup_logger

logger = setup_logger("field_parser")

# name TYPE rest
# TYPE: WORD[ PRECISION|VARYING][(args)][ WITH[OUT] TIME ZONE][[]]*[ UNSIGNED|SIGNED|ZEROFILL]*
FIELD_DEFINITION_PATTERN = re.compile(
    r'^\s*(?:`([^`]+)`|"([^"]+)"|(\w+))\s+'
    r'('
    r'\w+(?:\s+(?:PRECISION|VARYING)\b)?'
    r'(?:\([^)]*\))?'
    r'(?:\s+WITH(?:OUT)?\s+TIME\s+ZONE\b)?'
    r'(?:\s*\[\d*\])*'
    r'(?:\s+(?:UNSIGNED|SIGNED|ZEROFILL)\b)*'
    r')'
    r'\s*(.*?)$',
    re.IGNORECASE | re.DOTALL
)

TABLE_CONSTRAINT_PREFIX = re.compile(
    r'^\s*(?:PRIMARY\s+KEY|FOREIGN\s+KEY|UNIQUE|INDEX|KEY|CONSTRAINT|CHECK)\b',
    re.IGNORECASE
)

CONSTRAINT_PATTERNS = {
    'NOT_NULL': re.compile(r'\bNOT\s+NULL\b', re.IGNORECASE),
    'PRIMARY_KEY': re.compile(r'\bPRIMARY\s+KEY\b', re.IGNORECASE),
    'UNIQUE': re.compile(r'\bUNIQUE\b', re.IGNORECASE),
    'AUTO_INCREMENT': re.compile(r'\bAUTO_?INCREMENT\b', re.IGNORECASE),
    'DEFAULT': re.compile(r'\bDEFAULT\s+', re.IGNORECASE),
    'COMMENT': re.compile(r'''\bCOMMENT\s+(['"])((?:\\.|\1\1|(?!\1).)*)\1''', re.IGNORECASE | re.DOTALL),
    'FOREIGN_KEY': re.compile(r'\bREFERENCES\s+(?:`([^`]+)`|"([^"]+)"|(\w+))\s*\(([^)]+)\)', re.IGNORECASE),
    'CHECK': re.compile(r'\bCHECK\s*\(', re.IGNORECASE),
}

# DEFAULT 값 뒤에 오면 값이 끝나는 키워드
DEFAULT_TERMINATORS = re.compile(
    r'^(?:ON\s+UPDATE|COMMENT|NOT\s+NULL|NULL|PRIMARY\s+KEY|UNIQUE|AUTO_INCREMENT|,|$)',
    re.IGNORECASE
)
DEFAULT_TERMINATORS_AFTER_PAREN = re.compile(
    r'^(?:COMMENT|NOT\s+NULL|NULL|PRIMARY\s+KEY|UNIQUE|AUTO_INCREMENT|,|$)',
    re.IGNORECASE
)
ON_UPDATE_PATTERN = re.compile(r'^ON\s+UPDATE\s+(\S+)', re.IGNORECASE)


class FieldParser:
    """CREATE TABLE 본문의 컬럼 정의 파서"""

    @staticmethod
    def parse_fields(fields_string: str) -> List[FieldSchema]:
        """
        컬럼 정의 목록 문자열을 파싱합니다.

        최상위 쉼표로 정의를 나누고, 빈 정의와 테이블 제약조건
        (PRIMARY KEY (...), FOREIGN KEY ..., INDEX ... 등)은 건너뜁니다.

        Args:
            fields_string: CREATE TABLE 괄호 안의 원문

        Returns:
            선언 순서대로 정렬된 FieldSchema 리스트

        Raises:
            ParseError: 입력이 비어 있거나 정의 하나라도 파싱에 실패한 경우.
                1부터 시작하는 정의 순번이 메시지와 position에 담깁니다.
        """
        if not isinstance(fields_string, str) or not fields_string.strip():
            raise ParseError('Invalid fields string: must be a non-empty string')

        fields: List[FieldSchema] = []
        for index, definition in enumerate(split_top_level(fields_string), start=1):
            if not definition:
                continue
            if FieldParser.is_table_level_constraint(definition):
                logger.debug(f"테이블 제약조건 건너뜀: {definition}")
                continue
            try:
                fields.append(FieldParser.parse_field(definition))
            except ParseError as e:
                raise ParseError(f"Error parsing field {index}: {e.message}", position=index) from e

        return fields

    @staticmethod
    def parse_field(field_definition: str, line_number: Optional[int] = None) -> FieldSchema:
        """
        단일 컬럼 정의를 FieldSchema로 변환합니다.

        예: "id INT PRIMARY KEY" -> FieldSchema(name="id", type="INT", nullable=False, ...)

        Raises:
            ParseError: 입력이 비어 있거나, 테이블 제약조건이거나,
                name TYPE 형태로 분해할 수 없는 경우
        """
        if not isinstance(field_definition, str) or not field_definition.strip():
            raise ParseError('Invalid field definition: must be a non-empty string', line_number)

        definition = field_definition.strip()
        if FieldParser.is_table_level_constraint(definition):
            raise ParseError('Table-level constraint found where field definition expected', line_number)

        match = FIELD_DEFINITION_PATTERN.match(definition)
        if not match:
            raise ParseError(f"Could not parse field definition: {definition}", line_number)

        field_name = (match.group(1) or match.group(2) or match.group(3) or '').strip()
        field_type = (match.group(4) or '').strip()
        rest = match.group(5) or ''

        if not field_name:
            raise ParseError(f"Could not extract field name from: {definition}", line_number)
        if not field_type:
            raise ParseError(f"Could not extract field type from: {definition}", line_number)

        return FieldSchema(
            name=field_name,
            type=field_type,
            nullable=FieldParser._determine_nullability(rest),
            default_value=FieldParser._extract_default_value(rest),
            constraints=tuple(FieldParser._parse_constraints(rest)),
            comment=FieldParser._extract_comment(rest),
        )

    @staticmethod
    def is_table_level_constraint(definition: str) -> bool:
        """정의가 컬럼이 아니라 테이블 제약조건인지 확인합니다."""
        return TABLE_CONSTRAINT_PREFIX.match(definition) is not None

    @staticmethod
    def _parse_constraints(rest: str) -> List[FieldConstraint]:
        constraints: List[FieldConstraint] = []
        # 키워드 검색은 문자열 리터럴 밖에서만
        masked = mask_quoted(rest)

        if CONSTRAINT_PATTERNS['PRIMARY_KEY'].search(masked):
            constraints.append(FieldConstraint(FieldConstraintType.PRIMARY_KEY))

        if CONSTRAINT_PATTERNS['UNIQUE'].search(masked):
            constraints.append(FieldConstraint(FieldConstraintType.UNIQUE))

        if CONSTRAINT_PATTERNS['AUTO_INCREMENT'].search(masked):
            constraints.append(FieldConstraint(FieldConstraintType.AUTO_INCREMENT))

        fk_match = CONSTRAINT_PATTERNS['FOREIGN_KEY'].search(masked)
        if fk_match:
            # masked와 원문은 위치가 같으므로 값은 원문에서 잘라냄
            name_group = next(g for g in (1, 2, 3) if fk_match.group(g))
            ref_table = rest[fk_match.start(name_group):fk_match.end(name_group)].strip()
            ref_columns = rest[fk_match.start(4):fk_match.end(4)].strip()
            constraints.append(FieldConstraint(
                FieldConstraintType.FOREIGN_KEY,
                f"{ref_table}({ref_columns})"
            ))

        check_match = CONSTRAINT_PATTERNS['CHECK'].search(masked)
        if check_match:
            open_index = check_match.end() - 1
            close_index = find_matching_paren(rest, open_index)
            if close_index != -1:
                predicate = rest[open_index + 1:close_index].strip()
                if predicate:
                    constraints.append(FieldConstraint(FieldConstraintType.CHECK, predicate))

        return constraints

    @staticmethod
    def _determine_nullability(rest: str) -> bool:
        masked = mask_quoted(rest)
        # 명시적인 NOT NULL이 우선
        if CONSTRAINT_PATTERNS['NOT_NULL'].search(masked):
            return False
        # PRIMARY KEY 컬럼은 암묵적으로 NOT NULL
        if CONSTRAINT_PATTERNS['PRIMARY_KEY'].search(masked):
            return False
        return True

    @staticmethod
    def _extract_default_value(rest: str) -> Optional[str]:
        """
        DEFAULT 값을 추출합니다.

        정규식 하나로는 처리할 수 없는 경우가 많아 문자 단위로 스캔합니다.
        - 따옴표 안의 공백/쉼표는 값의 일부
        - 괄호 안의 식((UUID()), (RAND() * 100))은 하나의 값
        - 뒤따르는 ON UPDATE <value>는 그대로 이어 붙임
        - 최상위의 COMMENT, NOT NULL, NULL, PRIMARY KEY, UNIQUE,
          AUTO_INCREMENT, 쉼표, 문자열 끝에서 종료
        """
        keyword = FieldParser._find_default_keyword(rest)
        if keyword is None:
            return None

        value: List[str] = []
        quote_char = ''
        paren_count = 0
        i = keyword.end()

        while i < len(rest):
            char = rest[i]
            prev_char = rest[i - 1] if i > 0 else ''

            if not quote_char and char in ('"', "'"):
                quote_char = char
                value.append(char)
            elif quote_char and char == quote_char and prev_char != '\\':
                quote_char = ''
                value.append(char)
            elif quote_char:
                value.append(char)
            elif char == '(':
                paren_count += 1
                value.append(char)
            elif char == ')':
                paren_count -= 1
                value.append(char)
                if paren_count == 0 and '(' in value:
                    remaining = rest[i + 1:].strip()
                    if DEFAULT_TERMINATORS_AFTER_PAREN.match(remaining):
                        break
            elif paren_count == 0 and char.isspace():
                remaining = rest[i:].strip()
                if DEFAULT_TERMINATORS.match(remaining):
                    on_update = ON_UPDATE_PATTERN.match(remaining)
                    if on_update:
                        value.append(f" ON UPDATE {on_update.group(1)}")
                    break
                value.append(char)
            else:
                value.append(char)
            i += 1

        default_value = ''.join(value).strip()

        # 공백 없는 단순 문자열 값만 따옴표 제거 (복합 식은 원문 유지)
        if len(default_value) >= 2 and default_value[0] in ('"', "'") and default_value[-1] == default_value[0]:
            inner = default_value[1:-1]
            if ' ' not in inner:
                default_value = inner

        return default_value

    @staticmethod
    def _find_default_keyword(rest: str) -> Optional[re.Match]:
        # 문자열 리터럴 안의 'default'는 키워드가 아님
        return CONSTRAINT_PATTERNS['DEFAULT'].search(mask_quoted(rest))

    @staticmethod
    def _extract_comment(rest: str) -> Optional[str]:
        match = CONSTRAINT_PATTERNS['COMMENT'].search(rest)
        if match and match.group(2):
            # 이스케이프된 따옴표 처리 ('' 또는 \')
            quote = match.group(1)
            comment = match.group(2).replace(quote * 2, quote)
            return comment.replace("\\'", "'").replace('\\"', '"')
        return None
