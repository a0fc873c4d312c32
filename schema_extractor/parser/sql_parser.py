"""
CREATE TABLE 문 추출기

SQL 텍스트에서 CREATE TABLE 문을 찾아 테이블명과 컬럼 정의 원문을 추출합니다.
컬럼 정의 구간은 정규식이 아니라 괄호 균형 스캔으로 잘라내므로
DECIMAL(10,2), ENUM(...) 같은 중첩 괄호에서 잘리지 않습니다.
"""

import re
from typing import List, Optional

from schema_extractor.errors import ParseError
from schema_extractor.parser.ddl_types import RawTableDefinition
from schema_extractor.parser.scanner import find_matching_paren, mask_comments
from schema_extractor.utils.logger import setup_logger

logger = setup_logger("sql_parser")

# CREATE TABLE [IF NOT EXISTS] name ( 까지만 매칭하고 본문은 괄호 스캔으로 처리
CREATE_TABLE_PATTERN = re.compile(
    r'CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?'
    r'(?:`([^`]+)`|"([^"]+)"|(\w+))\s*\(',
    re.IGNORECASE
)

# 닫는 괄호 뒤의 dialect 옵션 (ENGINE=, CHARSET=, COLLATE=, AUTO_INCREMENT=, COMMENT=, WITHOUT ROWID)
TRAILING_OPTIONS_PATTERN = re.compile(
    r"(?:\s*,?\s*(?:"
    r"ENGINE\s*=\s*\w+"
    r"|(?:DEFAULT\s+)?(?:CHARSET|CHARACTER\s+SET)\s*=?\s*[\w\-]+"
    r"|(?:DEFAULT\s+)?COLLATE\s*=?\s*[\w\-]+"
    r"|AUTO_INCREMENT\s*=\s*\d+"
    r"|COMMENT\s*=?\s*'((?:[^'\\]|\\.|'')*)'"
    r"|WITHOUT\s+ROWID"
    r"|STRICT"
    r"))*\s*;?",
    re.IGNORECASE
)

_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]')


class SQLParser:
    """SQL 텍스트에서 CREATE TABLE 문을 추출하는 파서"""

    @staticmethod
    def parse(sql: str) -> List[RawTableDefinition]:
        """
        SQL 텍스트를 스캔하여 CREATE TABLE 문 목록을 반환합니다.

        Args:
            sql: CREATE TABLE 문을 하나 이상 포함하는 SQL 텍스트

        Returns:
            선언 순서대로 정렬된 RawTableDefinition 리스트

        Raises:
            ParseError: 입력이 문자열이 아니거나 비어 있는 경우,
                괄호가 닫히지 않은 경우, CREATE TABLE 문이 없는 경우
        """
        if not isinstance(sql, str):
            raise ParseError('SQL input must be a string')
        if not sql.strip():
            raise ParseError('SQL input cannot be empty')

        text = SQLParser._sanitize(sql)
        # 주석 안의 CREATE TABLE이나 괄호는 무시 (길이와 줄바꿈은 보존)
        scan_text = mask_comments(text)

        tables: List[RawTableDefinition] = []
        pos = 0
        while True:
            match = CREATE_TABLE_PATTERN.search(scan_text, pos)
            if not match:
                break

            name_group = next(g for g in (1, 2, 3) if match.group(g))
            table_name = match.group(name_group).strip()
            line_number = SQLParser._calculate_line_number(text, match.start(name_group))

            open_index = match.end() - 1
            close_index = find_matching_paren(scan_text, open_index)
            if close_index == -1:
                raise ParseError(
                    f"Unbalanced parentheses in CREATE TABLE statement for table '{table_name}'",
                    line_number
                )

            trailing = TRAILING_OPTIONS_PATTERN.match(text, close_index + 1)
            end = trailing.end() if trailing else close_index + 1
            table_comment = SQLParser._unescape(trailing.group(1)) if trailing and trailing.group(1) else None

            fields_string = text[open_index + 1:close_index].strip()
            if not fields_string:
                raise ParseError(f"No field definitions found for table: {table_name}", line_number)

            tables.append(RawTableDefinition(
                name=table_name,
                fields_string=fields_string,
                line_number=line_number,
                original_match=text[match.start():end],
                comment=table_comment,
            ))
            logger.debug(f"CREATE TABLE 발견: {table_name} (line {line_number})")
            pos = end

        if not tables:
            raise ParseError('No CREATE TABLE statements found in the provided SQL')

        logger.info(f"CREATE TABLE 문 {len(tables)}개 추출 완료")
        return tables

    @staticmethod
    def extract_create_table_statements(sql: str) -> List[str]:
        """각 CREATE TABLE 문의 원문(뒤따르는 옵션과 ; 포함)을 반환합니다."""
        return [table.original_match for table in SQLParser.parse(sql)]

    @staticmethod
    def has_create_table_statements(sql: str) -> bool:
        """
        CREATE TABLE 문이 있는지 확인합니다. 예외를 발생시키지 않습니다.
        """
        if not isinstance(sql, str) or not sql.strip():
            return False
        try:
            scan_text = mask_comments(SQLParser._sanitize(sql))
            return CREATE_TABLE_PATTERN.search(scan_text) is not None
        except Exception:  # pragma: no cover - 방어용
            return False

    @staticmethod
    def _sanitize(sql: str) -> str:
        # 줄 번호가 바뀌지 않는 범위의 정리만 수행
        text = sql.replace('\r\n', '\n').replace('\r', '\n')
        return _CONTROL_CHARS.sub('', text)

    @staticmethod
    def _calculate_line_number(sql: str, position: int) -> int:
        if position < 0 or position >= len(sql):
            return 1
        return sql.count('\n', 0, position) + 1

    @staticmethod
    def _unescape(value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.replace("''", "'").replace("\\'", "'").replace('\\"', '"')
