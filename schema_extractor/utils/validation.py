"""
입력 검증 및 정리 유틸리티

파서에 들어가기 전의 검증 게이트입니다.
- 입력 타입/크기/빈 값 검사
- 구문 주입 패턴(; 뒤의 DROP/DELETE 등) 검사: sqlglot 토큰 단위로 판단하므로
  주석이나 문자열 리터럴 안의 키워드는 걸리지 않습니다.
- 괄호/따옴표 짝 검사
- 테이블 수/컬럼 수/메모리 사용량 한도 검사
"""

import re
from pathlib import Path
from typing import List, Optional, Union

import sqlglot
from sqlglot.errors import TokenError
from sqlglot.tokens import Token, TokenType

from schema_extractor.dto.options_dto import DEFAULT_VALIDATION_LIMITS, ValidationLimits
from schema_extractor.errors import FileReadError, InputError, ParseError
from schema_extractor.parser.scanner import ScanState, iter_scan
from schema_extractor.utils.logger import setup_logger

logger = setup_logger("validation")

# ; 뒤에 오면 위험한 구문
DANGEROUS_STATEMENT_KEYWORDS = {'DROP', 'DELETE', 'UPDATE', 'ALTER', 'TRUNCATE'}

DANGEROUS_TEXT_PATTERNS = [
    # 스크립트 삽입
    re.compile(r'<script[^>]*>.*?</script>', re.IGNORECASE),
    # 셸 명령 치환
    re.compile(r'\$\(|\$\{'),
    # 셸코드로 의심되는 긴 16진수
    re.compile(r'0x[0-9a-f]{16,}', re.IGNORECASE),
    # 주석 안의 경로 탐색
    re.compile(r'/\*.*\.\.[/\\].*\*/'),
]

MALFORMED_SQL_PATTERNS = [
    # 과도한 중첩 괄호
    re.compile(r'\({10,}'),
    # 괄호가 전혀 없는 CREATE TABLE
    re.compile(r'CREATE\s+TABLE\s+\w+\s*;?\s*$', re.IGNORECASE),
]

_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]')

_RESTRICTED_PATHS = ['/etc/', '/proc/', '/sys/', '/dev/', 'c:/windows/', 'c:/system32/', '/system/', '/library/']
_INVALID_PATH_CHARS = re.compile(r'[<>"|?*]')
MAX_PATH_LENGTH = 260


def has_unmatched_delimiters(sql: str) -> bool:
    """
    괄호, 작은따옴표, 큰따옴표, 백틱의 짝이 맞지 않는지 확인합니다.
    따옴표나 주석 안의 괄호와 백슬래시로 이스케이프된 따옴표는 무시합니다.
    """
    state = ScanState.NORMAL
    depth = 0
    for _, _, state, depth in iter_scan(sql):
        if depth < 0:
            return True
    return depth != 0 or state not in (ScanState.NORMAL, ScanState.IN_COMMENT)


def find_injection_statement(sql: str) -> Optional[str]:
    """
    sqlglot 토큰 스트림에서 구문 주입 패턴을 찾습니다.

    Returns:
        위험한 구문의 첫 키워드 (예: 'DROP'), 없으면 None

    Raises:
        InputError: 토큰화에 실패한 경우 (닫히지 않은 문자열 등)
    """
    try:
        tokens = sqlglot.tokenize(sql, read="mysql")
    except TokenError as e:
        raise InputError(f"SQL input could not be tokenized: {e}") from e

    statements: List[List[Token]] = [[]]
    for token in tokens:
        if token.token_type == TokenType.SEMICOLON:
            statements.append([])
        else:
            statements[-1].append(token)

    for statement in statements[1:]:
        if not statement:
            continue
        keyword = statement[0].text.upper()
        if keyword in DANGEROUS_STATEMENT_KEYWORDS:
            return keyword
        # INSERT INTO table ( ... ) 형태만 허용
        if keyword == 'INSERT':
            words = [t.text.upper() for t in statement[1:4]]
            if len(words) < 3 or words[0] != 'INTO' or statement[3].token_type != TokenType.L_PAREN:
                return keyword

    words = [t.text.upper() for t in tokens if t.token_type not in (TokenType.STRING, TokenType.IDENTIFIER)]
    if 'UNION' in words and 'SELECT' in words[words.index('UNION'):]:
        return 'UNION'

    return None


def validate_sql_input(sql: str, limits: ValidationLimits = DEFAULT_VALIDATION_LIMITS) -> None:
    """
    SQL 입력의 형식과 안전성을 검증합니다.

    Raises:
        InputError: 입력이 문자열이 아니거나, 비어 있거나, 너무 크거나,
            위험한 패턴을 포함하거나, 괄호/따옴표 짝이 맞지 않는 경우
    """
    if sql is None:
        raise InputError('SQL input cannot be None')
    if not isinstance(sql, str):
        raise InputError('SQL input must be a string')
    if not sql.strip():
        raise InputError('SQL input cannot be empty')

    if len(sql) > limits.max_sql_length:
        raise InputError(
            f"SQL input too large: {len(sql)} bytes exceeds maximum of {limits.max_sql_length} bytes"
        )

    for pattern in DANGEROUS_TEXT_PATTERNS:
        if pattern.search(sql):
            raise InputError('SQL input contains potentially dangerous patterns')

    for pattern in MALFORMED_SQL_PATTERNS:
        if pattern.search(sql):
            raise InputError('SQL input appears to be malformed or incomplete')

    if has_unmatched_delimiters(sql):
        raise InputError('SQL input has unmatched parentheses, quotes, or backticks')

    keyword = find_injection_statement(sql)
    if keyword:
        logger.warning(f"위험한 구문 감지: {keyword}")
        raise InputError(f"SQL input contains potentially dangerous statement: {keyword}")

    control_char_count = len(_CONTROL_CHARS.findall(sql))
    if control_char_count > len(sql) * 0.01:
        raise InputError('SQL input contains excessive control characters')


def sanitize_sql_input(sql: str) -> str:
    """
    null 바이트와 제어 문자를 제거하고 줄바꿈을 정규화합니다.
    """
    if not isinstance(sql, str) or not sql:
        return ''

    sanitized = sql.replace('\0', '')
    sanitized = _CONTROL_CHARS.sub('', sanitized)
    sanitized = sanitized.replace('\r\n', '\n').replace('\r', '\n')
    return sanitized.strip()


def validate_and_convert_input(
    input_data: Union[str, bytes, bytearray],
    limits: ValidationLimits = DEFAULT_VALIDATION_LIMITS
) -> str:
    """
    문자열 또는 UTF-8 바이트 입력을 검증하고 문자열로 변환합니다.

    Returns:
        검증 및 정리가 끝난 SQL 문자열

    Raises:
        InputError: 입력 타입이 맞지 않거나, UTF-8이 아니거나, 검증에 실패한 경우
    """
    if input_data is None:
        raise InputError('Input cannot be None')

    if isinstance(input_data, (bytes, bytearray)):
        if len(input_data) > limits.max_file_size:
            raise InputError(
                f"Buffer size {len(input_data)} bytes exceeds maximum allowed size of {limits.max_file_size} bytes"
            )
        try:
            sql_content = bytes(input_data).decode('utf-8')
        except UnicodeDecodeError as e:
            raise InputError('Failed to convert buffer to string: invalid UTF-8 encoding') from e
    elif isinstance(input_data, str):
        sql_content = input_data
    else:
        raise InputError('Input must be a string or bytes')

    validate_sql_input(sql_content, limits)
    return sanitize_sql_input(sql_content)


def validate_table_count(table_count: int, limits: ValidationLimits = DEFAULT_VALIDATION_LIMITS) -> None:
    """테이블 수가 한도를 넘으면 ParseError를 발생시킵니다."""
    if not isinstance(table_count, int) or table_count < 0:
        raise ParseError('Invalid table count')
    if table_count > limits.max_table_count:
        raise ParseError(
            f"Table count {table_count} exceeds maximum allowed count of {limits.max_table_count}"
        )


def validate_field_count(
    field_count: int,
    table_name: str = '',
    limits: ValidationLimits = DEFAULT_VALIDATION_LIMITS
) -> None:
    """테이블 하나의 컬럼 수가 한도를 넘으면 ParseError를 발생시킵니다."""
    if not isinstance(field_count, int) or field_count < 0:
        raise ParseError(f"Invalid field count for table {table_name}")
    if field_count > limits.max_field_count:
        raise ParseError(
            f"Field count {field_count} in table '{table_name}' exceeds maximum allowed count of {limits.max_field_count}"
        )


def estimate_memory_usage(sql_length: int, table_count: int = 1) -> int:
    """SQL 길이와 테이블 수로 대략적인 메모리 사용량(bytes)을 추정합니다."""
    sql_memory = sql_length * 2
    parsing_memory = sql_length // 2
    result_memory = table_count * 10000
    return sql_memory + parsing_memory + result_memory


def validate_memory_usage(estimated_usage: int, limits: ValidationLimits = DEFAULT_VALIDATION_LIMITS) -> None:
    if estimated_usage > limits.max_memory_usage:
        raise InputError(
            f"Estimated memory usage {round(estimated_usage / 1024 / 1024)}MB exceeds limit of "
            f"{round(limits.max_memory_usage / 1024 / 1024)}MB"
        )


def validate_for_processing(sql: str, limits: ValidationLimits = DEFAULT_VALIDATION_LIMITS) -> None:
    """
    파싱 전에 필요한 검증을 모두 수행합니다.
    입력 검증 -> 예상 테이블 수 검증 -> 예상 메모리 사용량 검증
    """
    validate_sql_input(sql, limits)

    estimated_table_count = len(re.findall(r'CREATE\s+TABLE', sql, re.IGNORECASE))
    validate_table_count(estimated_table_count, limits)

    validate_memory_usage(estimate_memory_usage(len(sql), estimated_table_count), limits)


def validate_file_path(file_path: str) -> None:
    """
    파일 경로의 안전성을 검증합니다.

    Raises:
        FileReadError: 빈 경로, null 바이트, 경로 탐색(..), 시스템 디렉토리,
            너무 긴 경로, 허용되지 않는 문자가 포함된 경우
    """
    if not file_path or not isinstance(file_path, str):
        raise FileReadError('File path must be a non-empty string', str(file_path or ''))

    if '\0' in file_path:
        raise FileReadError('File path contains null bytes', file_path)

    if '..' in Path(file_path).parts:
        raise FileReadError('Path traversal detected in file path', file_path)

    normalized = file_path.lower().replace('\\', '/')
    for restricted in _RESTRICTED_PATHS:
        if restricted in normalized:
            raise FileReadError('File path points to restricted system directory', file_path)

    if len(file_path) > MAX_PATH_LENGTH:
        raise FileReadError('File path too long', file_path)

    if _INVALID_PATH_CHARS.search(file_path):
        raise FileReadError('File path contains invalid characters', file_path)


def validate_file_size(
    size: int,
    limits: ValidationLimits = DEFAULT_VALIDATION_LIMITS,
    file_path: str = ''
) -> None:
    if not isinstance(size, int) or size < 0:
        raise FileReadError('Invalid file size', file_path)
    if size > limits.max_file_size:
        raise FileReadError(
            f"File size {size} bytes exceeds maximum allowed size of {limits.max_file_size} bytes",
            file_path
        )
