"""
SQL 타입을 TypeScript 타입으로 매핑하는 모듈

dialect별 기본 매핑 테이블은 읽기 전용이며, 인스턴스별 사용자 정의 매핑은
조회 시점에 기본 매핑 위에 덧씌워집니다 (같은 키는 사용자 정의가 우선).
하나의 TypeMapper 인스턴스는 한 곳에서만 사용한다고 가정하며 내부 잠금은 없습니다.
"""

import re
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Union

from schema_extractor.errors import TypeMappingError
from schema_extractor.parser.ddl_types import SQLDialect
from schema_extractor.utils.logger import setup_logger

logger = setup_logger("type_mapping")

TsType = str

_MYSQL_TYPES = {
    # 숫자
    "int": "number",
    "integer": "number",
    "bigint": "number",
    "tinyint": "number",
    "smallint": "number",
    "mediumint": "number",
    "float": "number",
    "double": "number",
    "decimal": "number",
    "numeric": "number",
    "year": "number",
    # 문자열
    "varchar": "string",
    "char": "string",
    "text": "string",
    "longtext": "string",
    "mediumtext": "string",
    "tinytext": "string",
    "time": "string",
    # 날짜
    "datetime": "Date",
    "timestamp": "Date",
    "date": "Date",
    # boolean
    "boolean": "boolean",
    "bool": "boolean",
    "tinyint(1)": "boolean",
    "bit": "boolean",
    # 기타
    "json": "object",
    "blob": "Buffer",
    "longblob": "Buffer",
    "mediumblob": "Buffer",
    "tinyblob": "Buffer",
    "binary": "Buffer",
    "varbinary": "Buffer",
}

_POSTGRESQL_TYPES = {
    # 숫자
    "integer": "number",
    "int": "number",
    "int4": "number",
    "bigint": "number",
    "int8": "number",
    "smallint": "number",
    "int2": "number",
    "real": "number",
    "float4": "number",
    "double precision": "number",
    "float8": "number",
    "numeric": "number",
    "decimal": "number",
    "serial": "number",
    "bigserial": "number",
    "smallserial": "number",
    # 문자열
    "varchar": "string",
    "character varying": "string",
    "char": "string",
    "character": "string",
    "text": "string",
    "uuid": "string",
    "time": "string",
    "timetz": "string",
    "time with time zone": "string",
    "time without time zone": "string",
    # 날짜
    "timestamp": "Date",
    "timestamptz": "Date",
    "timestamp with time zone": "Date",
    "timestamp without time zone": "Date",
    "date": "Date",
    # boolean
    "boolean": "boolean",
    "bool": "boolean",
    # 기타
    "json": "object",
    "jsonb": "object",
    "bytea": "Buffer",
}

_SQLITE_TYPES = {
    "integer": "number",
    "int": "number",
    "real": "number",
    "float": "number",
    "double": "number",
    "numeric": "number",
    "decimal": "number",
    "text": "string",
    "varchar": "string",
    "char": "string",
    "time": "string",
    "blob": "Buffer",
    "boolean": "boolean",
    "datetime": "Date",
    "timestamp": "Date",
    "date": "Date",
}

TYPE_MAPPINGS: Mapping[SQLDialect, Mapping[str, TsType]] = MappingProxyType({
    SQLDialect.MYSQL: MappingProxyType(_MYSQL_TYPES),
    SQLDialect.POSTGRESQL: MappingProxyType(_POSTGRESQL_TYPES),
    SQLDialect.SQLITE: MappingProxyType(_SQLITE_TYPES),
})

# 특정 dialect에서만 쓰이는 문자열 (위에서부터 우선순위)
DIALECT_SIGNATURES = (
    (SQLDialect.POSTGRESQL, (
        "serial", "bigserial", "smallserial", "timestamptz", "jsonb", "uuid", "bytea",
        "double precision", "character varying",
    )),
    (SQLDialect.MYSQL, (
        "auto_increment", "tinyint", "mediumint", "longtext", "mediumtext", "tinytext",
        "longblob", "mediumblob", "tinyblob", "engine=", "charset=", "collate=",
    )),
    (SQLDialect.SQLITE, (
        "autoincrement", "without rowid", "pragma",
    )),
)

_TINYINT_BOOLEAN = re.compile(r'^tinyint\s*\(\s*1\s*\)')
_ENUM_TYPE = re.compile(r'^enum\s*\(')
_SET_TYPE = re.compile(r'^set\s*\(')
_ARRAY_SUFFIX = re.compile(r'\s*\[\s*\d*\s*\]$')
_SIZE_SPEC = re.compile(r'\([^)]*\)')
_SIGN_SUFFIX = re.compile(r'\s+(?:unsigned|signed|zerofill)$')
_WHITESPACE = re.compile(r'\s+')

DialectLike = Union[SQLDialect, str]


def _resolve_dialect(dialect: DialectLike) -> Optional[SQLDialect]:
    """dialect 값을 SQLDialect로 변환합니다. AUTO는 MySQL로 취급하고 알 수 없으면 None."""
    try:
        resolved = SQLDialect(str(getattr(dialect, "value", dialect)).strip().lower())
    except ValueError:
        return None
    return SQLDialect.MYSQL if resolved == SQLDialect.AUTO else resolved


def normalize_type(sql_type: str) -> str:
    """
    SQL 타입 문자열을 정규화합니다.

    예:
        VARCHAR(255) -> varchar
        DECIMAL(10,2) UNSIGNED -> decimal
    """
    normalized = _SIZE_SPEC.sub('', sql_type.strip().lower())
    normalized = _WHITESPACE.sub(' ', normalized).strip()
    normalized = _SIGN_SUFFIX.sub('', normalized)
    return normalized.strip()


class TypeMapper:
    """dialect별로 SQL 타입을 TypeScript 타입으로 변환합니다."""

    def __init__(
        self,
        custom_mappings: Optional[Mapping[DialectLike, Mapping[str, TsType]]] = None,
        strict_mode: bool = False
    ):
        """
        Args:
            custom_mappings: dialect별 사용자 정의 매핑 (예: {"postgresql": {"citext": "string"}})
            strict_mode: True면 매핑하지 못한 타입에 대해 TypeMappingError를 발생시킴
        """
        self.strict_mode = strict_mode
        self._custom_mappings: Dict[SQLDialect, Dict[str, TsType]] = {}
        for dialect, mappings in (custom_mappings or {}).items():
            for sql_type, ts_type in mappings.items():
                self.add_custom_mapping(dialect, sql_type, ts_type)

    @staticmethod
    def detect_dialect(sql_content: str) -> SQLDialect:
        """
        SQL 텍스트에 포함된 dialect 고유 문자열로 dialect를 추정합니다.

        PostgreSQL -> MySQL -> SQLite 순서로 검사하며, 둘 이상의 특징이 섞여 있으면
        먼저 검사한 dialect가 선택됩니다. 아무것도 없으면 MySQL입니다.
        """
        content = (sql_content or '').lower()
        for dialect, signatures in DIALECT_SIGNATURES:
            if any(signature in content for signature in signatures):
                logger.debug(f"dialect 감지: {dialect.value}")
                return dialect
        return SQLDialect.MYSQL

    def map_type(self, sql_type: str, dialect: DialectLike = SQLDialect.MYSQL) -> TsType:
        """
        SQL 타입을 TypeScript 타입으로 매핑합니다.

        매핑 순서:
        1. dialect별 특수 규칙 (TINYINT(1), ENUM, SET, 배열, SQLite int 계열)
        2. 원문 그대로 조회 (double precision 같은 복합 타입)
        3. 크기 지정과 UNSIGNED/SIGNED를 제거한 뒤 조회
        4. 첫 단어로 조회

        Args:
            sql_type: SQL 타입 (예: 'VARCHAR(255)', 'INT', 'DATETIME')
            dialect: SQL dialect (AUTO는 MySQL로 취급)

        Returns:
            TypeScript 타입명. 매핑하지 못하면 "any"

        Raises:
            TypeMappingError: strict 모드에서 dialect나 타입을 매핑하지 못한 경우
        """
        if not sql_type or not sql_type.strip():
            logger.warning('빈 SQL 타입이 전달되어 "any"로 처리합니다')
            return "any"

        resolved = _resolve_dialect(dialect)
        if resolved is None:
            message = f'Unsupported dialect "{dialect}", defaulting to MySQL mappings'
            if self.strict_mode:
                raise TypeMappingError(message, sql_type, str(dialect))
            logger.warning(message)
            resolved = SQLDialect.MYSQL

        mappings = self._merged_mappings(resolved)
        clean_type = _WHITESPACE.sub(' ', sql_type.strip().lower())

        special = self._map_special_case(clean_type, resolved, mappings)
        if special:
            return special

        if clean_type in mappings:
            return mappings[clean_type]

        normalized = normalize_type(clean_type)
        if normalized in mappings:
            return mappings[normalized]

        base_type = normalized.split(' ')[0] if normalized else ''
        if base_type in mappings:
            return mappings[base_type]

        message = f'Unrecognized SQL type "{sql_type}" for dialect "{resolved.value}"'
        if self.strict_mode:
            raise TypeMappingError(message, sql_type, resolved.value)
        logger.warning(f'{message}, defaulting to "any"')
        return "any"

    def _map_special_case(self, clean_type: str, dialect: SQLDialect, mappings: Mapping[str, TsType]) -> Optional[TsType]:
        if dialect == SQLDialect.MYSQL:
            if _TINYINT_BOOLEAN.match(clean_type):
                return mappings.get("tinyint(1)", "boolean")
            if _ENUM_TYPE.match(clean_type) or _SET_TYPE.match(clean_type):
                return "string"

        elif dialect == SQLDialect.POSTGRESQL:
            if _ARRAY_SUFFIX.search(clean_type):
                element_type = _ARRAY_SUFFIX.sub('', clean_type)
                return f"{self.map_type(element_type, dialect)}[]"
            if _ENUM_TYPE.match(clean_type):
                return "string"

        elif dialect == SQLDialect.SQLITE:
            # SQLite 타입 친화성: 이름에 int가 들어가면 정수
            if "int" in clean_type and "point" not in clean_type:
                return "number"

        return None

    def _merged_mappings(self, dialect: SQLDialect) -> Dict[str, TsType]:
        merged = dict(TYPE_MAPPINGS[dialect])
        merged.update(self._custom_mappings.get(dialect, {}))
        return merged

    def get_supported_types(self, dialect: DialectLike) -> List[str]:
        """기본 매핑과 사용자 정의 매핑을 합친 SQL 타입 목록"""
        resolved = _resolve_dialect(dialect)
        if resolved is None:
            return []
        return list(self._merged_mappings(resolved).keys())

    def is_type_supported(self, sql_type: str, dialect: DialectLike) -> bool:
        resolved = _resolve_dialect(dialect)
        if resolved is None or not sql_type:
            return False
        mappings = self._merged_mappings(resolved)
        normalized = normalize_type(sql_type)
        base_type = normalized.split(' ')[0] if normalized else ''
        return normalized in mappings or base_type in mappings

    def add_custom_mapping(self, dialect: DialectLike, sql_type: str, ts_type: TsType) -> None:
        """
        사용자 정의 매핑을 추가합니다. 같은 키의 기본 매핑보다 우선합니다.

        Raises:
            TypeMappingError: 지원하지 않는 dialect인 경우
        """
        resolved = self._require_dialect(dialect, sql_type)
        self._custom_mappings.setdefault(resolved, {})[sql_type.strip().lower()] = ts_type

    def remove_custom_mapping(self, dialect: DialectLike, sql_type: str) -> None:
        resolved = _resolve_dialect(dialect)
        if resolved in self._custom_mappings:
            self._custom_mappings[resolved].pop(sql_type.strip().lower(), None)

    def get_custom_mappings(self, dialect: DialectLike) -> Dict[str, TsType]:
        """사용자 정의 매핑의 복사본을 반환합니다."""
        resolved = _resolve_dialect(dialect)
        return dict(self._custom_mappings.get(resolved, {}))

    def clear_custom_mappings(self, dialect: DialectLike) -> None:
        resolved = _resolve_dialect(dialect)
        self._custom_mappings.pop(resolved, None)

    @staticmethod
    def get_default_mappings(dialect: DialectLike) -> Mapping[str, TsType]:
        """사용자 정의 매핑을 제외한 기본 매핑 (읽기 전용)"""
        resolved = _resolve_dialect(dialect)
        if resolved is None:
            return MappingProxyType({})
        return TYPE_MAPPINGS[resolved]

    @staticmethod
    def _require_dialect(dialect: DialectLike, sql_type: str) -> SQLDialect:
        resolved = _resolve_dialect(dialect)
        if resolved is None:
            raise TypeMappingError(f'Unsupported dialect "{dialect}"', sql_type, str(dialect))
        return resolved
