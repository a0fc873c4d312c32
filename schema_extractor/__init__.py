"""
sql-schema-extractor

CREATE TABLE 문(MySQL / PostgreSQL / SQLite)을 파싱하여 TableSchema 목록으로 만들고,
이를 TypeScript interface / type 선언으로 변환합니다.

사용 예:
    from schema_extractor import extract_and_generate

    code = extract_and_generate(
        "CREATE TABLE users (id INT PRIMARY KEY, name VARCHAR(50));",
        generator_options={"naming": "PascalCase"},
    )
"""

from typing import Optional, Sequence, Union

from schema_extractor.dto.options_dto import (
    ExtractorOptions,
    GeneratorOptions,
    SchemaConfiguration,
    ValidationLimits,
)
from schema_extractor.errors import (
    ConfigurationError,
    FileReadError,
    InputError,
    ParseError,
    SchemaExtractorError,
    TypeMappingError,
)
from schema_extractor.generator.type_mapping import DialectLike, TypeMapper
from schema_extractor.generator.typescript_generator import TypeScriptGenerator
from schema_extractor.parser.ddl_types import (
    FieldConstraint,
    FieldConstraintType,
    FieldSchema,
    ForeignKeyReference,
    SQLDialect,
    TableConstraint,
    TableConstraintType,
    TableSchema,
)
from schema_extractor.parser.table_extractor import TableExtractor
from schema_extractor.utils.config import (
    OptionsLike,
    merge_extractor_options,
    merge_generator_options,
    merge_validation_limits,
)
from schema_extractor.utils.file_loader import read_sql_file
from schema_extractor.utils.logger import setup_logger
from schema_extractor.utils.validation import validate_and_convert_input, validate_for_processing

__version__ = "0.1.0"

logger = setup_logger("api")

SQLInput = Union[str, bytes, bytearray]


def extract_schemas(
    input_data: SQLInput,
    options: OptionsLike = None,
    limits: OptionsLike = None
) -> Sequence[TableSchema]:
    """
    SQL 문자열(또는 UTF-8 바이트)에서 테이블 스키마를 추출합니다.

    입력 검증 -> 옵션 병합 -> 처리 한도 검증 -> TableExtractor 순으로 진행합니다.

    Raises:
        InputError: 입력이 비어 있거나 안전하지 않은 경우
        ConfigurationError: 옵션 값이 잘못된 경우
        ParseError: CREATE TABLE 문을 해석할 수 없는 경우
    """
    merged_limits = merge_validation_limits(limits)
    merged_options = merge_extractor_options(options)

    sql_content = validate_and_convert_input(input_data, merged_limits)
    validate_for_processing(sql_content, merged_limits)

    return TableExtractor.extract_tables(sql_content, merged_options, merged_limits)


def generate_types(
    schemas: Sequence[TableSchema],
    options: OptionsLike = None,
    dialect: DialectLike = SQLDialect.MYSQL,
    type_mapper: Optional[TypeMapper] = None
) -> str:
    """
    TableSchema 목록으로 TypeScript 선언을 생성합니다.

    Raises:
        InputError: schemas가 None이거나 시퀀스가 아닌 경우
        ConfigurationError: 옵션 값이 잘못된 경우
        TypeMappingError: strict 모드 type_mapper에서 타입을 매핑하지 못한 경우
    """
    if schemas is None:
        raise InputError('Schemas cannot be None')
    if isinstance(schemas, (str, bytes)) or not isinstance(schemas, Sequence):
        raise InputError('Schemas must be a sequence of TableSchema')
    if not schemas:
        return ''

    merged_options = merge_generator_options(options)
    generator = TypeScriptGenerator(type_mapper or TypeMapper(), dialect)
    return generator.generate(schemas, merged_options)


def extract_and_generate(
    input_data: SQLInput,
    extractor_options: OptionsLike = None,
    generator_options: OptionsLike = None,
    limits: OptionsLike = None,
    type_mapper: Optional[TypeMapper] = None
) -> str:
    """
    스키마 추출과 TypeScript 생성을 한 번에 수행합니다.

    dialect가 auto이면 SQL 내용으로 dialect를 추정하여 타입 매핑에 사용합니다.
    """
    merged_options = merge_extractor_options(extractor_options)
    merged_generator_options = merge_generator_options(generator_options)

    schemas = extract_schemas(input_data, merged_options, limits)

    dialect = merged_options.dialect
    if dialect == SQLDialect.AUTO:
        sql_text = input_data if isinstance(input_data, str) else bytes(input_data).decode('utf-8')
        dialect = TypeMapper.detect_dialect(sql_text)
        logger.info(f"dialect 자동 감지 결과: {dialect.value}")

    return generate_types(schemas, merged_generator_options, dialect, type_mapper)


def extract_schemas_from_file(
    file_path: str,
    options: OptionsLike = None,
    limits: OptionsLike = None
) -> Sequence[TableSchema]:
    """
    SQL 파일에서 테이블 스키마를 추출합니다.

    Raises:
        FileReadError: 파일을 읽을 수 없는 경우
    """
    merged_limits = merge_validation_limits(limits)
    merged_options = merge_extractor_options(options)
    sql_content = read_sql_file(file_path, merged_limits)
    return extract_schemas(sql_content, merged_options, merged_limits)


def generate_types_from_file(
    file_path: str,
    extractor_options: OptionsLike = None,
    generator_options: OptionsLike = None,
    limits: OptionsLike = None
) -> str:
    """SQL 파일을 읽어 TypeScript 선언을 생성합니다."""
    merged_limits = merge_validation_limits(limits)
    merged_extractor_options = merge_extractor_options(extractor_options)
    merged_generator_options = merge_generator_options(generator_options)
    sql_content = read_sql_file(file_path, merged_limits)
    return extract_and_generate(sql_content, merged_extractor_options, merged_generator_options, merged_limits)


__all__ = [
    'extract_schemas',
    'generate_types',
    'extract_and_generate',
    'extract_schemas_from_file',
    'generate_types_from_file',
    'TableExtractor',
    'TypeMapper',
    'TypeScriptGenerator',
    'ExtractorOptions',
    'GeneratorOptions',
    'ValidationLimits',
    'SchemaConfiguration',
    'SQLDialect',
    'FieldConstraint',
    'FieldConstraintType',
    'FieldSchema',
    'ForeignKeyReference',
    'TableConstraint',
    'TableConstraintType',
    'TableSchema',
    'SchemaExtractorError',
    'ParseError',
    'TypeMappingError',
    'ConfigurationError',
    'InputError',
    'FileReadError',
]
