"""
TypeScript 코드 생성 모듈
TableSchema 목록을 TypeScript interface / type 선언으로 변환합니다.
"""

import re
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from schema_extractor.dto.options_dto import DEFAULT_GENERATOR_OPTIONS, GeneratorOptions
from schema_extractor.generator.name_converter import (
    apply_naming_convention,
    capitalize,
    is_valid_identifier,
    sanitize_identifier,
)
from schema_extractor.generator.type_mapping import DialectLike, TypeMapper
from schema_extractor.parser.ddl_types import FieldSchema, SQLDialect, TableSchema
from schema_extractor.utils.logger import setup_logger

logger = setup_logger("typescript_generator")

_TRAILING_WHITESPACE = re.compile(r'[ \t]+$', re.MULTILINE)
_BLANK_LINE_RUN = re.compile(r'\n{3,}')
_EMPTY_BODY = re.compile(r'\{\s*\n\s*\}')


class TypeScriptGenerator:
    """TableSchema -> TypeScript 선언 생성기"""

    def __init__(self, type_mapper: Optional[TypeMapper] = None, dialect: DialectLike = SQLDialect.MYSQL):
        self.type_mapper = type_mapper or TypeMapper()
        self.dialect = dialect

    def generate(self, schemas: Sequence[TableSchema], options: Optional[GeneratorOptions] = None) -> str:
        """
        테이블 스키마 목록으로 TypeScript 코드를 생성합니다.

        Args:
            schemas: 변환할 TableSchema 목록
            options: 생성 옵션 (None이면 기본값)

        Returns:
            생성된 TypeScript 코드. 스키마가 없으면 빈 문자열
        """
        if not schemas:
            return ''

        options = options or DEFAULT_GENERATOR_OPTIONS
        declarations = [self._generate_declaration(schema, options) for schema in schemas]

        header = self._generate_file_header(len(schemas)) if options.include_comments else ''
        code = header + '\n\n'.join(declarations)

        logger.info(f"TypeScript {options.export_type} {len(declarations)}개 생성 완료")
        return self.format_code(code)

    def _generate_declaration(self, schema: TableSchema, options: GeneratorOptions) -> str:
        declaration_name = self.format_declaration_name(schema.name, options)
        comment = self._generate_declaration_comment(schema) if options.include_comments else ''
        fields = '\n'.join(self._generate_field(field, options) for field in schema.fields)

        if options.export_type == 'type':
            opening = f"export type {declaration_name} = {{"
            closing = "};"
        else:
            opening = f"export interface {declaration_name} {{"
            closing = "}"

        return f"{comment}{opening}\n{fields}\n{closing}"

    def _generate_field(self, field: FieldSchema, options: GeneratorOptions) -> str:
        field_name = self.format_field_name(field.name, options)
        ts_type = self.type_mapper.map_type(field.type, self.dialect)

        optional = self.is_field_optional(field, options)
        if field.nullable and not optional:
            ts_type = f"{ts_type} | null"

        comment = ''
        if options.include_comments and field.comment:
            comment = self._generate_field_comment(field)

        return f"{comment}  {field_name}{'?' if optional else ''}: {ts_type};"

    @staticmethod
    def is_field_optional(field: FieldSchema, options: GeneratorOptions) -> bool:
        """optional_fields 옵션이 켜져 있거나 DEFAULT 값이 있으면 optional"""
        return options.optional_fields or field.default_value is not None

    @staticmethod
    def format_declaration_name(table_name: str, options: GeneratorOptions) -> str:
        """
        테이블명을 선언 이름으로 변환합니다.

        naming convention 적용 -> prefix(+ 첫 글자 대문자) -> suffix 순으로 처리하며,
        snake_case/preserve가 아니면 첫 글자를 대문자로 만듭니다.

        예 (naming=PascalCase, prefix="I"):
            user_profiles -> IUserProfiles
        """
        name = apply_naming_convention(table_name, options.naming)
        if options.prefix:
            name = options.prefix + capitalize(name)
        if options.suffix:
            name = name + options.suffix
        if options.naming not in ('snake_case', 'preserve'):
            name = capitalize(name)
        return sanitize_identifier(name)

    @staticmethod
    def format_field_name(field_name: str, options: GeneratorOptions) -> str:
        name = apply_naming_convention(field_name, options.naming)
        # 식별자로 쓸 수 없는 컬럼명은 따옴표로 감쌈
        if not is_valid_identifier(name):
            return "'" + name.replace("\\", "\\\\").replace("'", "\\'") + "'"
        return name

    @staticmethod
    def _generate_file_header(table_count: int) -> str:
        timestamp = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
        return (
            "/**\n"
            " * Auto-generated TypeScript interfaces from SQL schema\n"
            f" * Generated on: {timestamp}\n"
            f" * Total interfaces: {table_count}\n"
            " *\n"
            " * @warning This file is auto-generated. Do not edit manually.\n"
            " */\n\n"
        )

    @staticmethod
    def _generate_declaration_comment(schema: TableSchema) -> str:
        field_count = len(schema.fields)
        lines = [f"TypeScript interface for the '{schema.name}' table"]
        if schema.comment:
            lines.append(_escape_comment(schema.comment.strip()))
        lines.append(f"Generated from SQL schema with {field_count} field{'' if field_count == 1 else 's'}")
        body = '\n'.join(f" * {line}" for line in lines)
        return f"/**\n{body}\n */\n"

    @staticmethod
    def _generate_field_comment(field: FieldSchema) -> str:
        lines: List[str] = []
        comment = (field.comment or '').strip()
        if comment:
            lines.append(_escape_comment(comment))

        if field.constraints:
            lines.append("Constraints: " + ', '.join(c.type.value for c in field.constraints))

        nullable = ' (nullable)' if field.nullable else ''
        default = f" (default: {field.default_value})" if field.default_value else ''
        lines.append(_escape_comment(f"SQL type: {field.type}{nullable}{default}"))

        body = '\n'.join(f"   * {line}" for line in lines)
        return f"  /**\n{body}\n   */\n"

    @staticmethod
    def format_code(code: str) -> str:
        """
        생성된 코드를 정리합니다.
        줄 끝 공백 제거, 연속 빈 줄은 하나로, 파일 끝은 줄바꿈 하나.
        """
        formatted = _TRAILING_WHITESPACE.sub('', code)
        formatted = _BLANK_LINE_RUN.sub('\n\n', formatted)
        formatted = _EMPTY_BODY.sub('{}', formatted)
        return formatted.strip() + '\n'


def _escape_comment(text: str) -> str:
    # JSDoc 블록을 닫아버리지 않도록
    return text.replace('*/', '*\\/').replace('\n', ' ')
