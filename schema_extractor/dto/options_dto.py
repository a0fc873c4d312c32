"""
추출기/생성기 옵션 DTO 정의
"""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

from schema_extractor.parser.ddl_types import SQLDialect

NamingConvention = Literal["camelCase", "PascalCase", "snake_case", "preserve"]
ExportType = Literal["interface", "type"]

VALID_DIALECTS = tuple(d.value for d in SQLDialect)
VALID_NAMING_CONVENTIONS = ("camelCase", "PascalCase", "snake_case", "preserve")
VALID_EXPORT_TYPES = ("interface", "type")

_IDENTIFIER_PATTERN = r'^[a-zA-Z_$][a-zA-Z0-9_$]*$'
_SUFFIX_PATTERN = r'^[a-zA-Z0-9_$]+$'


class ExtractorOptions(BaseModel):
    """SQL 파싱 옵션"""
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    dialect: SQLDialect = SQLDialect.AUTO
    include_comments: StrictBool = Field(default=True, alias="includeComments")
    case_sensitive: StrictBool = Field(default=False, alias="caseSensitive")

    @field_validator("dialect", mode="before")
    @classmethod
    def _normalize_dialect(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class GeneratorOptions(BaseModel):
    """TypeScript 생성 옵션"""
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    naming: NamingConvention = "preserve"
    optional_fields: StrictBool = Field(default=False, alias="optionalFields")
    prefix: str = Field(default="", pattern=r'^$|' + _IDENTIFIER_PATTERN)
    suffix: str = Field(default="", pattern=r'^$|' + _SUFFIX_PATTERN)
    include_comments: StrictBool = Field(default=True, alias="includeComments")
    export_type: ExportType = Field(default="interface", alias="exportType")


class ValidationLimits(BaseModel):
    """입력 검증 한도"""
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    max_sql_length: int = Field(default=50 * 1024 * 1024, gt=0, alias="maxSqlLength")
    max_file_size: int = Field(default=100 * 1024 * 1024, gt=0, alias="maxFileSize")
    max_memory_usage: int = Field(default=200 * 1024 * 1024, gt=0, alias="maxMemoryUsage")
    max_table_count: int = Field(default=1000, gt=0, alias="maxTableCount")
    max_field_count: int = Field(default=500, gt=0, alias="maxFieldCount")


DEFAULT_EXTRACTOR_OPTIONS = ExtractorOptions()
DEFAULT_GENERATOR_OPTIONS = GeneratorOptions()
DEFAULT_VALIDATION_LIMITS = ValidationLimits()


class SchemaConfiguration(BaseModel):
    """추출기/생성기 옵션과 검증 한도를 묶은 전체 설정"""
    model_config = ConfigDict(frozen=True, extra="forbid")

    extractor: ExtractorOptions = Field(default_factory=ExtractorOptions)
    generator: GeneratorOptions = Field(default_factory=GeneratorOptions)
    limits: ValidationLimits = Field(default_factory=ValidationLimits)
