"""
옵션/설정 처리 유틸리티

옵션은 None, dict, pydantic 모델 중 아무 형태로나 받을 수 있으며,
검증에 실패하면 허용 값 목록을 포함한 ConfigurationError로 변환됩니다.
설정 파일(YAML)과 환경 변수(.env 포함)에서 옵션을 읽는 기능도 제공합니다.
"""

import os
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from schema_extractor.dto.options_dto import (
    VALID_DIALECTS,
    VALID_EXPORT_TYPES,
    VALID_NAMING_CONVENTIONS,
    ExtractorOptions,
    GeneratorOptions,
    SchemaConfiguration,
    ValidationLimits,
)
from schema_extractor.errors import ConfigurationError
from schema_extractor.utils.logger import setup_logger

logger = setup_logger("config")

ENV_PREFIX = "SQL_SCHEMA_"

# 환경 변수 이름 -> (섹션, 옵션 이름)
ENV_OPTION_KEYS = {
    "DIALECT": ("extractor", "dialect"),
    "INCLUDE_COMMENTS": ("extractor", "include_comments"),
    "CASE_SENSITIVE": ("extractor", "case_sensitive"),
    "NAMING": ("generator", "naming"),
    "OPTIONAL_FIELDS": ("generator", "optional_fields"),
    "PREFIX": ("generator", "prefix"),
    "SUFFIX": ("generator", "suffix"),
    "EXPORT_TYPE": ("generator", "export_type"),
    "MAX_SQL_LENGTH": ("limits", "max_sql_length"),
    "MAX_FILE_SIZE": ("limits", "max_file_size"),
    "MAX_TABLE_COUNT": ("limits", "max_table_count"),
    "MAX_FIELD_COUNT": ("limits", "max_field_count"),
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_BOOL_OPTIONS = {"include_comments", "case_sensitive", "optional_fields"}

OptionsT = TypeVar("OptionsT", bound=BaseModel)
OptionsLike = Union[None, Mapping[str, Any], BaseModel]


def _merge_options(model: Type[OptionsT], options: OptionsLike, context: str) -> OptionsT:
    if options is None:
        return model()
    if isinstance(options, model):
        return options
    if isinstance(options, BaseModel):
        options = options.model_dump()
    if not isinstance(options, Mapping):
        raise ConfigurationError(f"Configuration error in {context}: options must be a mapping")
    try:
        return model.model_validate(dict(options))
    except ValidationError as e:
        raise create_configuration_error(e, context) from e


def merge_extractor_options(options: OptionsLike = None) -> ExtractorOptions:
    """
    추출 옵션을 검증하고 기본값과 합칩니다.

    예:
        merge_extractor_options({"dialect": "postgresql"})
        merge_extractor_options({"includeComments": False})

    Raises:
        ConfigurationError: 알 수 없는 dialect 등 옵션 값이 잘못된 경우
    """
    return _merge_options(ExtractorOptions, options, "extractor options")


def merge_generator_options(options: OptionsLike = None) -> GeneratorOptions:
    """
    생성 옵션을 검증하고 기본값과 합칩니다.

    Raises:
        ConfigurationError: naming, export_type, prefix/suffix 값이 잘못된 경우
    """
    return _merge_options(GeneratorOptions, options, "generator options")


def merge_validation_limits(limits: OptionsLike = None) -> ValidationLimits:
    """검증 한도를 기본값과 합칩니다. 일부 값만 지정해도 됩니다."""
    return _merge_options(ValidationLimits, limits, "validation limits")


def create_configuration_error(error: ValidationError, context: str) -> ConfigurationError:
    """pydantic 검증 오류를 허용 값 안내가 포함된 ConfigurationError로 변환합니다."""
    problems = []
    for item in error.errors():
        location = '.'.join(str(part) for part in item.get("loc", ())) or "options"
        problems.append(f"{location}: {item.get('msg')}")

    fields = ' '.join(problems).lower()
    suggestions = ''
    if 'dialect' in fields:
        suggestions = f"\nValid dialects: {', '.join(VALID_DIALECTS)}"
    elif 'naming' in fields:
        suggestions = f"\nValid naming conventions: {', '.join(VALID_NAMING_CONVENTIONS)}"
    elif 'export' in fields:
        suggestions = f"\nValid export types: {', '.join(VALID_EXPORT_TYPES)}"
    elif 'prefix' in fields or 'suffix' in fields:
        suggestions = "\nPrefix and suffix must be valid TypeScript identifiers"

    return ConfigurationError(f"Configuration error in {context}: {'; '.join(problems)}{suggestions}")


def create_configuration(
    extractor: OptionsLike = None,
    generator: OptionsLike = None,
    limits: OptionsLike = None
) -> SchemaConfiguration:
    """세 종류의 옵션을 검증하여 하나의 설정 객체로 묶습니다."""
    return SchemaConfiguration(
        extractor=merge_extractor_options(extractor),
        generator=merge_generator_options(generator),
        limits=merge_validation_limits(limits),
    )


def are_configurations_equal(first: Mapping[str, OptionsLike], second: Mapping[str, OptionsLike]) -> bool:
    """기본값을 채운 뒤 두 설정이 같은지 비교합니다. 잘못된 설정이 있으면 False."""
    try:
        return create_configuration(**first) == create_configuration(**second)
    except (ConfigurationError, TypeError):
        return False


def get_configuration_summary(extractor: OptionsLike = None, generator: OptionsLike = None) -> str:
    """현재 설정을 사람이 읽기 쉬운 문자열로 반환합니다."""
    extractor_options = merge_extractor_options(extractor)
    generator_options = merge_generator_options(generator)

    return (
        "Configuration Summary:\n"
        "Extractor:\n"
        f"  - Dialect: {extractor_options.dialect.value}\n"
        f"  - Include Comments: {extractor_options.include_comments}\n"
        f"  - Case Sensitive: {extractor_options.case_sensitive}\n"
        "\n"
        "Generator:\n"
        f"  - Naming Convention: {generator_options.naming}\n"
        f"  - Optional Fields: {generator_options.optional_fields}\n"
        f"  - Prefix: {generator_options.prefix or '(none)'}\n"
        f"  - Suffix: {generator_options.suffix or '(none)'}\n"
        f"  - Include Comments: {generator_options.include_comments}\n"
        f"  - Export Type: {generator_options.export_type}"
    )


def load_config_file(path: str) -> SchemaConfiguration:
    """
    YAML 설정 파일을 읽어 설정 객체를 만듭니다.

    파일 형식:
        extractor:
          dialect: postgresql
        generator:
          naming: PascalCase
          prefix: I
        limits:
          max_table_count: 100

    Raises:
        ConfigurationError: 파일이 없거나 YAML 형식이 잘못되었거나 옵션 값이 잘못된 경우
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")

    unknown = set(data) - {"extractor", "generator", "limits"}
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration sections in {path}: {', '.join(sorted(unknown))}"
        )

    logger.info(f"설정 파일 로드: {path}")
    return create_configuration(
        extractor=data.get("extractor"),
        generator=data.get("generator"),
        limits=data.get("limits"),
    )


def load_env_overrides(dotenv_path: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
    """
    .env 파일과 SQL_SCHEMA_* 환경 변수에서 옵션을 읽습니다.

    예: SQL_SCHEMA_DIALECT=postgresql, SQL_SCHEMA_OPTIONAL_FIELDS=true

    Returns:
        {"extractor": {...}, "generator": {...}, "limits": {...}} 형태의 dict.
        create_configuration(**overrides)로 바로 넘길 수 있습니다.
    """
    load_dotenv(dotenv_path)

    overrides: Dict[str, Dict[str, Any]] = {"extractor": {}, "generator": {}, "limits": {}}
    for env_key, (section, option) in ENV_OPTION_KEYS.items():
        raw = os.getenv(ENV_PREFIX + env_key)
        if raw is None:
            continue
        overrides[section][option] = _coerce_env_value(option, raw.strip())
        logger.debug(f"환경 변수 설정 적용: {ENV_PREFIX + env_key}")
    return overrides


def _coerce_env_value(option: str, raw: str) -> Any:
    # bool 옵션은 StrictBool이므로 문자열을 미리 변환
    if option in _BOOL_OPTIONS:
        lowered = raw.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    return raw
