"""
옵션 DTO 모듈
"""

from schema_extractor.dto.options_dto import (
    DEFAULT_EXTRACTOR_OPTIONS,
    DEFAULT_GENERATOR_OPTIONS,
    DEFAULT_VALIDATION_LIMITS,
    VALID_DIALECTS,
    VALID_EXPORT_TYPES,
    VALID_NAMING_CONVENTIONS,
    ExtractorOptions,
    GeneratorOptions,
    ValidationLimits,
)

__all__ = [
    'ExtractorOptions',
    'GeneratorOptions',
    'ValidationLimits',
    'DEFAULT_EXTRACTOR_OPTIONS',
    'DEFAULT_GENERATOR_OPTIONS',
    'DEFAULT_VALIDATION_LIMITS',
    'VALID_DIALECTS',
    'VALID_NAMING_CONVENTIONS',
    'VALID_EXPORT_TYPES',
]
