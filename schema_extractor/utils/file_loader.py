"""
SQL 파일 로더
"""

import os
from typing import List, Optional

from schema_extractor.dto.options_dto import DEFAULT_VALIDATION_LIMITS, ValidationLimits
from schema_extractor.errors import FileReadError
from schema_extractor.utils.logger import setup_logger
from schema_extractor.utils.validation import validate_file_path, validate_file_size

logger = setup_logger("file_loader")

SQL_FILE_EXTENSIONS = (".sql", ".ddl")


def read_sql_file(
    path: str,
    limits: ValidationLimits = DEFAULT_VALIDATION_LIMITS,
    validate_path: bool = True,
    encoding: str = "utf-8"
) -> str:
    """
    SQL 파일을 읽어 문자열로 반환합니다.

    Args:
        path: 읽을 파일 경로
        limits: 파일 크기 한도 (max_file_size)
        validate_path: False면 경로 안전성 검사를 건너뜀
        encoding: 파일 인코딩

    Raises:
        FileReadError: 경로가 안전하지 않거나, 파일이 없거나, 너무 크거나,
            디코딩할 수 없거나, 비어 있거나, 바이너리로 보이는 경우
    """
    if validate_path:
        validate_file_path(path)

    if not os.path.exists(path):
        raise FileReadError('File does not exist or is not readable', path)
    if not os.path.isfile(path):
        raise FileReadError('Path is not a file', path)

    validate_file_size(os.path.getsize(path), limits, path)

    try:
        with open(path, "r", encoding=encoding) as f:
            content = f.read()
    except UnicodeDecodeError as e:
        raise FileReadError(f"Failed to decode file as {encoding}: {e.reason}", path) from e
    except OSError as e:
        raise FileReadError(f"Failed to read file: {e.strerror or e}", path) from e

    validate_file_content(content, path)
    logger.info(f"SQL 파일 로드: {path} ({len(content)} chars)")
    return content


def validate_file_content(content: str, path: str = '') -> None:
    """빈 파일과 null 바이트가 많은(바이너리로 보이는) 파일을 거부합니다."""
    if not content:
        raise FileReadError('File is empty', path)

    if content.count('\0') > len(content) * 0.01:
        raise FileReadError('File appears to contain binary data', path)


def list_sql_files(directory: str) -> List[str]:
    """디렉토리의 .sql / .ddl 파일 경로를 이름순으로 반환합니다."""
    if not os.path.isdir(directory):
        return []
    return sorted(
        os.path.join(directory, fn)
        for fn in os.listdir(directory)
        if fn.lower().endswith(SQL_FILE_EXTENSIONS)
    )


def read_sql_files(paths: List[str], limits: Optional[ValidationLimits] = None) -> List[str]:
    """
    여러 SQL 파일을 순서대로 읽습니다. 하나라도 실패하면 즉시 FileReadError를 발생시킵니다.
    """
    if not paths:
        raise FileReadError('File paths must be a non-empty list', '')
    return [read_sql_file(path, limits or DEFAULT_VALIDATION_LIMITS) for path in paths]
