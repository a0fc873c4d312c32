"""
스키마 추출/생성 과정에서 사용하는 예외 정의
"""

from typing import Optional


class SchemaExtractorError(Exception):
    """schema_extractor 예외의 기본 클래스"""
    pass


class ParseError(SchemaExtractorError):
    """
    CREATE TABLE 구조를 해석할 수 없을 때 발생하는 예외

    line/column은 SQL 원문 기준 위치, position은 컬럼 정의 목록에서의
    1부터 시작하는 정의 순번입니다.
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        position: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.position = position


class TypeMappingError(SchemaExtractorError):
    """strict 모드에서 SQL 타입을 매핑하지 못했을 때 발생하는 예외"""

    def __init__(self, message: str, sql_type: str, dialect: str):
        super().__init__(message)
        self.sql_type = sql_type
        self.dialect = dialect


class ConfigurationError(SchemaExtractorError, ValueError):
    """옵션 값이 잘못된 경우 발생하는 예외 (파싱 시작 전에 검출)"""
    pass


class InputError(SchemaExtractorError):
    """입력이 비어 있거나, 타입이 맞지 않거나, 안전하지 않은 경우 발생하는 예외"""
    pass


class FileReadError(SchemaExtractorError):
    """SQL 파일을 읽을 수 없을 때 발생하는 예외"""

    def __init__(self, message: str, file_path: str = ""):
        super().__init__(message)
        self.file_path = file_path
