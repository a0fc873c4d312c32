"""
이름 변환 유틸리티 모듈
테이블명/컬럼명을 camelCase, PascalCase, snake_case로 변환하는 함수들을 제공합니다.
"""

import re

NAMING_CONVENTIONS = ("camelCase", "PascalCase", "snake_case", "preserve")

_SEPARATOR_RUN = re.compile(r'[_-]+(.)?')
_NON_WORD = re.compile(r'\W+')
_WORD_BOUNDARY = re.compile(r' |\B(?=[A-Z])')
_IDENTIFIER = re.compile(r'^[a-zA-Z_$][a-zA-Z0-9_$]*$')
_IDENTIFIER_QUOTES = re.compile(r'[`\'"]')


def _upper_next(match: re.Match) -> str:
    char = match.group(1)
    return char.upper() if char else ''


def to_camel_case(name: str) -> str:
    """
    camelCase로 변환합니다.

    예:
        user_profiles -> userProfiles
        UserProfiles -> userProfiles
    """
    converted = _SEPARATOR_RUN.sub(_upper_next, name)
    return converted[:1].lower() + converted[1:] if converted[:1].isupper() else converted


def to_pascal_case(name: str) -> str:
    """
    PascalCase로 변환합니다.

    예:
        user_profiles -> UserProfiles
        order-items -> OrderItems
    """
    converted = _SEPARATOR_RUN.sub(_upper_next, name)
    return converted[:1].upper() + converted[1:] if converted[:1].islower() else converted


def to_snake_case(name: str) -> str:
    """
    snake_case로 변환합니다.

    예:
        userProfiles -> user_profiles
        OrderItems -> order_items
    """
    words = _WORD_BOUNDARY.split(_NON_WORD.sub(' ', name))
    return '_'.join(word.lower() for word in words)


def apply_naming_convention(name: str, convention: str) -> str:
    """naming convention을 적용합니다. 알 수 없는 값이면 원문을 유지합니다."""
    if convention == "camelCase":
        return to_camel_case(name)
    if convention == "PascalCase":
        return to_pascal_case(name)
    if convention == "snake_case":
        return to_snake_case(name)
    return name


def capitalize(name: str) -> str:
    """첫 글자만 대문자로 바꿉니다. (str.capitalize와 달리 나머지는 유지)"""
    return name[:1].upper() + name[1:]


def clean_sql_identifier(identifier: str) -> str:
    """식별자의 백틱과 따옴표를 제거합니다."""
    return _IDENTIFIER_QUOTES.sub('', identifier).strip()


def is_valid_identifier(name: str) -> bool:
    """TypeScript 식별자로 사용할 수 있는지 확인합니다."""
    return _IDENTIFIER.match(name) is not None


def sanitize_identifier(name: str) -> str:
    """
    TypeScript 식별자로 사용할 수 없는 문자를 '_'로 바꿉니다.
    숫자로 시작하면 앞에 '_'를 붙입니다.
    """
    sanitized = re.sub(r'[^a-zA-Z0-9_$]', '_', clean_sql_identifier(name))
    if not sanitized:
        return '_'
    if sanitized[0].isdigit():
        sanitized = '_' + sanitized
    return sanitized
