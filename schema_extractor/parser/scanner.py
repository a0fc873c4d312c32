"""
구분자 인식 스캐너

CREATE TABLE 본문은 문법 파서 대신 문자 단위 스캔으로 다룹니다.
따옴표 상태(NORMAL / 작은따옴표 / 큰따옴표 / 백틱 / 주석)와 괄호 깊이를
따로 추적하는 작은 상태 머신을 모든 스캔이 공유합니다.
"""

from enum import Enum
from typing import Iterator, List, Tuple


class ScanState(Enum):
    NORMAL = "normal"
    IN_SINGLE_QUOTE = "single_quote"
    IN_DOUBLE_QUOTE = "double_quote"
    IN_BACKTICK = "backtick"
    IN_COMMENT = "comment"


_QUOTE_STATES = {
    "'": ScanState.IN_SINGLE_QUOTE,
    '"': ScanState.IN_DOUBLE_QUOTE,
    '`': ScanState.IN_BACKTICK,
}

_IDENTIFIER_QUOTES = ('`', '"', "'")


def iter_scan(text: str, skip_comments: bool = True) -> Iterator[Tuple[int, str, ScanState, int]]:
    """
    텍스트를 한 글자씩 스캔하며 (index, char, state, depth)를 반환합니다.

    state와 depth는 해당 글자를 처리한 *이후*의 값입니다.
    여는 따옴표는 따옴표 상태로, 닫는 따옴표는 NORMAL 상태로 보고됩니다.
    주석(-- 또는 /* */) 구간의 글자는 IN_COMMENT 상태로 보고되며
    괄호 깊이에 영향을 주지 않습니다.

    Args:
        text: 스캔할 텍스트
        skip_comments: False이면 주석을 일반 텍스트로 취급

    Yields:
        (index, char, state, depth) 튜플
    """
    state = ScanState.NORMAL
    depth = 0
    length = len(text)
    i = 0

    while i < length:
        char = text[i]
        prev_char = text[i - 1] if i > 0 else ''

        if state is ScanState.NORMAL and skip_comments:
            comment_end = -1
            if text.startswith('--', i):
                comment_end = text.find('\n', i)
                if comment_end == -1:
                    comment_end = length
            elif text.startswith('/*', i):
                comment_end = text.find('*/', i + 2)
                comment_end = length if comment_end == -1 else comment_end + 2

            if comment_end != -1:
                for j in range(i, comment_end):
                    yield j, text[j], ScanState.IN_COMMENT, depth
                i = comment_end
                continue

        if char in _QUOTE_STATES and prev_char != '\\':
            quote_state = _QUOTE_STATES[char]
            if state is ScanState.NORMAL:
                state = quote_state
            elif state is quote_state:
                state = ScanState.NORMAL
        elif state is ScanState.NORMAL:
            if char == '(':
                depth += 1
            elif char == ')':
                depth -= 1

        yield i, char, state, depth
        i += 1


def split_top_level(text: str, separator: str = ',') -> List[str]:
    """
    최상위(괄호 깊이 0, 따옴표 밖) 구분자로 텍스트를 나눕니다.

    주석은 공백 하나로 치환되어 결과에 포함되지 않습니다.
    빈 조각도 그대로 반환하므로 호출 측에서 걸러야 합니다.

    Args:
        text: 컬럼 정의 목록 등 분리할 텍스트
        separator: 구분 문자

    Returns:
        strip된 조각 리스트
    """
    parts: List[str] = []
    current: List[str] = []
    in_comment = False

    for _, char, state, depth in iter_scan(text):
        if state is ScanState.IN_COMMENT:
            if not in_comment:
                current.append(' ')
                in_comment = True
            continue
        in_comment = False

        if char == separator and state is ScanState.NORMAL and depth == 0:
            parts.append(''.join(current).strip())
            current = []
            continue
        current.append(char)

    tail = ''.join(current).strip()
    if tail:
        parts.append(tail)
    return parts


def find_matching_paren(text: str, open_index: int) -> int:
    """
    open_index 위치의 '('와 짝이 맞는 ')'의 위치를 찾습니다.

    Returns:
        닫는 괄호의 index, 끝까지 닫히지 않으면 -1
    """
    if open_index < 0 or open_index >= len(text) or text[open_index] != '(':
        return -1

    for i, char, state, depth in iter_scan(text[open_index:]):
        if char == ')' and state is ScanState.NORMAL and depth == 0:
            return open_index + i
    return -1


def mask_quoted(text: str, filler: str = ' ') -> str:
    """
    따옴표 안의 내용을 filler로 채운 같은 길이의 문자열을 반환합니다.

    따옴표 문자 자체와 주석은 그대로 둡니다. 키워드 검색이 문자열 리터럴
    안의 단어(COMMENT '... not null ...' 등)에 걸리지 않게 할 때 사용합니다.
    """
    masked = list(text)
    for i, char, state, _ in iter_scan(text, skip_comments=False):
        if state in (ScanState.IN_SINGLE_QUOTE, ScanState.IN_DOUBLE_QUOTE, ScanState.IN_BACKTICK):
            if char not in _QUOTE_STATES or _QUOTE_STATES[char] is not state:
                masked[i] = filler
    return ''.join(masked)


def mask_comments(text: str) -> str:
    """
    주석 구간을 공백으로 채운 같은 길이의 문자열을 반환합니다.
    줄바꿈은 유지되므로 줄 번호 계산에 영향을 주지 않습니다.
    """
    masked = list(text)
    for i, char, state, _ in iter_scan(text):
        if state is ScanState.IN_COMMENT and char != '\n':
            masked[i] = ' '
    return ''.join(masked)


def strip_identifier_quotes(identifier: str) -> str:
    """`name`, "name", 'name' 형태의 식별자에서 따옴표를 제거합니다."""
    cleaned = identifier.strip()
    if len(cleaned) >= 2 and cleaned[0] in _IDENTIFIER_QUOTES and cleaned[-1] == cleaned[0]:
        cleaned = cleaned[1:-1]
    return cleaned.strip()
