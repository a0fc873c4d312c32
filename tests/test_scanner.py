"""Tests for the delimiter-aware scanner shared by the parsers."""
import pytest

from schema_extractor.parser.scanner import (
    ScanState,
    find_matching_paren,
    iter_scan,
    mask_comments,
    mask_quoted,
    split_top_level,
    strip_identifier_quotes,
)


class TestIterScan:
    def test_tracks_paren_depth_outside_quotes(self):
        """Parentheses inside quotes do not change the depth."""
        depths = [depth for _, _, _, depth in iter_scan("(a '(' b)")]
        assert depths[0] == 1
        assert depths[-1] == 0
        assert max(depths) == 1

    def test_escaped_quote_does_not_toggle_state(self):
        """A backslash-escaped quote stays inside the literal."""
        states = [state for _, _, state, _ in iter_scan("'it\\'s'")]
        assert states[4] is ScanState.IN_SINGLE_QUOTE
        assert states[-1] is ScanState.NORMAL

    def test_other_quote_chars_inside_literal(self):
        """A double quote inside a single-quoted literal is plain text."""
        states = [state for _, _, state, _ in iter_scan("'say \"hi\"'")]
        assert all(state is ScanState.IN_SINGLE_QUOTE for state in states[:-1])

    def test_comments_reported_separately(self):
        scanned = list(iter_scan("a -- (x\nb"))
        comment_chars = ''.join(char for _, char, state, _ in scanned if state is ScanState.IN_COMMENT)
        assert comment_chars == "-- (x"
        assert scanned[-1][3] == 0


class TestSplitTopLevel:
    def test_split_on_top_level_commas(self):
        text = "id INT, price DECIMAL(10,2), status ENUM('a,b', 'c')"
        assert split_top_level(text) == ["id INT", "price DECIMAL(10,2)", "status ENUM('a,b', 'c')"]

    def test_blank_segments_are_returned(self):
        """Stray commas produce blank segments; a trailing comma does not."""
        assert split_top_level("a INT,, b INT,") == ["a INT", "", "b INT"]

    def test_comments_are_dropped(self):
        text = "id INT, -- primary, key\nname TEXT /* a, b */"
        assert split_top_level(text) == ["id INT", "name TEXT"]

    def test_rejoined_segments_reproduce_text(self):
        text = "id INT,\n  name VARCHAR(20) DEFAULT 'x, y',\n  PRIMARY KEY (id)"
        parts = split_top_level(text)
        assert ''.join(', '.join(parts).split()) == ''.join(text.split())


class TestFindMatchingParen:
    def test_nested(self):
        assert find_matching_paren("(a (b) c) d", 0) == 8

    def test_quoted_paren_ignored(self):
        assert find_matching_paren("(a ')' b)", 0) == 8

    def test_unbalanced_returns_minus_one(self):
        assert find_matching_paren("(abc", 0) == -1

    def test_index_not_on_paren(self):
        assert find_matching_paren("abc", 1) == -1


class TestMasking:
    def test_mask_quoted_keeps_length_and_quotes(self):
        masked = mask_quoted("COMMENT 'not null'")
        assert masked == "COMMENT '" + " " * 8 + "'"

    def test_mask_comments_keeps_newlines(self):
        assert mask_comments("a -- x\nb") == "a     \nb"

    def test_mask_block_comment(self):
        assert mask_comments("x /* y */ z") == "x" + " " * 9 + "z"


@pytest.mark.parametrize("identifier, expected", [
    ("`users`", "users"),
    ('"Order"', "Order"),
    ("'name'", "name"),
    ("plain", "plain"),
    ("  `spaced` ", "spaced"),
])
def test_strip_identifier_quotes(identifier, expected):
    assert strip_identifier_quotes(identifier) == expected
