"""Tests for field definition splitting and decomposition."""
import pytest

from schema_extractor.errors import ParseError
from schema_extractor.parser.ddl_types import FieldConstraint, FieldConstraintType, FieldSchema
from schema_extractor.parser.field_parser import FieldParser
from schema_extractor.parser.scanner import split_top_level


def constraint_types(field):
    return [c.type for c in field.constraints]


class TestParseField:
    def test_primary_key_field(self):
        field = FieldParser.parse_field("id INT PRIMARY KEY")
        assert field == FieldSchema(
            name="id",
            type="INT",
            nullable=False,
            constraints=(FieldConstraint(FieldConstraintType.PRIMARY_KEY),),
        )

    def test_unique_not_null_default_comment(self):
        field = FieldParser.parse_field('email VARCHAR(255) UNIQUE NOT NULL DEFAULT "" COMMENT "User email"')

        assert field.name == "email"
        assert field.type == "VARCHAR(255)"
        assert field.nullable is False
        assert field.default_value == ""
        assert field.comment == "User email"
        assert constraint_types(field) == [FieldConstraintType.UNIQUE]

    @pytest.mark.parametrize("definition", [
        "name VARCHAR(100)",
        "created_at DATETIME",
        "`order` INT",
        "price DECIMAL(10,2)",
    ])
    def test_bare_field_is_nullable_without_constraints(self, definition):
        field = FieldParser.parse_field(definition)
        assert field.nullable is True
        assert field.constraints == ()
        assert field.default_value is None
        assert field.comment is None

    @pytest.mark.parametrize("definition, expected_type", [
        ("amount DECIMAL(10,2) UNSIGNED NOT NULL", "DECIMAL(10,2) UNSIGNED"),
        ("counter INT UNSIGNED ZEROFILL", "INT UNSIGNED ZEROFILL"),
        ("ratio DOUBLE PRECISION", "DOUBLE PRECISION"),
        ("title CHARACTER VARYING(255) NOT NULL", "CHARACTER VARYING(255)"),
        ("tags TEXT[]", "TEXT[]"),
        ("created TIMESTAMP WITH TIME ZONE", "TIMESTAMP WITH TIME ZONE"),
        ("status ENUM('active', 'inactive') DEFAULT 'active'", "ENUM('active', 'inactive')"),
    ])
    def test_compound_types(self, definition, expected_type):
        assert FieldParser.parse_field(definition).type == expected_type

    @pytest.mark.parametrize("definition, expected_name", [
        ("`user id` INT", "user id"),
        ('"Order" INT', "Order"),
        ("plain_name TEXT", "plain_name"),
    ])
    def test_names_are_dequoted(self, definition, expected_name):
        assert FieldParser.parse_field(definition).name == expected_name

    def test_auto_increment(self):
        field = FieldParser.parse_field("id INT PRIMARY KEY AUTO_INCREMENT")
        assert constraint_types(field) == [FieldConstraintType.PRIMARY_KEY, FieldConstraintType.AUTO_INCREMENT]

    def test_sqlite_autoincrement(self):
        field = FieldParser.parse_field("id INTEGER PRIMARY KEY AUTOINCREMENT")
        assert FieldConstraintType.AUTO_INCREMENT in constraint_types(field)

    def test_constraints_in_any_order(self):
        first = FieldParser.parse_field("id INT AUTO_INCREMENT NOT NULL PRIMARY KEY")
        second = FieldParser.parse_field("id INT PRIMARY KEY NOT NULL AUTO_INCREMENT")
        assert set(constraint_types(first)) == set(constraint_types(second))
        assert first.nullable is second.nullable is False

    def test_inline_references(self):
        field = FieldParser.parse_field("user_id INT NOT NULL REFERENCES users(id)")
        assert field.constraints == (FieldConstraint(FieldConstraintType.FOREIGN_KEY, "users(id)"),)

    def test_check_with_nested_parentheses(self):
        field = FieldParser.parse_field("price DECIMAL(10,2) CHECK (price > (cost * 2))")
        assert field.constraints == (FieldConstraint(FieldConstraintType.CHECK, "price > (cost * 2)"),)

    def test_primary_key_implies_not_null(self):
        assert FieldParser.parse_field("code CHAR(3) PRIMARY KEY").nullable is False

    def test_keywords_inside_comment_are_ignored(self):
        field = FieldParser.parse_field("flag INT COMMENT 'not null primary key unique'")
        assert field.nullable is True
        assert field.constraints == ()
        assert field.comment == "not null primary key unique"

    def test_escaped_comment_quotes(self):
        field = FieldParser.parse_field("name VARCHAR(50) COMMENT 'User\\'s name'")
        assert field.comment == "User's name"

    @pytest.mark.parametrize("definition, expected", [
        ("n TEXT COMMENT 'it''s'", "it's"),
        ('n TEXT COMMENT "say ""hi"""', 'say "hi"'),
    ])
    def test_doubled_quote_comment(self, definition, expected):
        assert FieldParser.parse_field(definition).comment == expected


class TestDefaultValue:
    @pytest.mark.parametrize("definition, expected", [
        ("status VARCHAR(20) DEFAULT 'active'", "active"),
        ('status VARCHAR(20) DEFAULT "inactive"', "inactive"),
        ("note VARCHAR(20) DEFAULT NULL", "NULL"),
        ("title VARCHAR(20) DEFAULT ''", ""),
        ("qty INT DEFAULT 0 COMMENT 'quantity'", "0"),
        ("balance INT DEFAULT -1 NOT NULL", "-1"),
        ("is_active BOOLEAN DEFAULT TRUE", "TRUE"),
        ("label VARCHAR(50) DEFAULT 'hello, world' NOT NULL", "'hello, world'"),
        ("id CHAR(36) DEFAULT (UUID()) PRIMARY KEY", "(UUID())"),
        ("score INT DEFAULT (RAND() * 100) NOT NULL", "(RAND() * 100)"),
        ("created DATETIME DEFAULT NOW()", "NOW()"),
        ("created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP", "CURRENT_TIMESTAMP"),
        (
            "updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP",
            "CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP",
        ),
    ])
    def test_default_values(self, definition, expected):
        assert FieldParser.parse_field(definition).default_value == expected

    def test_default_null_keeps_field_nullable(self):
        field = FieldParser.parse_field("note VARCHAR(20) DEFAULT NULL")
        assert field.nullable is True

    def test_default_stops_before_unique(self):
        field = FieldParser.parse_field("code VARCHAR(10) DEFAULT 'x' UNIQUE")
        assert field.default_value == "x"
        assert constraint_types(field) == [FieldConstraintType.UNIQUE]

    def test_word_default_inside_comment(self):
        field = FieldParser.parse_field("mode INT COMMENT 'default is zero'")
        assert field.default_value is None


class TestParseFieldErrors:
    @pytest.mark.parametrize("definition", ["", "   ", None, 12])
    def test_invalid_input(self, definition):
        with pytest.raises(ParseError):
            FieldParser.parse_field(definition)

    @pytest.mark.parametrize("definition", [
        "PRIMARY KEY (id)",
        "FOREIGN KEY (user_id) REFERENCES users(id)",
        "UNIQUE (email)",
        "INDEX idx_name (name)",
        "KEY idx_name (name)",
        "CONSTRAINT pk PRIMARY KEY (id)",
        "CHECK (price > 0)",
    ])
    def test_table_level_constraint_rejected(self, definition):
        with pytest.raises(ParseError, match="Table-level constraint"):
            FieldParser.parse_field(definition)

    def test_missing_type(self):
        with pytest.raises(ParseError, match="Could not parse field definition"):
            FieldParser.parse_field("lonely")


class TestParseFields:
    def test_splits_and_skips_table_constraints(self):
        fields_string = (
            "id INT PRIMARY KEY, name VARCHAR(100) NOT NULL, PRIMARY KEY (id), "
            "INDEX idx_name (name), CONSTRAINT fk FOREIGN KEY (x) REFERENCES y(id), ,"
        )
        fields = FieldParser.parse_fields(fields_string)
        assert [f.name for f in fields] == ["id", "name"]

    def test_commas_inside_types_and_literals(self):
        fields = FieldParser.parse_fields(
            "price DECIMAL(10,2), status ENUM('a,b', 'c') DEFAULT 'a,b', note TEXT"
        )
        assert [f.name for f in fields] == ["price", "status", "note"]
        assert fields[1].default_value == "a,b"

    def test_field_count_matches_split_segments(self):
        fields_string = (
            "id INT, user_id INT NOT NULL, total DECIMAL(12,2), "
            "PRIMARY KEY (id), FOREIGN KEY (user_id) REFERENCES users(id), UNIQUE KEY uk (total)"
        )
        segments = [s for s in split_top_level(fields_string) if s]
        field_segments = [s for s in segments if not FieldParser.is_table_level_constraint(s)]
        assert len(FieldParser.parse_fields(fields_string)) == len(field_segments) == 3

    def test_error_carries_position(self):
        with pytest.raises(ParseError, match="Error parsing field 2") as exc_info:
            FieldParser.parse_fields("id INT, broken")
        assert exc_info.value.position == 2
        assert exc_info.value.line is None

    def test_empty_string(self):
        with pytest.raises(ParseError):
            FieldParser.parse_fields("   ")

    def test_deterministic(self):
        text = "id INT PRIMARY KEY, email VARCHAR(255) UNIQUE DEFAULT 'a@b.c' COMMENT 'mail'"
        assert FieldParser.parse_fields(text) == FieldParser.parse_fields(text)
