"""Tests for CREATE TABLE statement extraction."""
import pytest

from schema_extractor.errors import ParseError
from schema_extractor.parser.sql_parser import SQLParser


class TestParse:
    def test_simple_statement(self):
        """Table name and the raw field list are captured."""
        tables = SQLParser.parse("CREATE TABLE users (id INT PRIMARY KEY, name VARCHAR(100));")

        assert len(tables) == 1
        assert tables[0].name == "users"
        assert tables[0].fields_string == "id INT PRIMARY KEY, name VARCHAR(100)"
        assert tables[0].line_number == 1

    @pytest.mark.parametrize("sql, expected", [
        ("CREATE TABLE `user data` (id INT);", "user data"),
        ('CREATE TABLE IF NOT EXISTS "orders" (id INT);', "orders"),
        ("create table if not exists items (id INT);", "items"),
    ])
    def test_table_name_forms(self, sql, expected):
        assert SQLParser.parse(sql)[0].name == expected

    def test_nested_parentheses_are_balanced(self):
        """DECIMAL(10,2) and ENUM(...) do not truncate the field list."""
        body = "price DECIMAL(10,2) NOT NULL, status ENUM('a', 'b)') DEFAULT 'a', note TEXT"
        tables = SQLParser.parse(f"CREATE TABLE t ({body});")
        assert tables[0].fields_string == body

    @pytest.mark.parametrize("depth", [1, 2, 3, 5])
    def test_captured_text_equals_original_substring(self, depth):
        nested = "(" * depth + "1" + ")" * depth
        body = f"a INT DEFAULT {nested}, b INT CHECK (b > {nested})"
        captured = SQLParser.parse(f"CREATE TABLE t ({body}) ENGINE=InnoDB;")[0].fields_string
        assert captured == body
        assert captured.count("(") == captured.count(")")

    def test_trailing_options_are_discarded(self):
        sql = (
            "CREATE TABLE t (id INT) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 "
            "COLLATE=utf8mb4_unicode_ci AUTO_INCREMENT=100 COMMENT='User table';\n"
            "CREATE TABLE u (id INT);"
        )
        tables = SQLParser.parse(sql)

        assert [t.name for t in tables] == ["t", "u"]
        assert tables[0].comment == "User table"
        assert tables[0].original_match.endswith("COMMENT='User table';")
        assert tables[1].comment is None

    def test_without_rowid(self):
        tables = SQLParser.parse("CREATE TABLE t (id INTEGER PRIMARY KEY) WITHOUT ROWID;")
        assert tables[0].original_match.endswith("WITHOUT ROWID;")

    def test_unrecognized_trailing_text_is_ignored(self):
        tables = SQLParser.parse("CREATE TABLE t (id INT) PARTITION BY HASH(id);")
        assert tables[0].fields_string == "id INT"

    def test_line_numbers(self):
        sql = "-- header\nCREATE TABLE a (id INT);\n\nCREATE TABLE b (\n  id INT\n);"
        tables = SQLParser.parse(sql)
        assert [t.line_number for t in tables] == [2, 4]

    def test_statements_in_comments_are_ignored(self):
        sql = "/* CREATE TABLE ghost (id INT); */\n-- CREATE TABLE ghost2 (id INT);\nCREATE TABLE real_table (id INT);"
        tables = SQLParser.parse(sql)
        assert [t.name for t in tables] == ["real_table"]
        assert tables[0].line_number == 3

    def test_sample_schema(self, sample_sql):
        tables = SQLParser.parse(sample_sql)
        assert [t.name for t in tables] == ["users", "categories", "products", "orders", "order_items"]

    def test_unbalanced_parentheses(self):
        with pytest.raises(ParseError, match="Unbalanced parentheses"):
            SQLParser.parse("CREATE TABLE t (id INT")

    def test_empty_field_list(self):
        with pytest.raises(ParseError, match="No field definitions"):
            SQLParser.parse("CREATE TABLE t ();")

    @pytest.mark.parametrize("sql", ["", "   \n\t", "SELECT * FROM users;"])
    def test_invalid_input_raises(self, sql):
        with pytest.raises(ParseError):
            SQLParser.parse(sql)

    def test_non_string_input_raises(self):
        with pytest.raises(ParseError, match="must be a string"):
            SQLParser.parse(None)


class TestHasCreateTableStatements:
    @pytest.mark.parametrize("sql", ["", "   ", "SELECT 1;", None, 42, "-- CREATE TABLE t (id INT);"])
    def test_false_without_raising(self, sql):
        assert SQLParser.has_create_table_statements(sql) is False

    def test_true_for_statement(self):
        assert SQLParser.has_create_table_statements("create table t (id int);") is True


def test_extract_create_table_statements():
    sql = "CREATE TABLE a (id INT);\nCREATE TABLE b (id INT) ENGINE=InnoDB;"
    statements = SQLParser.extract_create_table_statements(sql)
    assert statements == ["CREATE TABLE a (id INT);", "CREATE TABLE b (id INT) ENGINE=InnoDB;"]
