"""Tests for TableSchema assembly and table-level constraint scanning."""
import dataclasses
import logging

import pytest

from schema_extractor.dto.options_dto import ExtractorOptions, ValidationLimits
from schema_extractor.errors import ParseError
from schema_extractor.parser.ddl_types import (
    FieldConstraintType,
    ForeignKeyReference,
    TableConstraint,
    TableConstraintType,
)
from schema_extractor.parser.table_extractor import TableExtractor


class TestExtractTables:
    def test_users_and_posts(self, users_posts_sql):
        tables = TableExtractor.extract_tables(users_posts_sql)

        assert [t.name for t in tables] == ["users", "posts"]
        posts = tables[1]
        assert [f.name for f in posts.fields] == ["id", "user_id"]
        assert posts.constraints == (
            TableConstraint(
                type=TableConstraintType.FOREIGN_KEY,
                fields=("user_id",),
                reference=ForeignKeyReference(table="users", fields=("id",)),
            ),
        )

    def test_simple_table_fields(self):
        sql = """
            CREATE TABLE users (
              id INT PRIMARY KEY,
              name VARCHAR(100) NOT NULL,
              email VARCHAR(255) UNIQUE
            );
        """
        table = TableExtractor.extract_single_table(sql)

        assert table.name == "users"
        assert [(f.name, f.type, f.nullable) for f in table.fields] == [
            ("id", "INT", False),
            ("name", "VARCHAR(100)", False),
            ("email", "VARCHAR(255)", True),
        ]
        assert table.fields[2].constraints[0].type == FieldConstraintType.UNIQUE
        assert table.constraints == ()

    def test_composite_primary_key(self):
        sql = "CREATE TABLE user_roles (user_id INT, role_id INT, PRIMARY KEY (user_id, role_id));"
        table = TableExtractor.extract_single_table(sql)

        assert len(table.fields) == 2
        assert table.constraints == (
            TableConstraint(type=TableConstraintType.PRIMARY_KEY, fields=("user_id", "role_id")),
        )
        assert table.primary_keys == ("user_id", "role_id")

    def test_unique_and_index_clauses(self):
        sql = """
            CREATE TABLE accounts (
              id INT,
              email VARCHAR(255),
              UNIQUE KEY uk_email (email),
              KEY idx_email (email),
              INDEX idx_id (`id`)
            );
        """
        table = TableExtractor.extract_single_table(sql)

        assert [f.name for f in table.fields] == ["id", "email"]
        assert [(c.type, c.fields, c.name) for c in table.constraints] == [
            (TableConstraintType.UNIQUE, ("email",), "uk_email"),
            (TableConstraintType.INDEX, ("email",), "idx_email"),
            (TableConstraintType.INDEX, ("id",), "idx_id"),
        ]

    def test_named_foreign_key_with_quoted_identifiers(self):
        sql = """
            CREATE TABLE `orders` (
              `id` INT NOT NULL,
              `user_id` INT NOT NULL,
              CONSTRAINT `fk_user` FOREIGN KEY (`user_id`) REFERENCES `users` (`id`) ON DELETE CASCADE
            ) ENGINE=InnoDB;
        """
        table = TableExtractor.extract_single_table(sql)

        assert table.name == "orders"
        assert [f.name for f in table.fields] == ["id", "user_id"]
        assert table.constraints == (
            TableConstraint(
                type=TableConstraintType.FOREIGN_KEY,
                fields=("user_id",),
                reference=ForeignKeyReference(table="users", fields=("id",)),
                name="fk_user",
            ),
        )

    def test_multiple_foreign_keys(self, sample_sql):
        tables = {t.name: t for t in TableExtractor.extract_tables(sample_sql)}

        order_items = tables["order_items"]
        assert [(c.fields, c.reference.table) for c in order_items.constraints] == [
            (("order_id",), "orders"),
            (("product_id",), "products"),
        ]
        assert len(tables["users"].fields) == 10
        assert tables["categories"].constraints[0].reference == ForeignKeyReference("categories", ("id",))

    def test_sample_schema_defaults(self, sample_sql):
        tables = {t.name: t for t in TableExtractor.extract_tables(sample_sql)}

        orders = tables["orders"]
        assert orders.get_field("status").default_value == "pending"
        assert orders.get_field("status").type.startswith("ENUM(")
        assert orders.get_field("updated_at").default_value == "CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP"
        assert orders.get_field("order_number").nullable is False

    def test_primary_key_fields_are_never_nullable(self, sample_sql):
        for table in TableExtractor.extract_tables(sample_sql):
            for field in table.fields:
                if field.has_constraint(FieldConstraintType.PRIMARY_KEY):
                    assert field.nullable is False

    def test_constraint_fields_never_empty(self):
        sql = "CREATE TABLE t (a INT, b INT, PRIMARY KEY (a, , b), UNIQUE (a,));"
        table = TableExtractor.extract_single_table(sql)
        for constraint in table.constraints:
            assert all(constraint.fields)
        assert table.constraints[0].fields == ("a", "b")

    def test_table_comment(self):
        table = TableExtractor.extract_single_table(
            "CREATE TABLE t (id INT COMMENT 'identifier') COMMENT='Stores things';"
        )
        assert table.comment == "Stores things"
        assert table.fields[0].comment == "identifier"

    def test_table_comment_with_doubled_quote(self):
        table = TableExtractor.extract_single_table("CREATE TABLE t (id INT) COMMENT='Owner''s table';")
        assert table.comment == "Owner's table"

    def test_include_comments_false(self):
        table = TableExtractor.extract_single_table(
            "CREATE TABLE t (id INT COMMENT 'identifier') COMMENT='Stores things';",
            ExtractorOptions(include_comments=False),
        )
        assert table.comment is None
        assert table.fields[0].comment is None

    def test_result_is_immutable(self, users_posts_sql):
        table = TableExtractor.extract_tables(users_posts_sql)[0]
        with pytest.raises(dataclasses.FrozenInstanceError):
            table.name = "other"
        assert isinstance(table.fields, tuple)

    def test_deterministic(self, sample_sql):
        assert TableExtractor.extract_tables(sample_sql) == TableExtractor.extract_tables(sample_sql)

    def test_duplicate_table_warning(self, caplog):
        sql = "CREATE TABLE users (id INT); CREATE TABLE USERS (id INT);"
        with caplog.at_level(logging.WARNING):
            tables = TableExtractor.extract_tables(sql)
        assert len(tables) == 2
        assert "USERS" in caplog.text

    def test_to_dict(self, users_posts_sql):
        posts = TableExtractor.extract_tables(users_posts_sql)[1]
        data = posts.to_dict()
        assert data["constraints"][0] == {
            "type": "FOREIGN_KEY",
            "fields": ["user_id"],
            "reference": {"table": "users", "fields": ["id"]},
            "name": None,
        }
        assert data["fields"][0]["constraints"] == [{"type": "PRIMARY_KEY", "value": None}]


class TestExtractTablesErrors:
    def test_table_count_limit(self, users_posts_sql):
        with pytest.raises(ParseError, match="Table count 2 exceeds"):
            TableExtractor.extract_tables(users_posts_sql, limits=ValidationLimits(max_table_count=1))

    def test_field_count_limit(self):
        sql = "CREATE TABLE wide (a INT, b INT);"
        with pytest.raises(ParseError, match="Field count 2 in table 'wide'"):
            TableExtractor.extract_tables(sql, limits=ValidationLimits(max_field_count=1))

    def test_error_wrapped_with_table_and_line(self):
        sql = "CREATE TABLE ok (id INT);\nCREATE TABLE users (\n  id INT,\n  broken\n);"
        with pytest.raises(ParseError, match="Error extracting table 'users'") as exc_info:
            TableExtractor.extract_tables(sql)
        assert exc_info.value.line == 2
        assert exc_info.value.position == 2

    def test_only_constraints(self):
        with pytest.raises(ParseError, match="No field definitions"):
            TableExtractor.extract_tables("CREATE TABLE t (PRIMARY KEY (id));")

    @pytest.mark.parametrize("sql", ["", "   ", "SELECT 1;"])
    def test_invalid_sql(self, sql):
        with pytest.raises(ParseError):
            TableExtractor.extract_tables(sql)

    def test_single_table_with_two_tables(self, users_posts_sql):
        with pytest.raises(ParseError, match="Expected single table, found 2 tables"):
            TableExtractor.extract_single_table(users_posts_sql)


class TestHasValidTables:
    def test_valid(self, users_posts_sql):
        assert TableExtractor.has_valid_tables(users_posts_sql) is True

    @pytest.mark.parametrize("sql", ["", "SELECT 1;", "CREATE TABLE t (broken);", None])
    def test_invalid_never_raises(self, sql):
        assert TableExtractor.has_valid_tables(sql) is False


class TestExtractTableConstraints:
    @pytest.mark.parametrize("separator", ["\n    ", "  ", "\t"])
    def test_unique_key_counted_once(self, separator):
        fields_string = f"id INT,\n  email VARCHAR(9),\n  UNIQUE{separator}KEY uk_email (email)"
        constraints = TableExtractor.extract_table_constraints(fields_string)
        assert [(c.type, c.fields, c.name) for c in constraints] == [
            (TableConstraintType.UNIQUE, ("email",), "uk_email"),
        ]

    def test_inline_unique_followed_by_check(self):
        fields_string = "id INT, code VARCHAR(10) UNIQUE CHECK (length(code) > 2)"
        assert TableExtractor.extract_table_constraints(fields_string) == []

    def test_unique_index_with_name(self):
        constraints = TableExtractor.extract_table_constraints("a INT, UNIQUE INDEX ux_a (a), INDEX ix_a (a)")
        assert [(c.type, c.name) for c in constraints] == [
            (TableConstraintType.UNIQUE, "ux_a"),
            (TableConstraintType.INDEX, "ix_a"),
        ]


def test_parse_field_list():
    assert TableExtractor.parse_field_list("`a`, \"b\" , c,") == ["a", "b", "c"]
    assert TableExtractor.parse_field_list(None) == []
