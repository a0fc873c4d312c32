"""Shared pytest fixtures for all tests."""
import os

import pytest

from schema_extractor.generator.type_mapping import TypeMapper

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


@pytest.fixture(scope="session")
def sample_sql_path():
    """Path of the sample e-commerce schema (5 MySQL tables)."""
    return os.path.join(FIXTURES_DIR, "sample_schema.sql")


@pytest.fixture(scope="session")
def sample_sql(sample_sql_path):
    with open(sample_sql_path, "r", encoding="utf-8") as f:
        return f.read()


@pytest.fixture
def type_mapper():
    return TypeMapper()


@pytest.fixture
def users_posts_sql():
    return (
        "CREATE TABLE users (id INT PRIMARY KEY); "
        "CREATE TABLE posts (id INT PRIMARY KEY, user_id INT, "
        "FOREIGN KEY (user_id) REFERENCES users(id));"
    )
