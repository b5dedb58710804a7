import pytest
from sqlalchemy import JSON, column
from sqlalchemy.dialects import postgresql, sqlite

from cmsbase.infrastructure.persistence.repositories.json_sql import (
    JsonExpressions,
    object_key,
    sqlite_json_path,
)

data = column("data", JSON)


def compile_sql(expr, dialect) -> str:
    return str(expr.compile(dialect=dialect))


class TestObjectKey:
    def test_valid_key_is_inlined(self):
        assert compile_sql(object_key("column_order"), sqlite.dialect()) == "'column_order'"

    @pytest.mark.parametrize("key", ["Title", "a'b", "1st", "a-b", ""])
    def test_rejects_unsafe_keys(self, key):
        with pytest.raises(ValueError):
            object_key(key)


class TestSqliteExpressions:
    json = JsonExpressions("sqlite")

    def test_json_path_strips_quotes(self):
        assert sqlite_json_path("title") == '$."title"'
        assert sqlite_json_path('ti"tle') == '$."title"'

    def test_build_object(self):
        sql = compile_sql(self.json.build_object([("id", column("id"))]), sqlite.dialect())
        assert sql.startswith("json_object('id', id")

    def test_aggregate(self):
        assert "json_group_array" in compile_sql(self.json.aggregate(data), sqlite.dialect())

    def test_text_value(self):
        assert "json_extract" in compile_sql(self.json.text_value(data, "title"), sqlite.dialect())

    def test_has_key(self):
        sql = compile_sql(self.json.has_key(data, "title"), sqlite.dialect())
        assert "json_type" in sql
        assert "IS NOT NULL" in sql

    def test_remove_key(self):
        assert "json_remove" in compile_sql(self.json.remove_key(data, "title"), sqlite.dialect())

    def test_embed_wraps_in_json(self):
        assert compile_sql(self.json.embed(data), sqlite.dialect()) == "json(data)"


class TestPostgresExpressions:
    json = JsonExpressions("postgresql")

    def test_build_object(self):
        sql = compile_sql(self.json.build_object([("id", column("id"))]), postgresql.dialect())
        assert sql.startswith("json_build_object('id', id")

    def test_aggregate_with_order(self):
        sql = compile_sql(self.json.aggregate(data, [column("id")]), postgresql.dialect())
        assert "json_agg" in sql
        assert "ORDER BY id" in sql

    def test_text_value_uses_arrow_operator(self):
        assert "->>" in compile_sql(self.json.text_value(data, "title"), postgresql.dialect())

    def test_has_key_uses_question_operator(self):
        assert "?" in compile_sql(self.json.has_key(data, "title"), postgresql.dialect())

    def test_remove_key_uses_minus_operator(self):
        assert "data -" in compile_sql(self.json.remove_key(data, "title"), postgresql.dialect())

    def test_embed_is_a_no_op(self):
        assert self.json.embed(data) is data
