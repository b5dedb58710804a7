import pytest

from cmsbase.domain.entities import NullsPosition, OrderBy, SortDirection


class TestOrderBy:
    def test_none_is_id_ascending_nulls_last(self):
        order = OrderBy.parse(None)
        assert order == OrderBy(field="id", direction=SortDirection.ASC, nulls=NullsPosition.LAST)

    def test_full_triple(self):
        order = OrderBy.parse(["title", "desc", "first"])
        assert order.field == "title"
        assert order.direction == SortDirection.DESC
        assert order.nulls == NullsPosition.FIRST

    def test_plain_string_is_a_field(self):
        assert OrderBy.parse("created_at").field == "created_at"

    def test_case_insensitive_direction(self):
        assert OrderBy.parse(("title", "DESC")).direction == SortDirection.DESC

    @pytest.mark.parametrize("value", [["title", "sideways"], ["title", "asc", "middle"]])
    def test_invalid_parts_fall_back_to_defaults(self, value):
        order = OrderBy.parse(value)
        assert order.direction == SortDirection.ASC
        assert order.nulls == NullsPosition.LAST

    def test_parse_returns_existing_instance(self):
        order = OrderBy(field="title")
        assert OrderBy.parse(order) is order
