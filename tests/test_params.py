"""Tests for search parameter parsing and paging arithmetic."""

import pytest

from fastapi_pagedquery import BadRequestError, PageInfo, SearchParams, Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


class TestFromQuery:
    def test_defaults(self, settings):
        """Should give empty lists, page 1 and 100 items when nothing is supplied."""
        params = SearchParams.from_query({}, settings)

        assert params.scopes == []
        assert params.terms == []
        assert params.sort == ""
        assert params.page_info == PageInfo(page_index=1, items_per_page=100)
        assert params.page_info.total_item_count == 0
        assert params.page_info.total_page_count == 0

    def test_splits_comma_separated_lists(self, settings):
        params = SearchParams.from_query(
            {"scopes": "active,recent", "terms": "red,blue widget", "sort": "name"}, settings
        )

        assert params.scopes == ["active", "recent"]
        assert params.terms == ["red", "blue widget"]
        assert params.sort == "name"

    def test_empty_strings_are_missing_values(self, settings):
        params = SearchParams.from_query(
            {"scopes": "", "terms": "", "sort": "", "pageIndex": "", "itemsPerPage": ""}, settings
        )

        assert params.scopes == []
        assert params.terms == []
        assert params.page_info.page_index == 1
        assert params.page_info.items_per_page == 100

    @pytest.mark.parametrize(
        "raw, expected",
        [("1", 20), ("19", 20), ("20", 20), ("21", 21), ("100", 100), ("250", 250), ("251", 250), ("10000", 250), ("-5", 20)],
    )
    def test_items_per_page_is_clamped(self, settings, raw, expected):
        params = SearchParams.from_query({"itemsPerPage": raw}, settings)
        assert params.page_info.items_per_page == expected

    def test_bounds_come_from_settings(self):
        settings = Settings(_env_file=None, min_items_per_page=5, max_items_per_page=10, default_items_per_page=7)

        assert SearchParams.from_query({}, settings).page_info.items_per_page == 7
        assert SearchParams.from_query({"itemsPerPage": "1"}, settings).page_info.items_per_page == 5
        assert SearchParams.from_query({"itemsPerPage": "50"}, settings).page_info.items_per_page == 10

    @pytest.mark.parametrize("field", ["pageIndex", "itemsPerPage"])
    def test_unparseable_integer_names_field_and_value(self, settings, field):
        with pytest.raises(BadRequestError) as exc_info:
            SearchParams.from_query({field: "two"}, settings)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == f"Could not parse {field}: two"
        assert exc_info.value.details == {"field": field, "value": "two"}

    @pytest.mark.parametrize("raw", ["0", "-1"])
    def test_page_index_must_be_positive(self, settings, raw):
        with pytest.raises(BadRequestError):
            SearchParams.from_query({"pageIndex": raw}, settings)

    @pytest.mark.parametrize(
        "field, raw",
        [
            ("pageIndex", "99999999999999999999"),
            ("pageIndex", "9223372036854775808"),
            ("itemsPerPage", "99999999999999999999"),
            ("itemsPerPage", "-9223372036854775809"),
        ],
    )
    def test_integer_beyond_64_bits_is_unparseable(self, settings, field, raw):
        with pytest.raises(BadRequestError) as exc_info:
            SearchParams.from_query({field: raw}, settings)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == f"Could not parse {field}: {raw}"
        assert exc_info.value.details == {"field": field, "value": raw}

    def test_offset_beyond_64_bits_is_unparseable(self, settings):
        raw = str(2 ** 62)

        with pytest.raises(BadRequestError) as exc_info:
            SearchParams.from_query({"pageIndex": raw, "itemsPerPage": "20"}, settings)

        assert exc_info.value.detail == f"Could not parse pageIndex: {raw}"

    def test_largest_offset_is_accepted(self, settings):
        page_index = (2 ** 63 - 1) // 20 + 1

        params = SearchParams.from_query({"pageIndex": str(page_index), "itemsPerPage": "20"}, settings)

        assert params.page_info.offset == (page_index - 1) * 20
        assert params.page_info.offset <= 2 ** 63 - 1

    def test_page_index_is_kept(self, settings):
        params = SearchParams.from_query({"pageIndex": "3", "itemsPerPage": "20"}, settings)

        assert params.page_info.page_index == 3
        assert params.page_info.offset == 40


class TestEnsureSingleScope:
    def test_exactly_one_scope_passes(self):
        SearchParams(scopes=["active"]).ensure_single_scope()

    def test_no_scope_fails(self):
        with pytest.raises(BadRequestError) as exc_info:
            SearchParams().ensure_single_scope()
        assert exc_info.value.detail == "No scope specified."

    def test_several_scopes_fail(self):
        with pytest.raises(BadRequestError) as exc_info:
            SearchParams(scopes=["active", "recent"]).ensure_single_scope()
        assert exc_info.value.detail == "We currently only support a single scope."


class TestTotalPages:
    @pytest.mark.parametrize(
        "count, items_per_page, pages",
        [(0, 20, 0), (1, 20, 1), (20, 20, 1), (100, 20, 5), (101, 20, 6), (45, 20, 3), (250, 250, 1)],
    )
    def test_page_count_rounds_up(self, count, items_per_page, pages):
        page_info = PageInfo(page_index=2, items_per_page=items_per_page).with_total(count)

        assert page_info.total_item_count == count
        assert page_info.total_page_count == pages
        assert page_info.page_index == 2
        assert page_info.items_per_page == items_per_page

    def test_with_total_pages_returns_new_params(self):
        params = SearchParams(scopes=["active"], page_info=PageInfo(page_index=2, items_per_page=20))

        updated = params.with_total_pages(45)

        assert updated is not params
        assert params.page_info.total_item_count == 0
        assert updated.scopes == ["active"]
        assert updated.page_info.total_page_count == 3

    def test_is_idempotent(self):
        params = SearchParams(page_info=PageInfo(items_per_page=20))

        once = params.with_total_pages(101)
        twice = once.with_total_pages(101)

        assert once.page_info == twice.page_info

    def test_negative_count_is_rejected(self):
        with pytest.raises(ValueError):
            PageInfo().with_total(-1)

    def test_serializes_with_wire_names(self):
        page_info = PageInfo(page_index=2, items_per_page=20).with_total(45)

        assert page_info.model_dump(by_alias=True) == {
            "pageIndex": 2,
            "itemsPerPage": 20,
            "totalItemCount": 45,
            "totalPageCount": 3,
        }
