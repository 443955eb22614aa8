"""
Unit tests for the filter coordinator and the Query model.
"""
import pytest
from hot22_dashboard.models.query import Query, SortDirection
from hot22_dashboard.services import filter_coordinator


class TestFilterCoordinator:
    """Test suite for query transformations."""

    @pytest.fixture
    def query(self):
        """Query sitting on page 4 with one filter and a sort."""
        return Query.create(
            page=4,
            page_size=25,
            sort_key="DAIS",
            sort_direction=SortDirection.DESC,
            filters={"agentCode": "1234567"}
        )

    def test_apply_filter_resets_page(self, query):
        result = filter_coordinator.apply_filter(query, "passengerName", "SMITH")

        assert result.page == 1
        assert result.filter_map == {"agentCode": "1234567", "passengerName": "SMITH"}
        assert result.page_size == 25

    def test_apply_filter_same_value_still_resets_page(self, query):
        result = filter_coordinator.apply_filter(query, "agentCode", "1234567")
        assert result.page == 1

    def test_set_page_keeps_other_fields(self, query):
        result = filter_coordinator.apply_filter(query, "page", 7)

        assert result.page == 7
        assert result.filters == query.filters
        assert result.sort_key == "DAIS"

    def test_empty_value_removes_filter(self, query):
        result = filter_coordinator.apply_filter(query, "agentCode", "  ")

        assert result.filter_map == {}
        assert result.page == 1

    def test_apply_filters_merges_and_resets(self, query):
        result = filter_coordinator.apply_filters(query, {"startDate": "2024-01-01", "endDate": "2024-01-31"})

        assert result.page == 1
        assert result.filter_map == {
            "agentCode": "1234567",
            "startDate": "2024-01-01",
            "endDate": "2024-01-31",
        }

    def test_apply_filters_with_page_and_filter_resets(self, query):
        result = filter_coordinator.apply_filters(query, {"page": 9, "agentCode": "7654321"})
        assert result.page == 1

    def test_apply_filters_only_page(self, query):
        result = filter_coordinator.apply_filters(query, {"page": 9})
        assert result.page == 9

    def test_structural_keys_route_to_fields(self, query):
        result = filter_coordinator.apply_filters(query, {"limit": 100, "sortBy": "TRNN", "sortOrder": "asc"})

        assert result.page_size == 100
        assert result.sort_key == "TRNN"
        assert result.sort_direction is SortDirection.ASC
        assert result.filter_map == {"agentCode": "1234567"}

    def test_clear_keeps_only_page_size(self, query):
        result = filter_coordinator.clear(query)

        assert result == Query(page_size=25)

    def test_set_page_size_resets_page(self, query):
        result = filter_coordinator.set_page_size(query, 50)

        assert result.page_size == 50
        assert result.page == 1

    def test_set_search(self, query):
        result = filter_coordinator.set_search(query, "ABC123")

        assert result.search == "ABC123"
        assert result.page == 1

    def test_toggle_sort_flips_active_column(self, query):
        result = filter_coordinator.toggle_sort(query, "DAIS")

        assert result.sort_key == "DAIS"
        assert result.sort_direction is SortDirection.ASC
        assert result.page == 1

    def test_toggle_sort_new_column_defaults_ascending(self, query):
        result = filter_coordinator.toggle_sort(query, "AGTN")

        assert result.sort_key == "AGTN"
        assert result.sort_direction is SortDirection.ASC
        assert result.page == 1

    def test_toggle_twice_restores_direction(self, query):
        result = filter_coordinator.toggle_sort(filter_coordinator.toggle_sort(query, "DAIS"), "DAIS")
        assert result.sort_direction is SortDirection.DESC

    def test_active_filter_count_ignores_empty(self):
        query = Query.create(filters={"agentCode": "123", "search": "", "passengerName": None, "currency": "EUR"})
        assert filter_coordinator.active_filter_count(query) == 2

    @pytest.mark.parametrize("key,value", [
        ("agentCode", "999"),
        ("search", "x"),
        ("limit", 10),
        ("sortBy", "TDNR"),
        ("sortOrder", "asc"),
        ("ticketNumber", ""),
    ])
    def test_any_non_page_mutation_lands_on_page_one(self, query, key, value):
        assert filter_coordinator.apply_filter(query, key, value).page == 1


class TestQuery:
    """Test suite for the Query model."""

    def test_equality_ignores_filter_order(self):
        first = Query.create(filters={"a": "1", "b": "2"})
        second = Query.create(filters={"b": "2", "a": "1"})

        assert first == second
        assert hash(first) == hash(second)

    def test_to_params_skips_empty_filters(self):
        query = Query.create(page=2, page_size=20, sort_key="DAIS", filters={"agentCode": "123", "search": ""})

        assert query.to_params() == {
            "page": 2,
            "limit": 20,
            "sortBy": "DAIS",
            "sortOrder": "desc",
            "agentCode": "123",
        }

    def test_to_params_without_sort(self):
        assert Query().to_params() == {"page": 1, "limit": 50}

    @pytest.mark.parametrize("kwargs", [{"page": 0}, {"page_size": 0}])
    def test_invalid_query(self, kwargs):
        with pytest.raises(ValueError):
            Query(**kwargs)
