from datetime import datetime

from campaign.utils.query import DEFAULT_LIMIT, MAX_LIMIT, parse_list_filters, to_snake_case


def test_defaults():
    filters = parse_list_filters({})

    assert filters.page == 1
    assert filters.limit == DEFAULT_LIMIT
    assert filters.offset == 0
    assert filters.search == {}
    assert filters.order_by is None


def test_paging_and_ordering():
    filters = parse_list_filters({"page": "3", "limit": "20", "orderBy": "createdAt", "orderDirection": "DESC"})

    assert filters.offset == 40
    assert filters.order_by == "created_at"
    assert filters.order_direction == "desc"


def test_invalid_values_fall_back():
    filters = parse_list_filters({"page": "-1", "limit": "abc", "orderDirection": "sideways", "search": "{oops"})

    assert filters.page == 1
    assert filters.limit == DEFAULT_LIMIT
    assert filters.order_direction is None
    assert filters.search == {}


def test_limit_is_capped():
    assert parse_list_filters({"limit": "100000"}).limit == MAX_LIMIT


def test_search_keys_are_snake_cased():
    filters = parse_list_filters({"search": '{"fiscalCode": "123", "name": ""}'})

    assert filters.search == {"fiscal_code": "123", "name": ""}
    assert filters.describe()["search"] == {"fiscal_code": "123"}


def test_end_date_is_inclusive():
    filters = parse_list_filters({"startDate": "2024-03-01", "endDate": "2024-03-31T10:00:00Z"})

    assert filters.start_date == datetime(2024, 3, 1)
    assert filters.end_date == datetime(2024, 3, 31, 23, 59, 59, 999999)
    assert filters.describe()["startDate"] == "2024-03-01T00:00:00"


def test_to_snake_case():
    assert to_snake_case("updatedSecurityTokenAt") == "updated_security_token_at"
