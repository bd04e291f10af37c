from core.analytics import analytics_params, build_analytics_query, parse_users


def test_defaults_to_30d_and_today():
    query = build_analytics_query()

    assert query == "startDate=30d&endDate=today"


def test_users_omitted_when_absent_or_empty():
    assert "users" not in build_analytics_query()
    assert "users" not in build_analytics_query(users=[])
    assert "users" not in analytics_params(users=None)


def test_users_are_comma_joined_and_url_encoded():
    query = build_analytics_query(users=["a@x.com", "b@x.com"])

    assert "users=a%40x.com%2Cb%40x.com" in query


def test_explicit_dates_pass_through():
    query = build_analytics_query("2026-02-01", "2026-02-15", ["alice@co.com", "bob@co.com"])

    assert "startDate=2026-02-01" in query
    assert "endDate=2026-02-15" in query
    assert "users=alice%40co.com%2Cbob%40co.com" in query


def test_parse_users_splits_and_trims():
    assert parse_users("a@x.com, b@x.com ,") == ["a@x.com", "b@x.com"]
    assert parse_users(None) == []
    assert parse_users("") == []
