from datetime import timedelta

import pytest

from pawhub_api.config import _engine_options, _normalize_database_uri, _parse_duration


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("24h", timedelta(hours=24)),
        ("7d", timedelta(days=7)),
        ("30m", timedelta(minutes=30)),
        ("3600", timedelta(seconds=3600)),
        ("", timedelta(hours=24)),
    ],
)
def test_parse_duration(raw, expected):
    assert _parse_duration(raw) == expected


def test_legacy_postgres_scheme_is_rewritten():
    assert _normalize_database_uri("postgres://u:p@localhost:5432/db") == (
        "postgresql+psycopg2://u:p@localhost:5432/db"
    )


def test_supabase_host_gets_sslmode():
    uri = _normalize_database_uri("postgresql://u:p@db.abc.supabase.co:5432/postgres")
    assert uri.endswith("?sslmode=require")
    kept = _normalize_database_uri("postgresql://u:p@db.abc.supabase.co:5432/postgres?sslmode=verify-full")
    assert kept.endswith("sslmode=verify-full")


def test_sqlite_has_no_pool_options():
    assert _engine_options("sqlite://") == {}
    assert _engine_options("postgresql+psycopg2://x")["pool_pre_ping"] is True


def test_preflight_allows_patch_from_known_origin(client):
    r = client.options(
        "/api/v1/projects",
        headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "PATCH"},
    )
    assert r.status_code == 204
    assert r.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"
    assert "PATCH" in r.headers["Access-Control-Allow-Methods"]
