"""
Tests for engine construction and slow-query logging.
"""

import logging

import pytest
from sqlalchemy import text

from app import database
from app.database import build_engine, normalize_database_url


class TestDatabaseUrl:

    @pytest.mark.unit
    def test_postgres_scheme_rewritten(self):
        assert normalize_database_url("postgres://u:p@host/db") == "postgresql://u:p@host/db"

    @pytest.mark.unit
    def test_other_urls_unchanged(self):
        assert normalize_database_url("postgresql://host/db") == "postgresql://host/db"
        assert normalize_database_url("sqlite:///./grepandit.db") == "sqlite:///./grepandit.db"


class TestBuildEngine:

    @pytest.mark.unit
    def test_sqlite_engine_runs_queries(self):
        engine = build_engine("sqlite://")
        try:
            with engine.connect() as conn:
                assert conn.execute(text("SELECT 1")).scalar() == 1
        finally:
            engine.dispose()

    @pytest.mark.unit
    def test_slow_queries_are_logged(self, monkeypatch, caplog):
        monkeypatch.setattr(database, "SLOW_QUERY_THRESHOLD_MS", -1)
        engine = build_engine("sqlite://")
        try:
            with caplog.at_level(logging.WARNING, logger="sqlalchemy.query_timing"):
                with engine.connect() as conn:
                    conn.execute(text("SELECT 42"))
        finally:
            engine.dispose()

        assert any("SLOW QUERY" in r.getMessage() and "SELECT 42" in r.getMessage() for r in caplog.records)
