import os
import shutil
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

EXPECTED_TABLES = {
    "users",
    "transactions",
    "budgets",
    "goals",
    "investments",
    "notifications",
    "user_settings",
    "audit_logs",
}


@pytest.fixture(scope="module")
def postgres_url():
    if os.getenv("SKIP_DOCKER_TESTS") == "1":
        pytest.skip("SKIP_DOCKER_TESTS=1")
    if not shutil.which("docker") and not os.getenv("DOCKER_HOST"):
        pytest.skip("Docker is not available; skipping migration tests")
    from testcontainers.postgres import PostgresContainer

    container = PostgresContainer("postgres:16-alpine")
    try:
        container.start()
    except Exception as exc:
        pytest.skip(f"Could not start Postgres test container: {exc}")
    try:
        yield container.get_connection_url()
    finally:
        container.stop()


def _alembic_config(database_url: str) -> Config:
    root = Path(__file__).resolve().parents[2]
    cfg = Config(str(root / "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    cfg.set_main_option("script_location", str(root / "migrations"))
    return cfg


def _tables(database_url: str) -> set:
    engine = create_engine(database_url)
    try:
        return set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


@pytest.mark.integration
@pytest.mark.slow
def test_alembic_upgrade_and_downgrade_cycle(postgres_url, monkeypatch):
    monkeypatch.setenv("TEST_DATABASE_URL", postgres_url)
    cfg = _alembic_config(postgres_url)

    command.upgrade(cfg, "head")
    assert EXPECTED_TABLES <= _tables(postgres_url)

    command.downgrade(cfg, "base")
    assert not (EXPECTED_TABLES & _tables(postgres_url))

    command.upgrade(cfg, "head")
    assert EXPECTED_TABLES <= _tables(postgres_url)
