from __future__ import annotations

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from mini_crm.core.config import get_settings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture()
def alembic_config(tmp_path, monkeypatch):
    database_path = tmp_path / "migrations.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{database_path}")
    get_settings.cache_clear()
    config = Config(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    try:
        yield config, database_path
    finally:
        get_settings.cache_clear()


def test_upgrade_and_downgrade(alembic_config) -> None:
    config, database_path = alembic_config

    command.upgrade(config, "head")

    engine = create_engine(f"sqlite:///{database_path}")
    try:
        inspector = inspect(engine)
        assert {"users", "customers", "tasks"} <= set(inspector.get_table_names())
        customer_uniques = {tuple(item["column_names"]) for item in inspector.get_unique_constraints("customers")}
        assert {("email",), ("phone",)} <= customer_uniques
        task_foreign_keys = {item["referred_table"] for item in inspector.get_foreign_keys("tasks")}
        assert task_foreign_keys == {"users", "customers"}
        assert {index["name"] for index in inspector.get_indexes("tasks")} >= {
            "ix_tasks_assigned_to",
            "ix_tasks_customer_id",
        }
    finally:
        engine.dispose()

    command.downgrade(config, "base")

    engine = create_engine(f"sqlite:///{database_path}")
    try:
        assert not {"users", "customers", "tasks"} & set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
