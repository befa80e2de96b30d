from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from app.core.config import get_settings

ROOT = Path(__file__).resolve().parents[1]


def test_upgrade_head_creates_products_table(tmp_path, monkeypatch):
    db_file = tmp_path / "products.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    get_settings.cache_clear()
    try:
        # No ini file: keeps alembic's fileConfig away from the service loggers.
        cfg = Config()
        cfg.set_main_option("script_location", str(ROOT / "alembic"))
        command.upgrade(cfg, "head")
    finally:
        monkeypatch.undo()
        get_settings.cache_clear()

    engine = create_engine(f"sqlite:///{db_file}")
    try:
        columns = {c["name"] for c in inspect(engine).get_columns("products")}
    finally:
        engine.dispose()
    assert columns == {"id", "name", "description", "price", "created_at", "updated_at"}
