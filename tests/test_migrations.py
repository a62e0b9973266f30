"""
Tests that the Alembic migrations build the same schema the models declare.
"""
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from profilehub.db.base import Base
from profilehub.db.session import make_engine

ROOT = Path(__file__).resolve().parents[1]


def _schema(url: str) -> dict:
    engine = make_engine(url)
    try:
        inspector = inspect(engine)
        schema = {}
        for table in sorted(inspector.get_table_names()):
            if table == "alembic_version":
                continue
            schema[table] = {
                "columns": [(c["name"], str(c["type"]), c["nullable"]) for c in inspector.get_columns(table)],
                "pk": inspector.get_pk_constraint(table)["constrained_columns"],
                "fks": sorted(
                    (tuple(fk["constrained_columns"]), fk["referred_table"], tuple(fk["referred_columns"]), fk["options"].get("ondelete"))
                    for fk in inspector.get_foreign_keys(table)
                ),
                "indexes": sorted(
                    (ix["name"], tuple(ix["column_names"]), bool(ix["unique"])) for ix in inspector.get_indexes(table)
                ),
            }
        return schema
    finally:
        engine.dispose()


@pytest.fixture
def alembic_config(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'migrated.sqlite3'}"
    monkeypatch.setenv("ALEMBIC_DATABASE_URL", url)
    cfg = Config()
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    return cfg, url


def test_upgrade_matches_models(alembic_config, tmp_path):
    cfg, url = alembic_config
    command.upgrade(cfg, "head")

    declared_url = f"sqlite:///{tmp_path / 'declared.sqlite3'}"
    engine = make_engine(declared_url)
    Base.metadata.create_all(bind=engine)
    engine.dispose()

    migrated = _schema(url)
    assert set(migrated) == {"users", "friends"}
    assert migrated == _schema(declared_url)


def test_friend_edges_cascade(alembic_config):
    cfg, url = alembic_config
    command.upgrade(cfg, "head")

    fks = _schema(url)["friends"]["fks"]

    assert [fk[3] for fk in fks] == ["CASCADE", "CASCADE"]
    assert sorted(fk[0] for fk in fks) == [("friend_id",), ("user_id",)]


def test_downgrade_drops_tables(alembic_config):
    cfg, url = alembic_config
    command.upgrade(cfg, "head")

    command.downgrade(cfg, "base")

    assert _schema(url) == {}
