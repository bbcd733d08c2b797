# tests/test_migrations.py
from alembic import command
from sqlalchemy import create_engine, inspect

from matchgate.core.settings import settings
from matchgate.scripts.migrate import build_config, main

TABLES = {"profile", "swipe_record", "match_record", "conversation_message"}


def test_config_uses_configured_url_verbatim() -> None:
    url = "postgresql+asyncpg://matchgate@db/matchgate"
    assert build_config(url).get_main_option("sqlalchemy.url") == url
    assert build_config().get_main_option("sqlalchemy.url") == settings.effective_database_url


def test_upgrade_and_downgrade(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    engine = create_engine(url)
    try:
        command.upgrade(build_config(url), "head")
        assert TABLES <= set(inspect(engine).get_table_names())

        command.downgrade(build_config(url), "base")
        assert not TABLES & set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


def test_cli_upgrades_to_head(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    main(["--database-url", url, "upgrade"])

    engine = create_engine(url)
    try:
        assert TABLES <= set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
