# src/matchgate/scripts/migrate.py
from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Sequence

from alembic import command
from alembic.config import Config

from matchgate.core.log_config import configure_logging
from matchgate.core.settings import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations")
)


def build_config(database_url: str | None = None) -> Config:
    """Return an Alembic config pointed at the migrations folder."""
    cfg = Config(os.path.join(MIGRATIONS_DIR, "alembic.ini"))
    cfg.set_main_option("script_location", MIGRATIONS_DIR)
    cfg.set_main_option("sqlalchemy.url", database_url or settings.effective_database_url)
    return cfg


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="matchgate-migrate", description="Apply database migrations.")
    parser.add_argument("--database-url", help="override the configured database URL")
    subparsers = parser.add_subparsers(dest="action")

    upgrade = subparsers.add_parser("upgrade", help="upgrade to a revision (default: head)")
    upgrade.add_argument("revision", nargs="?", default="head")

    downgrade = subparsers.add_parser("downgrade", help="downgrade to a revision")
    downgrade.add_argument("revision")

    args = parser.parse_args(argv)
    configure_logging(settings.log_level)
    cfg = build_config(args.database_url)

    if args.action == "downgrade":
        logger.info("Downgrading database to %s", args.revision)
        command.downgrade(cfg, args.revision)
    else:
        revision = getattr(args, "revision", "head")
        logger.info("Upgrading database to %s", revision)
        command.upgrade(cfg, revision)


if __name__ == "__main__":
    main()
