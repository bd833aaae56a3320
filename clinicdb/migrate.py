"""
Schema provisioning through Alembic.

Wraps the Alembic commands the operator needs and turns their failures into
MigrationError. Failed migrations are never retried.

The migration environment ships inside the package, so the commands work from
any working directory and from an installed distribution.
"""
import argparse
import logging
from typing import Optional

from alembic import command
from alembic.config import Config
from alembic.util import CommandError
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings, get_settings
from .exceptions import AppException, ConfigurationError, MigrationError

logger = logging.getLogger(__name__)

# Resolved by Alembic through importlib.resources
SCRIPT_LOCATION = "clinicdb:migrations"


def get_alembic_config(database_url: Optional[str] = None) -> Config:
    """
    Build an Alembic Config pointing at the packaged migrations.

    Args:
        database_url: Connection string; DATABASE_URL is used when omitted

    Returns:
        Config: Alembic configuration
    """
    cfg = Config()
    cfg.set_main_option("script_location", SCRIPT_LOCATION)
    url = database_url or get_settings().database_url
    # configparser treats % as interpolation
    cfg.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return cfg


def _run(action: str, func, cfg: Config, *args) -> None:
    try:
        func(cfg, *args)
    except (CommandError, SQLAlchemyError) as exc:
        logger.error(f"Migration {action} failed: {exc}")
        raise MigrationError(f"Migration {action} failed: {exc}") from exc


def upgrade(revision: str = "head", database_url: Optional[str] = None) -> None:
    """
    Upgrade the database schema to a revision.

    Raises:
        MigrationError: If Alembic or the database rejects a statement
    """
    cfg = get_alembic_config(database_url)
    logger.info(f"Upgrading schema to {revision}")
    _run("upgrade", command.upgrade, cfg, revision)


def downgrade(revision: str, database_url: Optional[str] = None) -> None:
    """
    Downgrade the database schema to a revision.

    Raises:
        MigrationError: If Alembic or the database rejects a statement
    """
    cfg = get_alembic_config(database_url)
    logger.info(f"Downgrading schema to {revision}")
    _run("downgrade", command.downgrade, cfg, revision)


def current(database_url: Optional[str] = None) -> None:
    """Print the revision the database is at."""
    _run("current", command.current, get_alembic_config(database_url), False)


def resolve_log_level(database_url: Optional[str] = None) -> str:
    """
    LOG_LEVEL from the environment, or INFO when the settings cannot be loaded.

    A --database-url override stands in for DATABASE_URL, so LOG_LEVEL is
    still honoured when only the command line names the database.
    """
    try:
        settings = Settings(database_url=database_url) if database_url else get_settings()
    except (ConfigurationError, ValidationError):
        return "INFO"
    return settings.log_level


def main(argv=None) -> int:
    """Command line entry point: clinicdb-migrate {upgrade,downgrade,current}."""
    parser = argparse.ArgumentParser(prog="clinicdb-migrate", description="Provision the clinic database schema")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    upgrade_parser = subparsers.add_parser("upgrade", help="Upgrade to a revision")
    upgrade_parser.add_argument("revision", nargs="?", default="head")

    downgrade_parser = subparsers.add_parser("downgrade", help="Downgrade to a revision")
    downgrade_parser.add_argument("revision")

    subparsers.add_parser("current", help="Show the current revision")

    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(level=resolve_log_level(args.database_url))

    try:
        if args.command == "upgrade":
            upgrade(args.revision, args.database_url)
        elif args.command == "downgrade":
            downgrade(args.revision, args.database_url)
        else:
            current(args.database_url)
    except AppException as exc:
        logger.error(f"❌ {exc.detail}")
        return 1

    logger.info("✅ Done")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
