#!/usr/bin/env python3
"""
Database management script.
Creates, drops and checks the application tables.
"""

import asyncio
import sys
import argparse
import logging

from app.config import Settings, get_settings
from app.database import Database

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class MigrationManager:
    """Manages the database schema for one settings object."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.database = Database.from_settings(settings)

    async def create_tables(self) -> None:
        """Create every table that does not exist yet."""
        try:
            await self.database.create_tables()
        finally:
            await self.database.dispose()

    async def drop_tables(self) -> None:
        """Drop all tables. Only allowed in development or testing."""
        if not (self.settings.is_development or self.settings.is_testing):
            raise RuntimeError("Dropping tables is only allowed in development or test mode")

        logger.warning("Dropping all tables - all data will be lost!")
        try:
            await self.database.drop_tables()
        finally:
            await self.database.dispose()

    async def check_connection(self) -> bool:
        """Run a test query and report whether the database answered."""
        try:
            connected = await self.database.ping()
        finally:
            await self.database.dispose()

        if connected:
            logger.info("Database connection successful")
        else:
            logger.error("Database connection failed")
        return connected


def main(argv=None) -> int:
    """Main CLI interface for database management."""
    parser = argparse.ArgumentParser(description="Database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create all tables")

    drop_parser = subparsers.add_parser("drop", help="Drop all tables (development only)")
    drop_parser.add_argument("--confirm", action="store_true", help="Confirm dropping tables")

    subparsers.add_parser("check", help="Test the database connection")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    manager = MigrationManager(get_settings())

    try:
        if args.command == "create":
            asyncio.run(manager.create_tables())

        elif args.command == "drop":
            if not args.confirm:
                print("Dropping tables requires --confirm flag")
                return 1
            asyncio.run(manager.drop_tables())

        elif args.command == "check":
            return 0 if asyncio.run(manager.check_connection()) else 1

    except Exception as e:
        logger.error(f"Command failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
