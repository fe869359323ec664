"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from fintrack.database.base import Database
from fintrack.database.fallback import FallbackDatabase
from fintrack.database.mock_api import MockApiDatabase
from fintrack.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks FINTRACK_DB_PATH
            environment variable, then defaults to ~/.fintrack/fintrack.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("FINTRACK_DB_PATH")

    if database_path is None:
        # Default to ~/.fintrack/fintrack.db
        home = Path.home()
        db_dir = home / ".fintrack"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "fintrack.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_mock_api_database(api_url: Optional[str] = None) -> MockApiDatabase:
    """Create a mock REST API database instance.

    Args:
        api_url: Base URL of the backend. If None, FINTRACK_API_URL is used.

    Raises:
        ValueError: If no URL is configured
    """
    if api_url is None:
        api_url = os.environ.get("FINTRACK_API_URL")
    if not api_url:
        raise ValueError("No mock API URL configured (set FINTRACK_API_URL or pass --api-url)")
    return MockApiDatabase(api_url)


def create_database(
    database_path: Optional[str] = None, api_url: Optional[str] = None
) -> Database:
    """Create the database used by the CLI.

    With an API URL the mock backend is used first and the local SQLite
    store takes over when the backend cannot be reached. Without one, only
    the local store is used.
    """
    local = create_sqlite_database(database_path=database_path)
    if not api_url:
        return local
    return FallbackDatabase(remote=create_mock_api_database(api_url), local=local)
