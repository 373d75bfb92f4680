# Studio Booking - Studio and Equipment Booking Service
# Copyright (C) 2025 Oleg Tokmakov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""Database setup and connection management."""

from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings

# Base class for all models
Base = declarative_base()

# Global engine and session factory
_engine = None
_SessionLocal = None


def get_database_url() -> str:
    """Get the database URL from settings."""
    settings = get_settings()
    db_path = settings.database.path

    # Ensure directory exists
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    return f"sqlite:///{db_path}"


def init_engine(database_url: Optional[str] = None):
    """Initialize the database engine.

    Args:
        database_url: SQLAlchemy URL. Defaults to the configured SQLite file.
            ``sqlite://`` gives a single shared in-memory database.
    """
    global _engine, _SessionLocal

    if database_url is None:
        database_url = get_database_url()

    engine_kwargs = {
        "connect_args": {"check_same_thread": False},  # Needed for SQLite
        "echo": get_settings().app.debug,
    }
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        # Every connection must see the same in-memory database
        engine_kwargs["poolclass"] = StaticPool

    _engine = create_engine(database_url, **engine_kwargs)

    # Enable foreign keys for SQLite
    @event.listens_for(_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)

    return _engine


def dispose_engine() -> None:
    """Close all pooled connections and forget the engine."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


def get_engine():
    """Get the database engine, initializing if needed."""
    global _engine
    if _engine is None:
        init_engine()
    return _engine


def get_session_local():
    """Get the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        init_engine()
    return _SessionLocal


def create_tables():
    """Create all database tables."""
    # Import all models to ensure they're registered
    from app.models import auth, booking, equipment, user  # noqa: F401

    engine = get_engine()
    Base.metadata.create_all(bind=engine)


def _report_purged(count: int) -> None:
    if count:
        print(f"Removed {count} expired admin session(s)")


def init_database():
    """Initialize the configured storage backend with tables and seed data."""
    from app.services.storage import DatabaseStorage, get_memory_storage, seed_storage

    settings = get_settings()

    if settings.uses_memory_storage:
        storage = get_memory_storage()
        seed_storage(storage, settings)
        _report_purged(storage.purge_expired_sessions())
        print("In-memory storage initialized")
        return

    create_tables()

    SessionLocal = get_session_local()
    db = SessionLocal()

    try:
        storage = DatabaseStorage(db)
        seed_storage(storage, settings)
        _report_purged(storage.purge_expired_sessions())
        print("Database initialized successfully")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
