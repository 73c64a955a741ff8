"""Database initialization utilities."""
from sqlalchemy import inspect

from complaint_portal.core.logging import get_logger
from complaint_portal.db.base import Base, import_models
from complaint_portal.db.session import engine

logger = get_logger(__name__)


def init_db() -> None:
    """
    Create any missing tables.

    Suitable for development and testing; production deployments manage
    the schema with migrations.
    """
    import_models()
    existing_tables = set(inspect(engine).get_table_names())
    Base.metadata.create_all(bind=engine)
    created = sorted(set(Base.metadata.tables) - existing_tables)
    if created:
        logger.info(f"Database tables created: {', '.join(created)}")
    else:
        logger.info(f"Database already initialized with {len(existing_tables)} tables")


def drop_db() -> None:
    """Drop all database tables. Deletes all data."""
    Base.metadata.drop_all(bind=engine)
    logger.warning("All database tables dropped")
