"""Database infrastructure setup."""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.infrastructure.config.settings import settings

# Engine creation is deferred until needed so in-memory mode never touches a database
_engine = None
_SessionLocal = None


def get_engine() -> Engine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required for database operations")
        _engine = create_engine(
            settings.database_url,
            pool_pre_ping=True,  # Verify connections before using
            echo=settings.debug_mode,  # Log SQL queries in debug mode
        )
    return _engine


def get_db_session() -> Session:
    """
    Get a database session.

    Each unit of work owns one session; the transaction it opens spans every
    read and write made through that unit of work.

    Returns:
        SQLAlchemy session instance
    """
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal()


def create_schema(engine: Engine = None) -> None:
    """Create the lead and audit tables (development only, use Alembic otherwise)."""
    from app.adapters.outbound.audit.models import AuditLogModel  # noqa: F401
    from app.adapters.outbound.lead.models import Base

    Base.metadata.create_all(engine or get_engine())
