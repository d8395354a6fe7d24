"""Database configuration and session management."""

import logging
from collections.abc import Generator

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

logger = logging.getLogger(__name__)


# Base class for ORM models
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""

    pass


def _engine_options(url: str) -> dict:
    """Engine keyword arguments appropriate for the target backend."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    # PostgreSQL: pooled connections, READ COMMITTED and a bounded lock wait
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_recycle": 3600,
        "isolation_level": "READ COMMITTED",
        "connect_args": {"options": "-c lock_timeout=5000"},
    }


class Database:
    """Owns the engine and session factory for the lifetime of the process.

    Usage:
        database = Database(settings.database_url)
        database.open()
        with database.session() as db:
            ...
        database.close()
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.echo = echo
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def open(self) -> None:
        """Create the engine and session factory. Safe to call twice."""
        if self._engine is not None:
            return
        self._engine = create_engine(self.url, echo=self.echo, **_engine_options(self.url))
        self._session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self._engine,
            expire_on_commit=False,  # Prevent lazy loading errors after commit
        )
        logger.info(f"Database opened: {self._engine.url.render_as_string(hide_password=True)}")

    def close(self) -> None:
        """Dispose of pooled connections."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database closed")

    def session(self) -> Session:
        """Create a new ORM session bound to this database."""
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()

    def create_all(self) -> None:
        """Create all tables known to the ORM metadata."""
        Base.metadata.create_all(bind=self.engine)


# Dependency for FastAPI routes
def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    The session comes from the Database opened in the application lifespan.

    Yields:
        Session: SQLAlchemy database session

    Example:
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
