"""Engine and session factory configuration."""

from collections.abc import Generator
import logging

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from catalog.core.config import Settings
from catalog.db.base import Base

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> Engine:
    """Create the engine for the configured database URL.

    Postgres gets a pre-pinged, recycled connection pool with TCP keepalives
    so idle admin-panel sessions do not hand out dead connections.
    """
    url = settings.database_url
    if not url.startswith("postgresql"):
        return create_engine(url, echo=False, future=True)

    return create_engine(
        url,
        echo=False,
        future=True,
        poolclass=QueuePool,
        pool_pre_ping=True,  # Test connections before using
        pool_recycle=1800,  # Recycle connections after 30 minutes
        pool_size=5,
        max_overflow=10,
        connect_args={
            "connect_timeout": 10,
            "keepalives": 1,
            "keepalives_idle": 30,
            "keepalives_interval": 10,
            "keepalives_count": 5,
        },
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def check_connection(engine: Engine) -> None:
    """Round-trip a trivial query; raises SQLAlchemyError when unreachable."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1")).fetchone()


def init_schema(engine: Engine) -> None:
    """Create the products table if it does not exist yet."""
    Base.metadata.create_all(bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Yield a session for one request; roll back anything left uncommitted."""
    db = session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
