"""
Database engine and session dependency.

The engine is created lazily. With USE_SSH the MySQL server is reached
through an SSH tunnel opened once per process; otherwise DATABASE_URL is
used, falling back to a local SQLite file.
"""
import logging
from typing import Generator, Optional

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine

from issuedesk.core.config import settings

logger = logging.getLogger(__name__)

SQLITE_FALLBACK_URL = "sqlite:///./issuedesk.db"

# Process-wide tunnel and engine
_tunnel = None
_engine: Optional[Engine] = None


def _open_tunnel():
    from sshtunnel import SSHTunnelForwarder

    tunnel = SSHTunnelForwarder(
        (settings.SSH_HOST, settings.SSH_PORT),
        ssh_username=settings.SSH_USER,
        ssh_password=settings.SSH_PASSWORD,
        remote_bind_address=(settings.DB_HOST, settings.DB_PORT),
        set_keepalive=60,
    )
    tunnel.start()
    logger.info("SSH tunnel to %s open on local port %s", settings.SSH_HOST, tunnel.local_bind_port)
    return tunnel


def database_url() -> str:
    global _tunnel

    if settings.USE_SSH:
        if _tunnel is None:
            _tunnel = _open_tunnel()
        return (
            f"mysql+pymysql://{settings.DB_USER}:{settings.DB_PASSWORD}"
            f"@127.0.0.1:{_tunnel.local_bind_port}/{settings.DB_NAME}"
        )
    return settings.DATABASE_URL or SQLITE_FALLBACK_URL


def get_engine() -> Engine:
    global _engine

    if _engine is None:
        url = database_url()
        if url.startswith("sqlite"):
            # Sessions are used from FastAPI's threadpool
            _engine = create_engine(url, connect_args={"check_same_thread": False})
        else:
            _engine = create_engine(url, pool_pre_ping=True)
        logger.debug("Database engine created for %s", _engine.url.get_backend_name())
    return _engine


engine = get_engine()


def init_db(bind: Optional[Engine] = None) -> None:
    """Create all tables that don't exist yet."""
    # Import models so their tables are registered on the metadata
    import issuedesk.models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
