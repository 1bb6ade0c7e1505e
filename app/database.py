"""Database connection, pool setup and schema bootstrap."""
import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def database_url(settings: Settings) -> URL:
    """Build the PostgreSQL connection URL from settings."""
    return URL.create(
        "postgresql+psycopg2",
        username=settings.db_user,
        password=settings.db_password,
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_name,
        query={"sslmode": settings.db_ssl_mode},
    )


def create_db_engine(settings: Settings) -> Engine:
    """
    Create an engine with a bounded connection pool.

    pool_size keeps up to db_max_idle_conns connections around, overflow
    lets the total grow to db_max_open_conns, and pool_recycle discards a
    connection once it is older than db_conn_max_lifetime.
    """
    engine = create_engine(
        database_url(settings),
        pool_pre_ping=True,
        pool_size=settings.db_max_idle_conns,
        max_overflow=max(0, settings.db_max_open_conns - settings.db_max_idle_conns),
        pool_recycle=settings.db_conn_max_lifetime,
        connect_args={"connect_timeout": settings.db_connect_timeout},
    )

    statement_timeout = f"{settings.db_statement_timeout}s"

    @event.listens_for(engine, "connect")
    def set_statement_timeout(dbapi_connection, connection_record):
        """Bound every statement run on a pooled connection."""
        cursor = dbapi_connection.cursor()
        cursor.execute(f"SET statement_timeout = '{statement_timeout}'")
        cursor.close()

    return engine


def verify_connection(engine: Engine) -> None:
    """Round-trip a trivial query to prove the database is reachable."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("Database connection verified")


def _set_local_timeout(conn: Connection, seconds: int) -> None:
    # Only PostgreSQL understands statement_timeout; SET LOCAL ends with the transaction
    if conn.dialect.name == "postgresql":
        conn.execute(text(f"SET LOCAL statement_timeout = '{int(seconds)}s'"))


def bootstrap_schema(engine: Engine, timeout: int = 10) -> None:
    """
    Create the products table if it does not exist.

    Idempotent, safe to run on every startup.
    """
    # Import to register models on Base.metadata
    from app.models import Product  # noqa: F401

    with engine.begin() as conn:
        _set_local_timeout(conn, timeout)
        Base.metadata.create_all(bind=conn, checkfirst=True)
    logger.info("Products table ready")


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to the given engine."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
