# tcommerce/database.py
from sqlalchemy import event
from sqlalchemy.engine import Engine, make_url
from sqlmodel import SQLModel, create_engine, Session

from tcommerce.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Relational store connection
#
# - sslmode       : appended to Postgres URLs when DATABASE_SSLMODE is set
# - pool_size     : DB_POOL_SIZE (pooled drivers only)
# - max_overflow  : DB_MAX_OVERFLOW (pooled drivers only)
# - pool_pre_ping : validate connections before using them
#
# Cart mutations rely on real transactions (row locks + savepoints).
# SQLite ignores FOR UPDATE, so SQLite engines take the write lock
# when each transaction begins instead (see use_immediate_transactions).
# ---------------------------------------------------------


def build_database_url(raw_url: str, sslmode: str | None = None) -> str:
    """
    Return the connection URL, with sslmode appended for Postgres
    if requested and not already present.
    """
    if not sslmode or not raw_url.startswith("postgres"):
        return raw_url
    if "sslmode=" in raw_url:
        return raw_url
    sep = "&" if "?" in raw_url else "?"
    return f"{raw_url}{sep}sslmode={sslmode}"


def is_sqlite(db_url: str) -> bool:
    return make_url(db_url).get_backend_name() == "sqlite"


def use_immediate_transactions(sqlite_engine: Engine) -> Engine:
    """
    Make every transaction on a SQLite engine start with BEGIN IMMEDIATE.

    pysqlite normally defers BEGIN until the first write, so two cart
    updates could both read the same quantity before either writes.
    Taking the database write lock up front serializes them, and also
    lets SAVEPOINT work as SQLAlchemy expects.
    """

    @event.listens_for(sqlite_engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(sqlite_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return sqlite_engine


def _engine_kwargs(db_url: str) -> dict:
    if is_sqlite(db_url):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
    }


db_url = build_database_url(settings.DATABASE_URL, settings.DATABASE_SSLMODE)

engine = create_engine(
    db_url,
    echo=settings.DEBUG,
    **_engine_kwargs(db_url),
)
if is_sqlite(db_url):
    use_immediate_transactions(engine)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    One session per request; services own commit/rollback.
    """
    with Session(engine) as session:
        yield session
