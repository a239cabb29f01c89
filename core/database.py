"""
core/database.py -- Shared SQLAlchemy Core plumbing for every store.

All tables live on one MetaData object so stores that need a join (the team
registry reads user profiles) can reference each other's tables, and so
create_all() from any store produces a complete schema.

Each store still owns its own Engine, built by create_db_engine(). For SQLite
the engine gets check_same_thread=False (FastAPI runs sync handlers in a
thread pool), WAL journal mode, and a Unicode-aware lower() on every new
connection.
"""

from sqlalchemy import MetaData, create_engine, event
from sqlalchemy.engine import Engine

metadata = MetaData()


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _on_sqlite_connect(dbapi_conn, connection_record) -> None:
    """Per-connection setup; SQLite PRAGMAs and functions are not shared across the pool.

    - WAL journal mode for concurrent read safety.
    - lower() replaced with str.lower so SQL-side and Python-side case folding
      agree on non-ASCII text. The built-in only folds A-Z.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")
    dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)


def create_db_engine(db_url: str) -> Engine:
    """Build an Engine for db_url and make sure every table exists."""
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _on_sqlite_connect)
    metadata.create_all(engine)
    return engine
