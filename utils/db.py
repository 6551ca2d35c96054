# utils/db.py
"""
Database access for the productivity store

One engine per process, created lazily:
- MySQL (PyMySQL) with a QueuePool when DB_HOST/DB_USER/DB_PASSWORD are set
- Any SQLAlchemy URL via DATABASE_URL (SQLite for demos and tests)

Every helper accepts an explicit `engine` so tests can pass an in-memory
SQLite engine instead of the process-wide one.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote_plus

import pandas as pd
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import QueuePool

from .config import config

logger = logging.getLogger(__name__)

# ==================== ENGINE ====================

_engine = None
_engine_lock = threading.Lock()


def get_db_engine():
    """Process-wide engine, built on first use (double-checked lock)."""
    global _engine

    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = _create_engine()

    return _engine


def build_database_url(db_config: Dict[str, Any]) -> str:
    """SQLAlchemy URL from the db config; an explicit `url` takes precedence."""
    if db_config.get("url"):
        return db_config["url"]

    password = quote_plus(str(db_config["password"]))
    return (
        f"mysql+pymysql://{db_config['user']}:{password}"
        f"@{db_config['host']}:{db_config['port']}/{db_config['database']}"
    )


def _create_engine():
    url = build_database_url(config.get_db_config())

    if url.startswith("sqlite"):
        engine = create_engine(url, echo=False)
        logger.info(f"🔌 SQLite engine ready: {url}")
        return engine

    pool_size = config.get_app_setting("DB_POOL_SIZE", 5)
    pool_recycle = config.get_app_setting("DB_POOL_RECYCLE", 3600)

    engine = create_engine(
        url,
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=pool_recycle,
        pool_pre_ping=True,  # drop stale MySQL connections before use
        echo=False
    )

    # never log the credentials part of the URL
    logger.info(
        f"🔌 MySQL engine ready: ***@{url.split('@', 1)[-1]} "
        f"(pool_size={pool_size}, recycle={pool_recycle}s)"
    )
    return engine


# ==================== HEALTH ====================

def check_db_connection(engine=None) -> Tuple[bool, Optional[str]]:
    """
    Run SELECT 1 against the store.

    Returns:
        (True, None) when reachable, otherwise (False, user-facing message)
    """
    try:
        engine = engine or get_db_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True, None
    except OperationalError as e:
        logger.error(f"❌ Database unreachable: {e}")
        return False, "Não foi possível conectar ao banco de dados. Verifique sua conexão."
    except Exception as e:
        logger.error(f"❌ Database error: {e}")
        return False, f"Erro no banco de dados: {e}"


def get_connection_pool_status() -> Dict[str, Any]:
    """Pool counters for the debug panel on the home page."""
    if _engine is None:
        return {"status": "not_initialized"}

    pool = _engine.pool
    if not isinstance(pool, QueuePool):
        return {"status": "active", "pool": type(pool).__name__}

    return {
        "status": "active",
        "pool_size": pool.size(),
        "checked_in": pool.checkedin(),
        "checked_out": pool.checkedout(),
        "overflow": pool.overflow(),
    }


# ==================== TRANSACTIONS ====================

@contextmanager
def get_transaction(engine=None):
    """
    Connection inside a transaction: commit on success, rollback on error.

    Usage:
        with get_transaction() as conn:
            conn.execute(text("INSERT INTO agents ..."), params)
    """
    engine = engine or get_db_engine()
    conn = engine.connect()
    trans = conn.begin()
    try:
        yield conn
        trans.commit()
    except Exception:
        trans.rollback()
        raise
    finally:
        conn.close()


# ==================== QUERY HELPERS ====================

def execute_query(query: str, params: Dict = None, engine=None) -> List[Dict]:
    """SELECT -> list of row dicts."""
    engine = engine or get_db_engine()

    with engine.connect() as conn:
        result = conn.execute(text(query), params or {})
        return [dict(row._mapping) for row in result]


def execute_query_df(query: str, params: Dict = None, engine=None) -> pd.DataFrame:
    """SELECT -> DataFrame."""
    engine = engine or get_db_engine()
    return pd.read_sql(text(query), engine, params=params or {})


def execute_script(script: str, engine=None) -> int:
    """
    Run a ;-separated SQL script such as db/schema.sql in one transaction.
    Full-line `--` comments are removed before splitting, so a `;` inside
    a comment never ends a statement.

    Returns:
        Number of statements executed
    """
    code = "\n".join(
        line for line in script.splitlines()
        if not line.strip().startswith("--")
    )
    statements = [chunk.strip() for chunk in code.split(";") if chunk.strip()]

    with get_transaction(engine) as conn:
        for statement in statements:
            conn.execute(text(statement))

    logger.info(f"📜 Executed {len(statements)} SQL statement(s)")
    return len(statements)


__all__ = [
    'get_db_engine',
    'build_database_url',
    'check_db_connection',
    'get_connection_pool_status',
    'get_transaction',
    'execute_query',
    'execute_query_df',
    'execute_script',
]
