"""
Conexión a base de datos PostgreSQL

Este módulo centraliza TODAS las formas de acceso a la base de datos:
- Database: pool psycopg2 con helpers para queries y transacciones
- SQLAlchemy declarative Base (solo para definir/crear el esquema)
"""
import time
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

import psycopg2
from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base

from .config import settings

logger = logging.getLogger(__name__)


# ============================================================================
# SQLAlchemy Configuration (schema definition only)
# ============================================================================

# Base para modelos
Base = declarative_base()


def get_engine(database_url: Optional[str] = None):
    """Create a SQLAlchemy engine, used by scripts/init_db.py to create tables"""
    url = database_url or settings.DATABASE_URL
    if not url:
        raise Exception("DATABASE_URL not configured")
    return create_engine(url, pool_pre_ping=True)


# ============================================================================
# psycopg2 connections with retry logic
# ============================================================================

def get_db_connection_dict_with_retry(max_retries=3, retry_delay=1.0, database_url=None):
    """
    Get a psycopg2 connection with RealDictCursor and automatic retry

    Retries OperationalError (dropped SSL sessions, server restarts) with
    exponential backoff. Any other error fails immediately.

    Args:
        max_retries: Maximum number of connection attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)
        database_url: Overrides settings.DATABASE_URL

    Returns:
        psycopg2 connection with RealDictCursor

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    database_url = database_url or settings.DATABASE_URL
    if not database_url:
        raise Exception("DATABASE_URL not configured")

    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            conn = psycopg2.connect(database_url, cursor_factory=RealDictCursor)

            # Test connection with a simple query
            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            cursor.close()

            return conn

        except psycopg2.OperationalError as e:
            last_error = e
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            # Don't retry on last attempt
            if attempt < max_retries:
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")
                raise

    raise last_error if last_error else Exception("Connection failed after all retries")


def create_pool_with_retry(database_url, minconn, maxconn, max_retries=3, retry_delay=1.0):
    """Open a ThreadedConnectionPool, retrying transient connection failures"""
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            return ThreadedConnectionPool(
                minconn, maxconn, database_url, cursor_factory=RealDictCursor
            )
        except psycopg2.OperationalError as e:
            last_error = e
            logger.warning(f"Pool connection error on attempt {attempt}/{max_retries}: {e}")
            if attempt < max_retries:
                time.sleep(retry_delay * (2 ** (attempt - 1)))

    logger.error(f"All {max_retries} pool connection attempts failed")
    raise last_error


# ============================================================================
# Datastore accessor
# ============================================================================

class Database:
    """
    Parameterized query execution over a psycopg2 connection pool

    Single statements go through fetch_one / fetch_all / execute, each on its
    own pooled connection. Multi-statement work uses transaction(), which
    yields a cursor, commits on success, rolls back on any exception and
    always returns the connection to the pool.

    Usage:
        with db.transaction() as cursor:
            cursor.execute("INSERT INTO orders ...", params)
            cursor.execute("UPDATE products ...", params)
    """

    def __init__(self, database_url: Optional[str] = None, minconn: Optional[int] = None,
                 maxconn: Optional[int] = None, pool=None):
        self.database_url = database_url
        self.minconn = minconn or settings.DB_POOL_MIN
        self.maxconn = maxconn or settings.DB_POOL_MAX
        self._pool = pool

    def _get_pool(self):
        if self._pool is None:
            database_url = self.database_url or settings.DATABASE_URL
            if not database_url:
                raise Exception("DATABASE_URL not configured")
            self._pool = create_pool_with_retry(database_url, self.minconn, self.maxconn)
        return self._pool

    @contextmanager
    def connection(self) -> Iterator[Any]:
        """Check out a pooled connection and release it on every exit path"""
        pool = self._get_pool()
        conn = pool.getconn()
        try:
            yield conn
        finally:
            pool.putconn(conn)

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        """begin → statements → commit, rollback on any exception"""
        with self.connection() as conn:
            cursor = conn.cursor()
            try:
                yield cursor
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                cursor.close()

    def _run(self, query: str, params: Optional[Sequence], fetch: Optional[str]):
        with self.transaction() as cursor:
            cursor.execute(query, params)
            if fetch == "one":
                return cursor.fetchone()
            if fetch == "all":
                return cursor.fetchall()
            return cursor.rowcount

    def fetch_one(self, query: str, params: Optional[Sequence] = None) -> Optional[Dict[str, Any]]:
        return self._run(query, params, "one")

    def fetch_all(self, query: str, params: Optional[Sequence] = None) -> List[Dict[str, Any]]:
        return self._run(query, params, "all")

    def execute(self, query: str, params: Optional[Sequence] = None) -> int:
        """Run a single write statement and return the affected row count"""
        return self._run(query, params, None)

    def close(self):
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None


db = Database()


def get_database() -> Database:
    """
    FastAPI dependency for the shared Database accessor

    Usage:
        @router.get("/items")
        def read_items(db: Database = Depends(get_database)):
            ...
    """
    return db
