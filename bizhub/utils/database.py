"""
Database connection and query utilities

Provides connection pooling and helper methods for reading backend rows
"""

from psycopg2.pool import ThreadedConnectionPool
from psycopg2.extras import RealDictCursor
from typing import Optional, List, Dict, Any, Sequence
from contextlib import contextmanager
import logging

from bizhub.utils.config import settings

logger = logging.getLogger(__name__)


class Database:
    """Database connection manager with connection pooling.

    The pool is opened on first use, so importing this module never
    touches the network. Connections are handed out to worker threads
    (queries run through ``asyncio.to_thread``), hence the threaded pool.
    """

    def __init__(self):
        self.pool: Optional[ThreadedConnectionPool] = None

    def _initialize_pool(self):
        """Create connection pool"""
        try:
            self.pool = ThreadedConnectionPool(
                minconn=settings.DB_POOL_MIN,
                maxconn=settings.DB_POOL_MAX,
                host=settings.DB_HOST,
                port=settings.DB_PORT,
                database=settings.DB_NAME,
                user=settings.DB_USER,
                password=settings.DB_PASSWORD
            )
            logger.info("Database connection pool initialized")
        except Exception as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise

    @contextmanager
    def get_connection(self):
        """
        Context manager for database connections

        Usage:
            with db.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT * FROM organizations")
        """
        if self.pool is None:
            self._initialize_pool()
        conn = None
        try:
            conn = self.pool.getconn()
            yield conn
            conn.commit()
        except Exception as e:
            if conn:
                conn.rollback()
            logger.error(f"Database error: {e}")
            raise
        finally:
            if conn:
                self.pool.putconn(conn)

    @contextmanager
    def get_cursor(self, dict_cursor: bool = True):
        """
        Context manager for database cursors

        Args:
            dict_cursor: If True, returns results as dictionaries
        """
        with self.get_connection() as conn:
            cursor_factory = RealDictCursor if dict_cursor else None
            cursor = conn.cursor(cursor_factory=cursor_factory)
            try:
                yield cursor
            finally:
                cursor.close()

    def execute_query(
        self,
        query: Any,
        params: Optional[Sequence[Any]] = None,
        fetch_one: bool = False,
        dict_cursor: bool = True
    ) -> Optional[Any]:
        """
        Execute a SELECT query and return results

        Args:
            query: SQL query string or psycopg2.sql composable
            params: Query parameters
            fetch_one: If True, return single row; otherwise return all rows
            dict_cursor: If True, return results as dictionaries

        Returns:
            Query results (single row, list of rows, or None)
        """
        with self.get_cursor(dict_cursor=dict_cursor) as cursor:
            cursor.execute(query, params)
            if fetch_one:
                return cursor.fetchone()
            return cursor.fetchall()

    def fetch_rows(self, query: Any, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        """Execute a SELECT and return plain dict rows"""
        rows = self.execute_query(query, params) or []
        return [dict(row) for row in rows]

    def close(self):
        """Close all database connections in the pool"""
        if self.pool:
            self.pool.closeall()
            self.pool = None
            logger.info("Database connection pool closed")


# Global database instance
db = Database()


def get_db() -> Database:
    """Get the global database instance"""
    return db
