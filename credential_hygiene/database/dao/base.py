"""Abstract base classes for database interactions."""

from abc import ABC
from typing import Any, Dict, List, Optional, Tuple

from psycopg2.pool import SimpleConnectionPool
from verboselogs import VerboseLogger


class BaseDAO(ABC):
    """Abstract Base Class for Data Access Objects."""

    def __init__(self, db_pool: SimpleConnectionPool, logger: Optional[VerboseLogger] = None):
        self.db_pool = db_pool
        self.logger = logger or VerboseLogger(__name__)

    def _execute_query(
        self,
        query: str,
        params: Tuple | Dict = (),
        fetch: Optional[str] = None,
        conn=None,
        ctx: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Execute a query and return results.

        If a connection is provided, it will be used without committing; the caller manages transactions.
        If not provided, a connection is acquired from the pool and committed per call.
        """
        own_conn = False
        try:
            if conn is None:
                conn = self.db_pool.getconn()
                own_conn = True
            with conn.cursor() as cursor:
                cursor.execute(query, params)
                if own_conn:
                    conn.commit()
                if fetch == "one":
                    return cursor.fetchone()
                if fetch == "all":
                    return cursor.fetchall()
                return cursor.rowcount
        except Exception as e:
            if conn and own_conn:
                conn.rollback()
            ctx_str = self._fmt_ctx(ctx)
            self.logger.error(
                f"db_error op=execute_query fetch={fetch} own_conn={own_conn} {ctx_str}err={e}"
            )
            raise
        finally:
            if conn and own_conn:
                self.db_pool.putconn(conn)

    def _fmt_ctx(self, ctx: Optional[Dict[str, Any]]) -> str:
        if not ctx:
            return ""
        parts: List[str] = []
        for k, v in ctx.items():
            # Avoid None and overly long values; keep logs readable and safe
            if v is None:
                continue
            s = str(v)
            if len(s) > 256:
                s = s[:253] + "..."
            parts.append(f"{k}={s}")
        return (" ".join(parts) + " ") if parts else ""
