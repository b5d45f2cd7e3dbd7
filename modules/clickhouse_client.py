"""ClickHouse helper using clickhouse-driver (TCP).
Provides the read-only query interface the dev URL scan runs against.
"""
import logging
import pandas as pd
from typing import Optional, List, Dict, Any
from clickhouse_driver import Client

from config.settings import CLICKHOUSE_CONFIG

logger = logging.getLogger(__name__)

_client_cache = None

def get_client() -> Client:
    """Get a cached ClickHouse client instance."""
    global _client_cache
    if _client_cache is None:
        _client_cache = Client(**CLICKHOUSE_CONFIG)
    return _client_cache

def query_df(sql: str, params: Optional[dict] = None, client: Optional[Client] = None) -> pd.DataFrame:
    """Execute a SELECT query and return a pandas DataFrame."""
    client = client or get_client()
    try:
        result, columns = client.execute(sql, params=params or {}, with_column_types=True)
        if not columns:
            return pd.DataFrame()
        col_names = [c[0] for c in columns]
        return pd.DataFrame(result, columns=col_names)
    except Exception as e:
        logger.error(f"Query failed: {e}")
        raise


class ClickHouseDatabase:
    """Database capability used by the scan: existence check, count, row fetch."""

    def __init__(self, client: Optional[Client] = None, database: Optional[str] = None):
        self.client = client or get_client()
        self.database = database or CLICKHOUSE_CONFIG.get("database", "default")

    def table_exists(self, full_table_name: str) -> bool:
        """Check if a table exists."""
        if "." in full_table_name:
            db, table = full_table_name.split(".", 1)
        else:
            db, table = self.database, full_table_name

        sql = "SELECT 1 FROM system.tables WHERE database = %(db)s AND name = %(table)s LIMIT 1"
        try:
            result = self.client.execute(sql, params={"db": db, "table": table})
        except Exception as e:
            logger.error(f"Existence check failed for {full_table_name}: {e}")
            raise
        return bool(result)

    def count(self, sql: str, params: Optional[dict] = None) -> int:
        """Run a scalar COUNT query."""
        df = query_df(sql, params, client=self.client)
        if df.empty:
            return 0
        return int(df.iloc[0, 0])

    def query(self, sql: str, params: Optional[dict] = None) -> List[Dict[str, Any]]:
        """Run a SELECT and return rows as dicts keyed by column name."""
        df = query_df(sql, params, client=self.client)
        if df.empty:
            return []
        # NULLs come back as NaN/None; the row formatter treats both as empty
        return df.astype(object).where(df.notna(), None).to_dict("records")
