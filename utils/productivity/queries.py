# utils/productivity/queries.py
"""
SQL Queries and Data Loading for the Productivity Dashboard

Handles all database interactions:
- Productivity records joined with agent and leadership role names
- Lookup tables (agents, leadership roles)
- Append-only record creation

Reads never raise: failures are logged and an empty DataFrame with the
expected columns is returned. Writes return (success, payload) tuples.
Caching is done by the page scripts with @st.cache_data.
"""

import logging
import uuid
from datetime import date, datetime
from typing import Dict, Optional, Tuple

import pandas as pd
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from utils.db import execute_query, execute_query_df, get_db_engine, get_transaction
from .constants import RECORD_COLUMNS
from .validators import ProductivityValidator

logger = logging.getLogger(__name__)

LOOKUP_COLUMNS = ['id', 'name']


class ProductivityQueries:
    """
    Data loading class for the productivity dashboard.

    Usage:
        queries = ProductivityQueries()

        agents_df = queries.get_agents()
        records_df = queries.get_records(start_date, end_date)
        ok, result = queries.add_record(agent_id, role_id, 5, date.today())
    """

    def __init__(self, engine=None):
        """
        Args:
            engine: Optional SQLAlchemy engine (defaults to the shared pooled engine)
        """
        self._engine = engine
        self.validator = ProductivityValidator()

    @property
    def engine(self):
        """Lazy load database engine."""
        if self._engine is None:
            self._engine = get_db_engine()
        return self._engine

    # =========================================================================
    # LOOKUP DATA
    # =========================================================================

    def get_agents(self) -> pd.DataFrame:
        """Get all agents ordered by name. Columns: id, name"""
        query = """
            SELECT id, name
            FROM agents
            ORDER BY name
        """
        return self._execute_query(query, {}, "agents", LOOKUP_COLUMNS)

    def get_roles(self) -> pd.DataFrame:
        """Get all leadership roles ordered by name. Columns: id, name"""
        query = """
            SELECT id, name
            FROM leadership_roles
            ORDER BY name
        """
        return self._execute_query(query, {}, "leadership_roles", LOOKUP_COLUMNS)

    # =========================================================================
    # PRODUCTIVITY RECORDS
    # =========================================================================

    def get_records(
        self,
        start_date: date = None,
        end_date: date = None,
        agent_id: str = None
    ) -> pd.DataFrame:
        """
        Load productivity records with joined agent and role names.

        Args:
            start_date: Optional first day (inclusive)
            end_date: Optional last day (inclusive)
            agent_id: Optional single agent

        Returns:
            DataFrame with RECORD_COLUMNS, newest date first
        """
        query = """
            SELECT
                r.id,
                r.agent_id,
                r.leadership_role_id,
                r.updates_count,
                r.date,
                r.created_at,
                a.name AS agent_name,
                lr.name AS leadership_role_name
            FROM productivity_records r
            LEFT JOIN agents a ON a.id = r.agent_id
            LEFT JOIN leadership_roles lr ON lr.id = r.leadership_role_id
            WHERE 1 = 1
        """
        params = {}

        if start_date:
            query += " AND r.date >= :start_date"
            params['start_date'] = _as_iso(start_date)
        if end_date:
            query += " AND r.date <= :end_date"
            params['end_date'] = _as_iso(end_date)
        if agent_id:
            query += " AND r.agent_id = :agent_id"
            params['agent_id'] = agent_id

        query += " ORDER BY r.date DESC, r.created_at DESC"

        return self._execute_query(query, params, "productivity_records", RECORD_COLUMNS)

    def add_record(
        self,
        agent_id: str,
        leadership_role_id: str,
        updates_count,
        record_date
    ) -> Tuple[bool, Dict]:
        """
        Append a productivity record. The store assigns id and created_at.

        Returns:
            Tuple of (success, stored_record) or (False, {'error': message})
        """
        is_valid, error, cleaned = self.validator.validate_record_input(
            agent_id, leadership_role_id, updates_count, record_date
        )
        if not is_valid:
            return False, {'error': error}

        record = {
            'id': str(uuid.uuid4()),
            'agent_id': cleaned['agent_id'],
            'leadership_role_id': cleaned['leadership_role_id'],
            'updates_count': cleaned['updates_count'],
            'date': cleaned['date'].isoformat(),
            'created_at': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
        }

        query = text("""
            INSERT INTO productivity_records
                (id, agent_id, leadership_role_id, updates_count, date, created_at)
            VALUES
                (:id, :agent_id, :leadership_role_id, :updates_count, :date, :created_at)
        """)

        try:
            with get_transaction(self.engine) as conn:
                conn.execute(query, record)
        except SQLAlchemyError as e:
            logger.error(f"Error inserting productivity record: {e}")
            return False, {'error': "Ocorreu um erro ao salvar os dados. Tente novamente."}

        logger.info(
            f"Productivity record {record['id']} saved: agent={record['agent_id']}, "
            f"updates={record['updates_count']}, date={record['date']}"
        )

        return True, self._with_names(record)

    def _with_names(self, record: Dict) -> Dict:
        """Attach agent/role display names to a stored record."""
        stored = dict(record)
        stored['agent_name'] = self._lookup_name('agents', record['agent_id'])
        stored['leadership_role_name'] = self._lookup_name('leadership_roles', record['leadership_role_id'])
        return stored

    def _lookup_name(self, table: str, key: str) -> Optional[str]:
        try:
            rows = execute_query(f"SELECT name FROM {table} WHERE id = :id", {'id': key}, engine=self.engine)
        except SQLAlchemyError as e:
            logger.warning(f"Could not resolve {table} name for {key}: {e}")
            return None
        return rows[0]['name'] if rows else None

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def _execute_query(
        self,
        query: str,
        params: dict,
        query_name: str = "query",
        columns: list = None
    ) -> pd.DataFrame:
        """
        Execute SQL query and return DataFrame.

        Returns:
            DataFrame with results (empty with `columns` on failure)
        """
        try:
            logger.debug(f"Executing {query_name}")
            df = execute_query_df(query, params, engine=self.engine)
            logger.debug(f"{query_name} returned {len(df)} rows")
            return df
        except Exception as e:
            logger.error(f"Error executing {query_name}: {e}")
            return pd.DataFrame(columns=columns)


def _as_iso(value) -> str:
    """Bind dates as 'YYYY-MM-DD' so MySQL and SQLite compare them the same way."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat() if isinstance(value, date) else str(value)
