# utils/__init__.py
"""
Shared utilities for the productivity dashboard pages

- auth: manager sign-in and session
- config: settings from st.secrets / .env
- db: engine, health check and query helpers
- productivity: aggregation engine, record store and page components

Usage:
    from utils import AuthManager, config, check_db_connection
"""

from .auth import AuthManager
from .config import config, Config
from .db import (
    get_db_engine,
    check_db_connection,
    get_connection_pool_status,
    get_transaction,
    execute_query,
    execute_query_df,
    execute_script,
)

__all__ = [
    'AuthManager',
    'config',
    'Config',
    'get_db_engine',
    'check_db_connection',
    'get_connection_pool_status',
    'get_transaction',
    'execute_query',
    'execute_query_df',
    'execute_script',
]

__version__ = '1.0.0'
