# utils/productivity/__init__.py
"""
Productivity Dashboard Module

Utilities for the team productivity pages (dashboard, record form, team).

Components:
- aggregation: Pure metric/ranking/weekly-series calculations
- queries: Record store (agents, leadership roles, productivity records)
- validators: New record input validation
- filters: Sidebar and team filter components
- charts: Altair visualizations
- export: Formatted Excel report generation
- fragments: Streamlit fragments and the agent details dialog

Usage:
    from utils.productivity import (
        ProductivityQueries,
        ProductivityFilters,
        ProductivityCharts,
        ProductivityExport,
        compute_metrics,
        compute_agent_performance,
        compute_weekly_series,
    )
"""

from .aggregation import (
    DateRange,
    resolve_date_range,
    normalize_records,
    compute_metrics,
    compute_agent_performance,
    compute_weekly_series,
    compute_role_distribution,
    compute_monthly_series,
    compute_agent_summary,
    compute_weekly_trend,
    compute_team_overview,
)
from .queries import ProductivityQueries
from .validators import ProductivityValidator, validate_record_input
from .filters import ProductivityFilters, TeamFilterResult, filter_team
from .charts import ProductivityCharts
from .export import ProductivityExport

# Constants
from .constants import (
    PERIOD_TYPES,
    PERIOD_LABELS,
    UNKNOWN_LABEL,
    NOT_AVAILABLE,
    ALL_AGENTS,
    DEFAULT_MAX_WEEKS,
    COLORS,
)

__all__ = [
    # Aggregation
    'DateRange',
    'resolve_date_range',
    'normalize_records',
    'compute_metrics',
    'compute_agent_performance',
    'compute_weekly_series',
    'compute_role_distribution',
    'compute_monthly_series',
    'compute_agent_summary',
    'compute_weekly_trend',
    'compute_team_overview',

    # Classes
    'ProductivityQueries',
    'ProductivityValidator',
    'ProductivityFilters',
    'ProductivityCharts',
    'ProductivityExport',
    'TeamFilterResult',
    'filter_team',
    'validate_record_input',

    # Constants
    'PERIOD_TYPES',
    'PERIOD_LABELS',
    'UNKNOWN_LABEL',
    'NOT_AVAILABLE',
    'ALL_AGENTS',
    'DEFAULT_MAX_WEEKS',
    'COLORS',
]

__version__ = '1.0.0'
