# utils/productivity/filters.py
"""
Filter Components for the Productivity Dashboard

Renders filter UI elements:
- Period selector (Semana/Mês/Trimestre)
- Agent selector
- Optional custom date range
- Team screen search / role / sort controls

The team filter itself (filter_team) is pure pandas so it can be used
without a Streamlit runtime.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Optional, Tuple

import pandas as pd
import streamlit as st

from .aggregation import DateRange
from .constants import (
    ALL_AGENTS,
    PERIOD_DESCRIPTIONS,
    PERIOD_LABELS,
    PERIOD_TYPES,
    TEAM_SORT_OPTIONS,
)

logger = logging.getLogger(__name__)


# =============================================================================
# TEAM FILTERS
# =============================================================================

@dataclass
class TeamFilterResult:
    """
    Values selected on the team screen.

    Attributes:
        search: Free-text agent name search ('' = no search)
        role_id: Leadership role id (None = all roles)
        sort_by: One of TEAM_SORT_OPTIONS
    """
    search: str = ''
    role_id: Optional[str] = None
    sort_by: str = 'total_updates'

    @property
    def is_active(self) -> bool:
        return bool(self.search) or self.role_id is not None


def filter_team(
    performance_df: pd.DataFrame,
    search: str = '',
    role_id: Optional[str] = None,
    records=None,
    sort_by: str = 'total_updates'
) -> pd.DataFrame:
    """
    Filter and sort the agent ranking for the team screen.

    Args:
        performance_df: Output of compute_agent_performance
        search: Case-insensitive substring matched against agent_name
        role_id: Keep only agents with at least one record under this role
        records: Records used for the role filter (DataFrame or list of dicts)
        sort_by: 'total_updates' / 'weekly_updates' (descending) or 'name'

    Returns:
        Filtered copy of performance_df
    """
    if performance_df is None or performance_df.empty:
        return pd.DataFrame(columns=getattr(performance_df, 'columns', []))

    df = performance_df.copy()

    query = (search or '').strip().lower()
    if query:
        mask = df['agent_name'].astype(str).str.lower().str.contains(query, regex=False, na=False)
        df = df[mask]

    if role_id and role_id != ALL_AGENTS:
        agent_names, agent_ids = _agents_with_role(records, role_id)
        df = df[df['agent_name'].isin(agent_names) | df['agent_id'].isin(agent_ids)]

    if sort_by == 'name':
        df = df.sort_values(
            'agent_name', key=lambda s: s.astype(str).str.lower(), kind='stable'
        )
    elif sort_by in ('total_updates', 'weekly_updates'):
        df = df.sort_values(sort_by, ascending=False, kind='stable')
    else:
        logger.warning(f"Unknown team sort option: {sort_by!r}")

    return df.reset_index(drop=True)


def _agents_with_role(records, role_id: str) -> Tuple[set, set]:
    """Names and ids of agents that logged at least one record under role_id."""
    if records is None:
        return set(), set()

    records_df = records if isinstance(records, pd.DataFrame) else pd.DataFrame(list(records))
    if records_df.empty or 'leadership_role_id' not in records_df.columns:
        return set(), set()

    matched = records_df[records_df['leadership_role_id'].astype(str) == str(role_id)]
    names = set(matched['agent_name'].dropna()) if 'agent_name' in matched.columns else set()
    ids = set(matched['agent_id'].dropna().astype(str)) if 'agent_id' in matched.columns else set()
    return names, ids


def render_team_filters(roles_df: pd.DataFrame) -> TeamFilterResult:
    """Render search / role / sort controls in the main area."""
    col_search, col_role, col_sort = st.columns([2, 1, 1])

    with col_search:
        search = st.text_input(
            "Buscar agente",
            placeholder="Buscar agentes...",
            key="team_search",
        )

    with col_role:
        role_options = {ALL_AGENTS: "Todas as funções"}
        if not roles_df.empty:
            role_options.update(dict(zip(roles_df['id'], roles_df['name'])))

        role_id = st.selectbox(
            "Função de liderança",
            options=list(role_options.keys()),
            format_func=lambda k: role_options[k],
            key="team_role",
        )

    with col_sort:
        sort_by = st.selectbox(
            "Ordenar por",
            options=list(TEAM_SORT_OPTIONS.keys()),
            format_func=lambda k: TEAM_SORT_OPTIONS[k],
            key="team_sort",
        )

    return TeamFilterResult(
        search=search.strip(),
        role_id=None if role_id == ALL_AGENTS else role_id,
        sort_by=sort_by,
    )


# =============================================================================
# DASHBOARD SIDEBAR FILTERS
# =============================================================================

class ProductivityFilters:
    """
    Sidebar filter components for the dashboard.

    Usage:
        filters = ProductivityFilters(agents_df)
        filter_values = filters.render_sidebar_filters()
    """

    def __init__(self, agents_df: pd.DataFrame):
        self.agents_df = agents_df if agents_df is not None else pd.DataFrame(columns=['id', 'name'])

    # =========================================================================
    # MAIN RENDER METHOD
    # =========================================================================

    def render_sidebar_filters(self, today: date = None) -> Dict:
        """
        Render all sidebar filters and return selected values.

        Returns:
            Dict with all filter values:
            {
                'period': str,
                'agent_id': str or None,
                'agent_name': str,
                'use_custom_range': bool,
                'date_range': DateRange or None,
                'start_date': date or None,
                'end_date': date or None
            }
        """
        today = today or date.today()

        with st.sidebar:
            st.header("🎛️ Filtros")

            period = st.radio(
                "📅 Período",
                options=PERIOD_TYPES,
                format_func=lambda p: PERIOD_LABELS[p],
                horizontal=True,
                key="dashboard_period",
            )

            agent_id, agent_name = self._render_agent_filter()

            st.divider()

            use_custom_range = st.checkbox(
                "Intervalo personalizado",
                value=False,
                key="dashboard_custom_range",
                help="Quando marcado, o intervalo substitui o período selecionado.",
            )

            start_date, end_date = None, None
            if use_custom_range:
                start_date, end_date = self._render_date_range(today)

        date_range = DateRange(start_date, end_date) if use_custom_range else None

        return {
            'period': period,
            'agent_id': agent_id,
            'agent_name': agent_name,
            'use_custom_range': use_custom_range,
            'date_range': date_range,
            'start_date': start_date,
            'end_date': end_date,
        }

    def _render_agent_filter(self) -> Tuple[Optional[str], str]:
        options = {ALL_AGENTS: "Todos os agentes"}
        if not self.agents_df.empty:
            options.update(dict(zip(self.agents_df['id'], self.agents_df['name'])))

        selected = st.selectbox(
            "👤 Agente",
            options=list(options.keys()),
            format_func=lambda k: options[k],
            key="dashboard_agent",
        )

        if selected == ALL_AGENTS:
            return None, options[ALL_AGENTS]
        return selected, options[selected]

    @staticmethod
    def _render_date_range(today: date) -> Tuple[Optional[date], Optional[date]]:
        col_d1, col_d2 = st.columns(2)
        with col_d1:
            start_date = st.date_input(
                "Início",
                value=today - timedelta(days=30),
                format="DD/MM/YYYY",
                key="dashboard_start_date",
            )
        with col_d2:
            end_date = st.date_input(
                "Fim",
                value=today,
                format="DD/MM/YYYY",
                key="dashboard_end_date",
            )

        if start_date and end_date and start_date > end_date:
            st.error("⚠️ A data inicial deve ser anterior à data final")
            end_date = start_date

        return start_date, end_date

    # =========================================================================
    # FILTER STATE HELPERS
    # =========================================================================

    @staticmethod
    def get_filter_summary(filters: Dict) -> str:
        """Get human-readable summary of current filters."""
        parts = []

        if filters.get('use_custom_range'):
            start = filters.get('start_date')
            end = filters.get('end_date')
            start_text = start.strftime('%d/%m/%Y') if start else 'início'
            end_text = end.strftime('%d/%m/%Y') if end else 'hoje'
            parts.append(f"{start_text} - {end_text}")
        else:
            parts.append(PERIOD_DESCRIPTIONS.get(filters.get('period'), filters.get('period', '')))

        if filters.get('agent_id'):
            parts.append(filters.get('agent_name') or filters['agent_id'])
        else:
            parts.append("Todos os agentes")

        return " • ".join(parts)

    @staticmethod
    def validate_filters(filters: Dict) -> Tuple[bool, Optional[str]]:
        """
        Validate filter values.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if filters.get('period') not in PERIOD_TYPES:
            return False, "Período inválido"

        start = filters.get('start_date')
        end = filters.get('end_date')
        if start and end and start > end:
            return False, "A data inicial deve ser anterior à data final"

        return True, None

