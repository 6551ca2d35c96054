# utils/productivity/fragments.py
"""
Streamlit Fragments and Dialogs for the Productivity Dashboard

Uses @st.fragment for sections that only need to rerun when their own
widgets change, and @st.dialog for the agent details popup.
"""

import logging
from datetime import datetime
from typing import Dict, Optional

import pandas as pd
import streamlit as st

from .aggregation import (
    compute_agent_summary,
    compute_monthly_series,
    compute_role_distribution,
)
from .charts import ProductivityCharts
from .constants import (
    AGENT_COLORS,
    COLORS,
    RECENT_ACTIVITY_SIZE,
    TOP_AGENTS_IN_WEEKLY_CHART,
)
from .export import ProductivityExport

logger = logging.getLogger(__name__)


def format_day(value) -> str:
    """'YYYY-MM-DD' (or date) -> 'dd/mm/yyyy'; '' when missing."""
    if value is None or value == '' or (not isinstance(value, str) and pd.isna(value)):
        return ''
    return pd.Timestamp(value).strftime('%d/%m/%Y')


def initials(name: str) -> str:
    parts = [p for p in str(name).split() if p]
    return ''.join(p[0] for p in parts[:2]).upper() or '?'


# =============================================================================
# FRAGMENT: WEEKLY CHART
# =============================================================================

@st.fragment
def weekly_chart_fragment(weekly_df: pd.DataFrame, performance_df: pd.DataFrame):
    """Weekly line chart with its own "number of agents" control."""
    agent_count = max(1, min(len(performance_df), len(AGENT_COLORS)))

    top_n = st.slider(
        "Agentes no gráfico",
        min_value=1,
        max_value=max(agent_count, 2),
        value=min(TOP_AGENTS_IN_WEEKLY_CHART, agent_count),
        key="weekly_top_n",
    )

    top_agents = performance_df['agent_name'].head(top_n).tolist() if not performance_df.empty else None
    chart = ProductivityCharts.build_weekly_chart(weekly_df, agents=top_agents, top_n=top_n)
    st.altair_chart(chart, use_container_width=True)


# =============================================================================
# RECENT ACTIVITY
# =============================================================================

def render_recent_activity(performance_df: pd.DataFrame, limit: int = RECENT_ACTIVITY_SIZE):
    """Top agents with this week's count and last update date."""
    st.subheader("🕒 Atividade recente")

    if performance_df.empty:
        st.info("Nenhuma atividade no período selecionado.")
        return

    for _, row in performance_df.head(limit).iterrows():
        col_name, col_week, col_last = st.columns([3, 2, 2])
        with col_name:
            st.markdown(f"**{row['agent_name']}**")
        with col_week:
            st.caption(f"{row['weekly_updates']} atualizações na semana")
        with col_last:
            st.caption(f"Última: {format_day(row['last_update']) or '-'}")


# =============================================================================
# FRAGMENT: EXPORT
# =============================================================================

@st.fragment
def export_fragment(
    metrics: Dict,
    performance_df: pd.DataFrame,
    weekly_df: pd.DataFrame,
    filters: Dict,
    records_df: Optional[pd.DataFrame] = None
):
    """Build the Excel report on demand and offer it for download."""
    include_records = st.checkbox("Incluir registros detalhados", value=False, key="export_include_records")

    if st.button("📥 Gerar relatório Excel", key="export_generate"):
        try:
            excel_bytes = ProductivityExport().create_report(
                metrics=metrics,
                performance_df=performance_df,
                weekly_df=weekly_df,
                filters=filters,
                records_df=records_df if include_records else None,
            )
        except Exception as e:
            logger.error(f"Export failed: {e}")
            st.error("Não foi possível gerar o relatório.")
            return

        st.download_button(
            label="⬇️ Baixar relatório",
            data=excel_bytes,
            file_name=f"produtividade_{datetime.now().strftime('%Y%m%d_%H%M')}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            key="export_download",
        )


# =============================================================================
# TEAM: AGENT CARD + DETAILS DIALOG
# =============================================================================

def render_agent_card(
    rank: int,
    agent: Dict,
    trend: Optional[Dict],
    top_roles: pd.DataFrame,
    records_df: pd.DataFrame,
    roles_df: pd.DataFrame
):
    """One agent tile on the team screen."""
    with st.container(border=True):
        col_avatar, col_info = st.columns([1, 4])

        with col_avatar:
            st.markdown(f"### {initials(agent['agent_name'])}")
            st.caption(f"#{rank}")

        with col_info:
            st.markdown(f"**{agent['agent_name']}**")
            st.caption(f"Última atualização: {format_day(agent['last_update']) or '-'}")

        col_total, col_week = st.columns(2)
        with col_total:
            st.metric("Total", agent['total_updates'])
        with col_week:
            delta = None
            if trend and trend.get('change_percent') is not None:
                delta = f"{trend['change_percent']:+.1f}%"
            st.metric("Semana atual", agent['weekly_updates'], delta=delta)

        if not top_roles.empty:
            st.caption("Principais funções")
            for _, role in top_roles.iterrows():
                st.markdown(
                    f"<span style='color:{COLORS['text_light']}'>{role['role_name']}</span> "
                    f"**{role['updates_count']}**",
                    unsafe_allow_html=True,
                )

        if st.button("Ver detalhes", key=f"details_{rank}_{agent['agent_name']}", use_container_width=True):
            agent_details_dialog(agent['agent_name'], records_df, roles_df)


@st.dialog("Detalhes do agente", width="large")
def agent_details_dialog(agent_name: str, records_df: pd.DataFrame, roles_df: pd.DataFrame):
    """Summary numbers, monthly chart and role distribution for one agent."""
    summary = compute_agent_summary(records_df, agent_name, roles=roles_df)

    st.markdown(f"### {agent_name}")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Registros", summary['total_records'])
    with col2:
        st.metric("Total de atualizações", summary['total_updates'])
    with col3:
        st.metric("Média por registro", summary['average_updates_per_record'])

    col_month, col_roles = st.columns(2)
    with col_month:
        monthly_df = compute_monthly_series(records_df, agent_name=agent_name)
        st.altair_chart(ProductivityCharts.build_monthly_chart(monthly_df), use_container_width=True)
    with col_roles:
        distribution_df = compute_role_distribution(records_df, agent_name=agent_name, roles=roles_df)
        st.altair_chart(
            ProductivityCharts.build_role_distribution_chart(distribution_df),
            use_container_width=True,
        )

    last_record = summary['last_record']
    if last_record:
        st.info(
            f"Último registro: {format_day(last_record['date'])} • "
            f"{last_record['leadership_role_name']} • "
            f"{last_record['updates_count']} atualizações"
        )
    else:
        st.info("Nenhum registro encontrado para este agente.")
