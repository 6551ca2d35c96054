# utils/productivity/charts.py
"""
Altair Chart Builders for the Productivity Dashboard

All visualization components using Altair:
- Metric cards (using st.metric)
- Weekly updates line chart (top agents)
- Agent ranking bar chart
- Leadership role distribution (donut)
- Monthly updates bar chart (agent details)
"""

import logging
from typing import Dict, List, Optional

import altair as alt
import pandas as pd
import streamlit as st

from .aggregation import WEEKLY_BASE_COLUMNS
from .constants import (
    AGENT_COLORS,
    CHART_HEIGHT,
    CHART_WIDTH,
    COLORS,
    PERIOD_DESCRIPTIONS,
    PIE_CHART_HEIGHT,
    PIE_CHART_WIDTH,
    ROLE_COLORS,
    TOP_AGENTS_IN_RANKING,
    TOP_AGENTS_IN_WEEKLY_CHART,
)

logger = logging.getLogger(__name__)


class ProductivityCharts:
    """
    Chart builders for the productivity dashboard.

    All methods are static - can be called without instantiation.

    Usage:
        ProductivityCharts.render_metric_cards(metrics, 'week')
        chart = ProductivityCharts.build_weekly_chart(weekly_df)
        st.altair_chart(chart, use_container_width=True)
    """

    # =========================================================================
    # METRIC CARDS (Using st.metric)
    # =========================================================================

    @staticmethod
    def render_metric_cards(metrics: Dict, period: str = 'week', custom_range: bool = False):
        """
        Render the four dashboard cards.

        Args:
            metrics: Output of compute_metrics
            period: Selected period (caption under the total)
            custom_range: True when an explicit date range is active
        """
        caption = "Intervalo personalizado" if custom_range else PERIOD_DESCRIPTIONS.get(period, '')
        top = metrics.get('top_performer', {})

        col1, col2, col3, col4 = st.columns(4)

        with col1:
            st.metric(
                label="📈 Total de atualizações",
                value=f"{metrics.get('total_updates', 0):,}".replace(',', '.'),
                help=caption,
            )

        with col2:
            st.metric(
                label="👥 Agentes ativos",
                value=metrics.get('total_agents', 0),
                help="Agentes com registros no período",
            )

        with col3:
            st.metric(
                label="📊 Média por agente",
                value=metrics.get('average_updates_per_agent', 0),
                help="Atualizações por agente no período",
            )

        with col4:
            st.metric(
                label="🏆 Destaque",
                value=top.get('agent_name', 'N/A'),
                delta=f"{top.get('updates_count', 0)} atualizações",
                delta_color="off",
            )

    # =========================================================================
    # WEEKLY LINE CHART
    # =========================================================================

    @staticmethod
    def prepare_weekly_long(
        weekly_df: pd.DataFrame,
        agents: Optional[List[str]] = None,
        top_n: int = TOP_AGENTS_IN_WEEKLY_CHART
    ) -> pd.DataFrame:
        """
        Melt the wide weekly series into (week, week_start, agent, updates).

        The x label pairs the week-of-month label with the day/month of the
        week start, since "1ª semana" repeats every month.
        """
        if weekly_df is None or weekly_df.empty:
            return pd.DataFrame(columns=['week', 'week_start', 'agent', 'updates'])

        agent_columns = [c for c in weekly_df.columns if c not in WEEKLY_BASE_COLUMNS]
        if agents is not None:
            agent_columns = [a for a in agents if a in agent_columns]
        else:
            totals = weekly_df[agent_columns].sum().sort_values(ascending=False, kind='stable')
            agent_columns = totals.index.tolist()
        agent_columns = agent_columns[:top_n]

        df = weekly_df.copy()
        df['week'] = [
            f"{label} ({pd.Timestamp(start).strftime('%d/%m')})"
            for label, start in zip(df['week_label'], df['week_start'])
        ]

        long_df = df.melt(
            id_vars=['week', 'week_start'],
            value_vars=agent_columns,
            var_name='agent',
            value_name='updates'
        )
        long_df['updates'] = long_df['updates'].astype(int)
        return long_df

    @staticmethod
    def build_weekly_chart(
        weekly_df: pd.DataFrame,
        agents: Optional[List[str]] = None,
        top_n: int = TOP_AGENTS_IN_WEEKLY_CHART,
        title: str = "📈 Atualizações por semana"
    ) -> alt.Chart:
        """
        Build the weekly updates line chart, one line per agent.

        Args:
            weekly_df: Output of compute_weekly_series
            agents: Agent names to plot (default: top agents in the series)
            top_n: Maximum number of lines
            title: Chart title

        Returns:
            Altair chart
        """
        long_df = ProductivityCharts.prepare_weekly_long(weekly_df, agents, top_n)
        if long_df.empty:
            return ProductivityCharts._empty_chart("Nenhum dado semanal no período")

        week_order = long_df.drop_duplicates('week').sort_values('week_start')['week'].tolist()
        agent_order = long_df['agent'].drop_duplicates().tolist()

        color_scale = alt.Scale(
            domain=agent_order,
            range=[AGENT_COLORS[i % len(AGENT_COLORS)] for i in range(len(agent_order))]
        )

        chart = alt.Chart(long_df).mark_line(
            point=True,
            strokeWidth=2
        ).encode(
            x=alt.X('week:N', sort=week_order, title='Semana', axis=alt.Axis(labelAngle=0)),
            y=alt.Y('updates:Q', title='Atualizações'),
            color=alt.Color('agent:N', scale=color_scale, legend=alt.Legend(orient='bottom', title=None)),
            tooltip=[
                alt.Tooltip('week:N', title='Semana'),
                alt.Tooltip('agent:N', title='Agente'),
                alt.Tooltip('updates:Q', title='Atualizações', format=',d')
            ]
        ).properties(
            width=CHART_WIDTH,
            height=CHART_HEIGHT,
            title=title
        )

        return chart

    # =========================================================================
    # RANKING BAR CHART
    # =========================================================================

    @staticmethod
    def build_ranking_chart(
        performance_df: pd.DataFrame,
        top_n: int = TOP_AGENTS_IN_RANKING,
        title: str = "🏆 Ranking de agentes"
    ) -> alt.Chart:
        """
        Build horizontal bar chart of the top agents by total updates.

        Args:
            performance_df: Output of compute_agent_performance (already ranked)
            top_n: Number of bars
            title: Chart title

        Returns:
            Altair chart
        """
        if performance_df is None or performance_df.empty:
            return ProductivityCharts._empty_chart("Nenhum agente no período")

        df = performance_df.head(top_n).copy()
        rank_order = df['agent_name'].tolist()

        bars = alt.Chart(df).mark_bar(
            color=COLORS['updates'],
            cornerRadiusEnd=4
        ).encode(
            x=alt.X('total_updates:Q', title='Total de atualizações'),
            y=alt.Y('agent_name:N', sort=rank_order, title=None),
            tooltip=[
                alt.Tooltip('agent_name:N', title='Agente'),
                alt.Tooltip('total_updates:Q', title='Total', format=',d'),
                alt.Tooltip('weekly_updates:Q', title='Semana atual', format=',d'),
                alt.Tooltip('daily_average:Q', title='Média diária', format=',d')
            ]
        )

        text = alt.Chart(df).mark_text(
            align='left', baseline='middle', dx=4, fontSize=11
        ).encode(
            x=alt.X('total_updates:Q'),
            y=alt.Y('agent_name:N', sort=rank_order),
            text=alt.Text('total_updates:Q', format=',d'),
            color=alt.value(COLORS['text_dark'])
        )

        return alt.layer(bars, text).properties(
            width=CHART_WIDTH,
            height=max(40 * len(df), 120),
            title=title
        )

    # =========================================================================
    # AGENT DETAIL CHARTS
    # =========================================================================

    @staticmethod
    def build_role_distribution_chart(
        distribution_df: pd.DataFrame,
        title: str = "Distribuição por função"
    ) -> alt.Chart:
        """
        Build donut chart of updates per leadership role.

        Args:
            distribution_df: Output of compute_role_distribution
        """
        if distribution_df is None or distribution_df.empty:
            return ProductivityCharts._empty_chart("Nenhum registro encontrado")

        role_order = distribution_df['role_name'].tolist()
        color_scale = alt.Scale(
            domain=role_order,
            range=[ROLE_COLORS[i % len(ROLE_COLORS)] for i in range(len(role_order))]
        )

        return alt.Chart(distribution_df).mark_arc(innerRadius=50).encode(
            theta=alt.Theta('updates_count:Q', stack=True),
            color=alt.Color('role_name:N', scale=color_scale, legend=alt.Legend(title=None)),
            tooltip=[
                alt.Tooltip('role_name:N', title='Função'),
                alt.Tooltip('updates_count:Q', title='Atualizações', format=',d'),
                alt.Tooltip('percent:Q', title='%', format='.1f')
            ]
        ).properties(
            width=PIE_CHART_WIDTH,
            height=PIE_CHART_HEIGHT,
            title=title
        )

    @staticmethod
    def build_monthly_chart(
        monthly_df: pd.DataFrame,
        title: str = "Atualizações por mês"
    ) -> alt.Chart:
        """
        Build bar chart of monthly updates.

        Args:
            monthly_df: Output of compute_monthly_series
        """
        if monthly_df is None or monthly_df.empty:
            return ProductivityCharts._empty_chart("Nenhum registro encontrado")

        month_order = monthly_df['month_label'].tolist()

        bars = alt.Chart(monthly_df).mark_bar(
            color=COLORS['updates'],
            cornerRadiusTopLeft=4,
            cornerRadiusTopRight=4
        ).encode(
            x=alt.X('month_label:N', sort=month_order, title=None, axis=alt.Axis(labelAngle=0)),
            y=alt.Y('updates_count:Q', title='Atualizações'),
            tooltip=[
                alt.Tooltip('month_label:N', title='Mês'),
                alt.Tooltip('updates_count:Q', title='Atualizações', format=',d')
            ]
        )

        text = alt.Chart(monthly_df).mark_text(
            align='center', baseline='bottom', dy=-5, fontSize=10
        ).encode(
            x=alt.X('month_label:N', sort=month_order),
            y=alt.Y('updates_count:Q'),
            text=alt.Text('updates_count:Q', format=',d'),
            color=alt.value(COLORS['text_dark'])
        )

        return alt.layer(bars, text).properties(
            width=PIE_CHART_WIDTH,
            height=PIE_CHART_HEIGHT,
            title=title
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _empty_chart(message: str = "Nenhum dado disponível") -> alt.Chart:
        """Create an empty chart with a message."""
        return alt.Chart(pd.DataFrame({'note': [message]})).mark_text(
            text=message,
            fontSize=16,
            color=COLORS['text_light']
        ).properties(
            width=CHART_WIDTH,
            height=200
        )
