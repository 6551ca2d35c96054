import altair as alt
import pandas as pd

from utils.productivity import compute_agent_performance, compute_weekly_series
from utils.productivity.charts import ProductivityCharts

from conftest import NOW, make_record


RECORDS = [
    make_record('a1', 3, '2024-01-02'),
    make_record('a2', 8, '2024-01-09'),
    make_record('a3', 1, '2024-01-10'),
    make_record('a1', 2, '2024-01-11'),
]


def test_empty_inputs_render_message_charts():
    for chart in (
        ProductivityCharts.build_weekly_chart(pd.DataFrame()),
        ProductivityCharts.build_ranking_chart(pd.DataFrame()),
        ProductivityCharts.build_role_distribution_chart(pd.DataFrame()),
        ProductivityCharts.build_monthly_chart(pd.DataFrame()),
    ):
        vega = chart.to_dict()
        assert vega['mark']['type'] == 'text'


def test_weekly_long_format_limits_agents(agents):
    weekly = compute_weekly_series(RECORDS, agents=agents, now=NOW)

    long_df = ProductivityCharts.prepare_weekly_long(weekly, top_n=2)

    assert set(long_df['agent']) == {'Carlos', 'Monica'}
    assert len(long_df) == 2 * len(weekly)
    assert long_df['week'].iloc[0].startswith('1ª semana')


def test_weekly_long_format_follows_given_agents(agents):
    weekly = compute_weekly_series(RECORDS, agents=agents, now=NOW)

    long_df = ProductivityCharts.prepare_weekly_long(weekly, agents=['Ana', 'Nobody'])

    assert set(long_df['agent']) == {'Ana'}


def test_weekly_chart_is_a_line_chart(agents):
    weekly = compute_weekly_series(RECORDS, agents=agents, now=NOW)

    vega = ProductivityCharts.build_weekly_chart(weekly).to_dict()

    assert vega['mark']['type'] == 'line'
    assert vega['encoding']['color']['field'] == 'agent'


def test_ranking_chart_shows_top_agents(agents):
    perf = compute_agent_performance(RECORDS, agents=agents, now=NOW)

    chart = ProductivityCharts.build_ranking_chart(perf, top_n=2)

    assert isinstance(chart, alt.LayerChart)
    datasets = chart.to_dict()['datasets']
    assert datasets
    for rows in datasets.values():
        assert [r['agent_name'] for r in rows] == ['Carlos', 'Monica']


def test_role_distribution_chart_is_a_donut():
    dist = pd.DataFrame({'role_name': ['Ligação'], 'updates_count': [3], 'percent': [100.0]})

    vega = ProductivityCharts.build_role_distribution_chart(dist).to_dict()

    assert vega['mark']['type'] == 'arc'
    assert vega['mark']['innerRadius'] == 50
