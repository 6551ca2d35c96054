from datetime import date

import pandas as pd
import pytest

from utils.productivity.filters import ProductivityFilters, TeamFilterResult, filter_team


@pytest.fixture
def performance_df():
    return pd.DataFrame([
        {'agent_id': 'a1', 'agent_name': 'Monica', 'total_updates': 10, 'weekly_updates': 1,
         'daily_average': 0, 'last_update': '2024-01-10'},
        {'agent_id': 'a2', 'agent_name': 'Carlos', 'total_updates': 5, 'weekly_updates': 7,
         'daily_average': 1, 'last_update': '2024-01-14'},
        {'agent_id': 'a3', 'agent_name': 'ana', 'total_updates': 10, 'weekly_updates': 0,
         'daily_average': 0, 'last_update': '2024-01-02'},
    ])


def test_default_sort_is_total_descending_and_stable(performance_df):
    result = filter_team(performance_df)

    assert result['agent_name'].tolist() == ['Monica', 'ana', 'Carlos']


def test_sort_by_weekly_updates(performance_df):
    result = filter_team(performance_df, sort_by='weekly_updates')

    assert result['agent_name'].tolist() == ['Carlos', 'Monica', 'ana']


def test_sort_by_name_is_case_insensitive(performance_df):
    result = filter_team(performance_df, sort_by='name')

    assert result['agent_name'].tolist() == ['ana', 'Carlos', 'Monica']


def test_search_is_case_insensitive_substring(performance_df):
    assert filter_team(performance_df, search='MON')['agent_name'].tolist() == ['Monica']
    assert filter_team(performance_df, search='  ')['agent_name'].tolist() == ['Monica', 'ana', 'Carlos']


def test_role_filter_keeps_agents_with_a_record_under_role(performance_df):
    records = [
        {'agent_id': 'a2', 'agent_name': 'Carlos', 'leadership_role_id': 'r2'},
        {'agent_id': 'a1', 'agent_name': 'Monica', 'leadership_role_id': 'r1'},
    ]

    result = filter_team(performance_df, role_id='r2', records=records)

    assert result['agent_name'].tolist() == ['Carlos']


def test_role_filter_without_records_is_empty(performance_df):
    assert filter_team(performance_df, role_id='r2').empty


def test_filter_team_on_empty_input():
    assert filter_team(pd.DataFrame(columns=['agent_name'])).empty
    assert filter_team(None).empty


def test_team_filter_result_is_active():
    assert not TeamFilterResult().is_active
    assert TeamFilterResult(search='mo').is_active
    assert TeamFilterResult(role_id='r1').is_active


def test_filter_summary_for_period():
    summary = ProductivityFilters.get_filter_summary({'period': 'month', 'agent_id': None})

    assert summary == "Este mês • Todos os agentes"


def test_filter_summary_for_custom_range():
    summary = ProductivityFilters.get_filter_summary({
        'period': 'week',
        'use_custom_range': True,
        'start_date': date(2024, 1, 1),
        'end_date': date(2024, 1, 31),
        'agent_id': 'a1',
        'agent_name': 'Monica',
    })

    assert summary == "01/01/2024 - 31/01/2024 • Monica"


def test_validate_filters():
    assert ProductivityFilters.validate_filters({'period': 'week'}) == (True, None)
    assert ProductivityFilters.validate_filters({'period': 'year'})[0] is False
    assert ProductivityFilters.validate_filters({
        'period': 'week',
        'start_date': date(2024, 2, 1),
        'end_date': date(2024, 1, 1),
    })[0] is False
