from datetime import date

from openpyxl import load_workbook

from utils.productivity import (
    ProductivityExport,
    compute_agent_performance,
    compute_metrics,
    compute_weekly_series,
    normalize_records,
)

from conftest import NOW, make_record


RECORDS = [
    make_record('a1', 3, '2024-01-02'),
    make_record('a2', 8, '2024-01-09'),
    make_record('a1', 2, '2024-01-14'),
]


def _report(agents, filters, with_records=False):
    metrics = compute_metrics(RECORDS, period='month', agents=agents, now=NOW)
    perf = compute_agent_performance(RECORDS, agents=agents, now=NOW)
    weekly = compute_weekly_series(RECORDS, agents=agents, now=NOW)
    records_df = normalize_records(RECORDS, agents) if with_records else None

    output = ProductivityExport().create_report(metrics, perf, weekly, filters, records_df)
    return load_workbook(output)


def test_report_sheets_and_ranking(agents):
    wb = _report(agents, {'period': 'month', 'agent_name': None})

    assert wb.sheetnames == ['Resumo', 'Ranking', 'Semanal']

    ranking = wb['Ranking']
    assert ranking['A1'].value == '#'
    assert ranking['B1'].value == 'Agente'
    assert [ranking['B2'].value, ranking['C2'].value] == ['Carlos', 8]
    assert [ranking['A3'].value, ranking['B3'].value, ranking['C3'].value] == [2, 'Monica', 5]


def test_cover_sheet_describes_filters(agents):
    wb = _report(agents, {
        'use_custom_range': True,
        'start_date': date(2024, 1, 1),
        'end_date': date(2024, 1, 31),
        'agent_name': 'Monica',
    })

    cover = wb['Resumo']
    values = {cover.cell(row=r, column=1).value: cover.cell(row=r, column=2).value
              for r in range(1, cover.max_row + 1)}

    assert cover['A1'].value == 'Relatório de Produtividade'
    assert values['Período:'] == '01/01/2024 a 31/01/2024'
    assert values['Agente:'] == 'Monica'
    assert values['Total de atualizações'] == 13
    assert values['Destaque'] == 'Carlos'


def test_weekly_sheet_has_agent_columns(agents):
    weekly = _report(agents, {'period': 'week'})['Semanal']

    headers = [cell.value for cell in weekly[1]]

    assert headers[:3] == ['Início da semana', 'Semana', 'Total']
    assert set(headers[3:]) == {'Monica', 'Carlos'}


def test_records_sheet_is_optional(agents):
    wb = _report(agents, {'period': 'week'}, with_records=True)

    assert 'Registros' in wb.sheetnames
    assert wb['Registros'].max_row == len(RECORDS) + 1
