import uuid
from datetime import date

from sqlalchemy import text

from utils.productivity import ProductivityQueries, compute_metrics
from utils.productivity.constants import RECORD_COLUMNS
from utils.productivity.validators import ProductivityValidator

from conftest import NOW


def _insert(engine, record_id, agent_id, count, day, created_at):
    with engine.begin() as conn:
        conn.execute(
            text("""
                INSERT INTO productivity_records
                    (id, agent_id, leadership_role_id, updates_count, date, created_at)
                VALUES (:id, :agent_id, 'r1', :count, :day, :created_at)
            """),
            {'id': record_id, 'agent_id': agent_id, 'count': count, 'day': day, 'created_at': created_at},
        )


def test_lookups_are_ordered_by_name(seeded_engine):
    queries = ProductivityQueries(seeded_engine)

    assert queries.get_agents()['name'].tolist() == ['Ana', 'Carlos', 'Monica']
    assert queries.get_roles()['name'].tolist() == ['Ligação', 'Mensagem']


def test_add_record_assigns_id_and_created_at(seeded_engine):
    queries = ProductivityQueries(seeded_engine)

    ok, stored = queries.add_record('a1', 'r2', '6', '2024-01-10')

    assert ok is True
    assert uuid.UUID(stored['id'])
    assert stored['created_at']
    assert stored['updates_count'] == 6
    assert stored['date'] == '2024-01-10'
    assert stored['agent_name'] == 'Monica'
    assert stored['leadership_role_name'] == 'Mensagem'

    records = queries.get_records()
    assert len(records) == 1
    assert records.iloc[0]['id'] == stored['id']


def test_add_record_rejects_invalid_input(seeded_engine):
    queries = ProductivityQueries(seeded_engine)

    ok, result = queries.add_record('a1', 'r1', 0, '2024-01-10')

    assert ok is False
    assert result == {'error': ProductivityValidator.MSG_INVALID_COUNT}
    assert queries.get_records().empty


def test_add_record_store_failure_returns_error(bare_engine):
    ok, result = ProductivityQueries(bare_engine).add_record('a1', 'r1', 3, '2024-01-10')

    assert ok is False
    assert 'error' in result


def test_records_newest_first_with_joined_names(seeded_engine):
    _insert(seeded_engine, 'x1', 'a1', 1, '2024-01-05', '2024-01-05 09:00:00')
    _insert(seeded_engine, 'x2', 'a2', 2, '2024-01-10', '2024-01-10 09:00:00')
    _insert(seeded_engine, 'x3', 'a3', 3, '2024-01-10', '2024-01-10 18:00:00')

    records = ProductivityQueries(seeded_engine).get_records()

    assert list(records.columns) == RECORD_COLUMNS
    assert records['id'].tolist() == ['x3', 'x2', 'x1']
    assert records['agent_name'].tolist() == ['Ana', 'Carlos', 'Monica']
    assert set(records['leadership_role_name']) == {'Ligação'}


def test_records_filters(seeded_engine):
    _insert(seeded_engine, 'x1', 'a1', 1, '2024-01-05', '2024-01-05 09:00:00')
    _insert(seeded_engine, 'x2', 'a2', 2, '2024-01-10', '2024-01-10 09:00:00')
    _insert(seeded_engine, 'x3', 'a1', 3, '2024-01-12', '2024-01-12 09:00:00')
    queries = ProductivityQueries(seeded_engine)

    in_range = queries.get_records(start_date=date(2024, 1, 5), end_date=date(2024, 1, 10))
    only_monica = queries.get_records(agent_id='a1')

    assert sorted(in_range['id']) == ['x1', 'x2']
    assert sorted(only_monica['id']) == ['x1', 'x3']


def test_read_failure_returns_empty_frame(bare_engine):
    records = ProductivityQueries(bare_engine).get_records()

    assert records.empty
    assert list(records.columns) == RECORD_COLUMNS


def test_unknown_agent_reaches_engine_as_unknown(seeded_engine):
    queries = ProductivityQueries(seeded_engine)
    queries.add_record('ghost', 'r1', 4, '2024-01-15')
    queries.add_record('a1', 'r1', 2, '2024-01-15')

    metrics = compute_metrics(queries.get_records(), agents=queries.get_agents(), now=NOW)

    assert metrics['total_updates'] == 6
    assert metrics['top_performer'] == {'agent_name': 'Unknown', 'updates_count': 4}


def test_add_record_with_malformed_count_returns_error(seeded_engine):
    queries = ProductivityQueries(seeded_engine)

    ok, result = queries.add_record('a1', 'r1', '++5', '2024-01-10')

    assert ok is False
    assert result == {'error': ProductivityValidator.MSG_INVALID_COUNT}
    assert queries.get_records().empty
