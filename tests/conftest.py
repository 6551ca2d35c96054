"""
Pytest configuration for the productivity dashboard.

Provides fixtures for:
- In-memory SQLite engine initialised from db/schema.sql
- Seeded lookup tables (agents, leadership roles) and a manager login
- A fixed reference "now" for the aggregation engine
"""

import os

# Must be set before utils.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("TIMEZONE", "America/Sao_Paulo")

from datetime import datetime
from pathlib import Path

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from utils.db import execute_script

SCHEMA_PATH = Path(__file__).parent.parent / "db" / "schema.sql"

AGENTS = [
    {'id': 'a1', 'name': 'Monica'},
    {'id': 'a2', 'name': 'Carlos'},
    {'id': 'a3', 'name': 'Ana'},
]

ROLES = [
    {'id': 'r1', 'name': 'Ligação'},
    {'id': 'r2', 'name': 'Mensagem'},
]

# Monday; the current Sunday-start week began on 2024-01-14
NOW = datetime(2024, 1, 15, 10, 0)


def make_record(agent_id, updates_count, day, role_id='r1', **extra):
    record = {
        'id': f"{agent_id}-{day}-{updates_count}",
        'agent_id': agent_id,
        'leadership_role_id': role_id,
        'updates_count': updates_count,
        'date': day,
        'created_at': f"{day} 12:00:00" if day else None,
    }
    record.update(extra)
    return record


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def agents():
    return list(AGENTS)


@pytest.fixture
def roles():
    return list(ROLES)


@pytest.fixture
def bare_engine():
    """In-memory SQLite engine without any tables."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield engine
    engine.dispose()


@pytest.fixture
def engine(bare_engine):
    """In-memory SQLite engine with the reference schema applied."""
    execute_script(SCHEMA_PATH.read_text(encoding="utf-8"), bare_engine)
    return bare_engine


@pytest.fixture
def seeded_engine(engine):
    """Schema + agents + leadership roles."""
    with engine.begin() as conn:
        for agent in AGENTS:
            conn.execute(
                text("INSERT INTO agents (id, name, created_at) VALUES (:id, :name, '2024-01-01 00:00:00')"),
                agent,
            )
        for role in ROLES:
            conn.execute(
                text("INSERT INTO leadership_roles (id, name, created_at) VALUES (:id, :name, '2024-01-01 00:00:00')"),
                role,
            )
    return engine
