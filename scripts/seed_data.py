#!/usr/bin/env python3
"""
Demo data for the productivity dashboard

Creates the tables from db/schema.sql (optional), the default agents and
leadership roles, a manager login and N random productivity records over
the last days.

Usage:
    python scripts/seed_data.py --schema --records 200 --days 30
    python scripts/seed_data.py --user admin@empresa.com --password secret
"""
import argparse
import logging
import random
import sys
import uuid
from datetime import date, datetime, timedelta
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from sqlalchemy import text  # noqa: E402

from utils.auth import AuthManager  # noqa: E402
from utils.db import execute_script, get_db_engine, get_transaction  # noqa: E402
from utils.productivity import ProductivityQueries  # noqa: E402

logger = logging.getLogger("seed_data")

SCHEMA_PATH = ROOT / "db" / "schema.sql"

DEFAULT_AGENTS = [
    "Monica Souza",
    "Carlos Lima",
    "Fernanda Alves",
    "Rafael Costa",
    "Juliana Martins",
    "Bruno Ferreira",
]

DEFAULT_ROLES = [
    "Ligação",
    "Mensagem",
    "Reunião presencial",
    "Visita",
    "E-mail",
]


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seed_data",
        description="Popula o banco com dados de demonstração"
    )
    parser.add_argument('--schema', action='store_true', help='Cria as tabelas a partir de db/schema.sql')
    parser.add_argument('--records', type=int, default=120, help='Quantidade de registros aleatórios (padrão: 120)')
    parser.add_argument('--days', type=int, default=30, help='Janela de datas em dias (padrão: 30)')
    parser.add_argument('--max-updates', type=int, default=20, help='Máximo de atualizações por registro (padrão: 20)')
    parser.add_argument('--user', type=str, help='E-mail do usuário gestor a criar')
    parser.add_argument('--password', type=str, help='Senha do usuário gestor')
    parser.add_argument('--random-seed', type=int, help='Semente para resultados reproduzíveis')
    return parser


def seed_lookup(conn, table: str, names) -> list:
    """Insert names missing from a lookup table; return all ids."""
    existing = {
        row.name: row.id
        for row in conn.execute(text(f"SELECT id, name FROM {table}"))
    }
    now = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    for name in names:
        if name not in existing:
            new_id = str(uuid.uuid4())
            conn.execute(
                text(f"INSERT INTO {table} (id, name, created_at) VALUES (:id, :name, :created_at)"),
                {'id': new_id, 'name': name, 'created_at': now}
            )
            existing[name] = new_id
    logger.info(f"{table}: {len(existing)} row(s)")
    return list(existing.values())


def seed_user(conn, email: str, password: str):
    pwd_hash, salt = AuthManager.hash_password(password)
    conn.execute(text("DELETE FROM users WHERE email = :email"), {'email': email})
    conn.execute(
        text("""
            INSERT INTO users (id, email, full_name, password_hash, password_salt, role, is_active)
            VALUES (:id, :email, :full_name, :password_hash, :password_salt, 'manager', 1)
        """),
        {
            'id': str(uuid.uuid4()),
            'email': email,
            'full_name': email.split('@')[0].title(),
            'password_hash': pwd_hash,
            'password_salt': salt,
        }
    )
    logger.info(f"User {email} created")


def seed_records(agent_ids, role_ids, count: int, days: int, max_updates: int, rng: random.Random) -> int:
    queries = ProductivityQueries()
    today = date.today()
    created = 0

    for _ in range(count):
        ok, result = queries.add_record(
            agent_id=rng.choice(agent_ids),
            leadership_role_id=rng.choice(role_ids),
            updates_count=rng.randint(1, max_updates),
            record_date=today - timedelta(days=rng.randint(0, days - 1)),
        )
        if ok:
            created += 1
        else:
            logger.error(f"Record not created: {result.get('error')}")

    return created


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    args = create_parser().parse_args(argv)

    if args.user and not args.password:
        logger.error("--password is required with --user")
        return 2
    if args.days < 1 or args.records < 0 or args.max_updates < 1:
        logger.error("--days and --max-updates must be >= 1, --records >= 0")
        return 2

    engine = get_db_engine()

    if args.schema:
        execute_script(SCHEMA_PATH.read_text(encoding='utf-8'), engine)

    with get_transaction(engine) as conn:
        agent_ids = seed_lookup(conn, 'agents', DEFAULT_AGENTS)
        role_ids = seed_lookup(conn, 'leadership_roles', DEFAULT_ROLES)
        if args.user:
            seed_user(conn, args.user.strip().lower(), args.password)

    rng = random.Random(args.random_seed)
    created = seed_records(agent_ids, role_ids, args.records, args.days, args.max_updates, rng)

    logger.info(f"✅ {created} productivity record(s) created")
    return 0


if __name__ == "__main__":
    sys.exit(main())
