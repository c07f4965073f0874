import os
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, func, inspect, select
from sqlalchemy.orm import sessionmaker

from app.storehub.db.models import Role, Sector, Tenant, TenantSector, User
from app.storehub.db.seed import run_seed


def _run_migrations(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    config = Config("alembic.ini")
    config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(config, "head")


def test_migrations_apply(tmp_path: Path):
    db_path = tmp_path / "migrations.db"
    database_url = f"sqlite+pysqlite:///{db_path}"
    _run_migrations(database_url)

    engine = create_engine(database_url, future=True)
    inspector = inspect(engine)
    tables = set(inspector.get_table_names())

    assert {
        "tenants",
        "sectors",
        "tenant_sectors",
        "roles",
        "stores",
        "users",
        "user_sessions",
        "audit_logs",
    } <= tables

    indexes = [index["name"] for index in inspector.get_indexes("audit_logs")]
    assert "ix_audit_logs_tenant_created" in indexes
    engine.dispose()


def test_seed_is_idempotent(tmp_path: Path):
    db_path = tmp_path / "seed.db"
    database_url = f"sqlite+pysqlite:///{db_path}"
    _run_migrations(database_url)

    engine = create_engine(database_url, future=True)
    SessionLocal = sessionmaker(bind=engine, future=True)

    def _counts(db):
        return tuple(
            db.scalar(select(func.count()).select_from(model)) for model in (Role, Sector, Tenant, TenantSector, User)
        )

    with SessionLocal() as db:
        run_seed(db)
        first = _counts(db)
        run_seed(db)
        second = _counts(db)

        levels = {role.code: role.level for role in db.execute(select(Role)).scalars().all()}

    assert first == second == (6, 2, 1, 2, 1)
    assert levels == {
        "SUPER_ADMIN": 0,
        "TENANT_OWNER": 1,
        "ADMIN": 2,
        "MANAGER": 3,
        "STAFF": 4,
        "VIEWER": 5,
    }
    engine.dispose()
