"""
Shared fixtures: in-memory SQLite, a fresh schema per test, seeded
sectors/materials/users, and token helpers.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.pop("REDIS_URL", None)

from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from sector_stock import models  # noqa: E402
from sector_stock.database import SessionLocal, engine  # noqa: E402
from sector_stock.ledger import StockLedger  # noqa: E402
from sector_stock.main import app  # noqa: E402
from sector_stock.security import create_access_token, get_password_hash  # noqa: E402
from sector_stock.utils.report_cache import MemoryCacheBackend, ReportCache  # noqa: E402

PASSWORD = "123456"


@pytest.fixture
def db_session():
    models.Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        models.Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seed(db_session):
    logistics = models.Sector(name="Logística")
    it = models.Sector(name="TI")
    paper = models.Material(name="Papel A4", unit_of_measure="Resma")
    cable = models.Material(name="Cabo de Rede", unit_of_measure="Metro")
    db_session.add_all([logistics, it, paper, cable])
    db_session.flush()

    password_hash = get_password_hash(PASSWORD)
    admin = models.User(
        full_name="Admin", email="admin@empresa.com", password_hash=password_hash, role="ADMIN"
    )
    joao = models.User(
        full_name="João Logística", email="joao@empresa.com", password_hash=password_hash,
        role="SETOR", sector_id=logistics.id,
    )
    maria = models.User(
        full_name="Maria TI", email="maria@empresa.com", password_hash=password_hash,
        role="SETOR", sector_id=it.id,
    )
    orphan = models.User(
        full_name="Sem Setor", email="orphan@empresa.com", password_hash=password_hash, role="SETOR"
    )
    inactive = models.User(
        full_name="Inativo", email="inactive@empresa.com", password_hash=password_hash,
        role="SETOR", sector_id=it.id, is_active=False,
    )
    db_session.add_all([admin, joao, maria, orphan, inactive])
    db_session.commit()

    return SimpleNamespace(
        logistics=logistics, it=it, paper=paper, cable=cable,
        admin=admin, joao=joao, maria=maria, orphan=orphan, inactive=inactive,
    )


@pytest.fixture
def report_cache():
    return ReportCache(MemoryCacheBackend(), key="admin_stats", ttl=3600)


@pytest.fixture
def ledger(report_cache):
    return StockLedger(report_cache)


@pytest.fixture
def client(seed):
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    def make(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}
    return make
