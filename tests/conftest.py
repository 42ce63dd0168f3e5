import os
from datetime import datetime, timedelta, timezone

import jwt
import pytest

# Set test environment variables before importing app modules
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DASHBOARD_TIMEZONE"] = "UTC"
os.environ["ALLOWED_ORIGINS"] = "http://localhost:5173"

from fastapi.testclient import TestClient

from main import app
from api.routes.dashboard import get_metrics_aggregator
from core.dashboard import MetricsAggregator, QueryExecutor
from core.database import DatabaseManager, get_db_manager, get_db_session
from core.database.models import User

# Wednesday; windows: today 03-18, last 7 days 03-11, last 30 days 02-16,
# this month 03-01, last month 02-01
FIXED_NOW = datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)


def at(*args) -> datetime:
    """Naive UTC timestamp as stored in ``created_at``."""
    return datetime(*args)


def insert_rows(db: DatabaseManager, model, rows):
    """Insert raw rows, keeping explicit NULLs instead of column defaults."""
    with db.session_scope() as session:
        session.connection().execute(model.__table__.insert(), rows)


def make_token(subject, secret="test-secret", expires_in=timedelta(hours=1)) -> str:
    payload = {"sub": subject, "exp": datetime.now(timezone.utc) + expires_in}
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(f"sqlite:///{tmp_path / 'dashboard.db'}")
    manager.initialize()
    manager.create_tables()
    yield manager
    manager.dispose()


@pytest.fixture
def aggregator(db):
    return MetricsAggregator(QueryExecutor(db), tz=timezone.utc, clock=lambda: FIXED_NOW)


@pytest.fixture
def client(db, aggregator):
    def override_session():
        yield from db.get_session()

    app.dependency_overrides[get_db_manager] = lambda: db
    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_metrics_aggregator] = lambda: aggregator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db):
    insert_rows(db, User, [{
        "name": "Admin",
        "email": "admin@example.com",
        "password": "hashed",
        "created_at": at(2025, 12, 1, 9, 0),
    }])
    with db.session_scope() as session:
        user = session.query(User).filter_by(email="admin@example.com").one()
        return {"id": user.id, "name": user.name, "email": user.email}


@pytest.fixture
def auth_headers(admin_user):
    return {"Authorization": f"Bearer {make_token(admin_user['email'])}"}
