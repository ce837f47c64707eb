from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from app.config import Settings
from app.database import Database
from app.main import create_app
from app.services.employee_store import EmployeeStore
from tests.factories import make_clearance_template


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'masterdata.db'}")
    await db.init()
    yield db
    await db.close()


@pytest.fixture
async def session(database):
    async with database.session_maker() as session:
        yield session


@pytest.fixture
def store(session):
    return EmployeeStore(session)


@pytest.fixture
def template_path(tmp_path):
    return make_clearance_template(tmp_path / "Clearance_Form.pdf")


@pytest.fixture
def test_settings(tmp_path, template_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        clearance_template_path=template_path,
        environment="production",
        default_role="admin",
    )


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
