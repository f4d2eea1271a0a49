import pytest
from fastapi.testclient import TestClient

from backoffice.config import Settings
from backoffice.database import Database
from backoffice.main import create_app


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'backoffice.db'}"


@pytest.fixture
def database(database_url):
    db = Database(database_url)
    db.init_db()
    yield db
    db.close()


@pytest.fixture
def session(database):
    db = database.session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def settings(database_url):
    return Settings(DATABASE_URL=database_url)


@pytest.fixture
def client(settings):
    app = create_app(settings)
    # entering the context runs the startup hook (tables + default settings)
    with TestClient(app) as c:
        yield c
