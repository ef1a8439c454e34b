import pytest

from backend.app import create_app
from database.db_manager import init_db



@pytest.fixture()
def db_path(tmp_path):
    path = str(tmp_path / "accounts.db")
    init_db(path)
    return path


@pytest.fixture()
def app(db_path):
    app = create_app({"TESTING": True, "DATABASE": db_path})
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()
