import pytest

from ingestion import create_app


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'requests.db'}"


@pytest.fixture
def app(db_url):
    app = create_app({"BACKEND": "a", "PORT": "8080", "DATABASE_URL": db_url, "LOG_LEVEL": "WARNING"})
    app.config["TESTING"] = True
    yield app
    app.extensions["ingestion.db"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def client_b(app):
    """backend-b writing to the same table as the ``app`` fixture."""
    app_b = create_app(
        {"BACKEND": "b", "PORT": "3000", "DB_CREATE_SCHEMA": "false", "LOG_LEVEL": "WARNING"},
        database=app.extensions["ingestion.db"],
    )
    app_b.config["TESTING"] = True
    return app_b.test_client()


@pytest.fixture
def database(app):
    return app.extensions["ingestion.db"]
