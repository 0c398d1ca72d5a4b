import os
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'app', 'config', and 'songlib' import correctly
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from tests.support import factories as test_factories
from tests.support import stubs as test_stubs


@pytest.fixture
def database_uri(tmp_path_factory):
    """Per-test sqlite file."""
    db_dir = tmp_path_factory.mktemp("db")
    db_path = Path(db_dir) / "test.sqlite"
    return f"sqlite:///{db_path.as_posix()}"


@pytest.fixture
def detail_client():
    """Stub for the external song detail service; tests adjust it per case."""
    return test_stubs.StubDetailClient()


@pytest.fixture
def app(database_uri, detail_client):
    import app as app_module

    application = app_module.create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": database_uri,
            "EXTERNAL_API_URL": "http://detail.test",
        },
        detail_client=detail_client,
    )
    yield application


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield app


@pytest.fixture
def db_session(app_context):
    from songlib.database.db_manager import db

    test_factories.set_session(db.session)
    try:
        yield db.session
    finally:
        try:
            db.session.rollback()
        except Exception:
            pass
        db.session.remove()
        test_factories.reset_session()


@pytest.fixture
def factories(db_session):
    yield test_factories


@pytest.fixture
def song_service(app_context):
    return app_context.extensions["song_service"]


@pytest.fixture
def client(app):
    return app.test_client()
