import os
import sys
import pytest

# Ensure the backend root (containing the `wordlers` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from wordlers import create_app, db, socketio
from wordlers.services.scoreboard.identity import thread_key


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = 'http://localhost:5173'
    STARTING_WORD_LENGTH = 5
    SCORE_SUBMIT_MAX_ATTEMPTS = 3
    DISPLAY_DATE_FORMAT = '%b %d, %Y'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import wordlers.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def store(flask_app):
    return flask_app.extensions['wordlers_store']


@pytest.fixture()
def key():
    return thread_key('b1c2-local', ['a9f0-remote', 'c3d4-remote'])


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')
