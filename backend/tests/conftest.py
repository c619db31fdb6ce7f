import os
import sys
import pytest

# Ensure the backend root (containing the `chesschat` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from chesschat import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    CORS_ORIGINS = ['http://localhost:5173']
    SOCKETIO_NAMESPACE = '/ws'
    LOG_LEVEL = 'DEBUG'
    BCRYPT_LOG_ROUNDS = 4


PASSWORD = 'password'


@pytest.fixture()
def flask_app():
    # No app context stays pushed while the test runs: each HTTP request and
    # socket event gets its own, so Flask-Login state never leaks between them.
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import chesschat.models  # noqa: F401
        db.create_all()
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_ctx(flask_app):
    """App context for tests that talk to the service layer directly."""
    with flask_app.app_context():
        yield
        db.session.remove()


@pytest.fixture()
def users(flask_app):
    """Seed alice, bob and carol; returns {username: id}."""
    from chesschat.models import User
    created = {}
    with flask_app.app_context():
        for name in ('alice', 'bob', 'carol'):
            user = User(username=name)
            user.set_password(PASSWORD)
            db.session.add(user)
            db.session.commit()
            created[name] = user.id
    return created


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


def _logged_in_client(flask_app, username):
    test_client = flask_app.test_client()
    res = test_client.post('/api/auth/login', json={'username': username, 'password': PASSWORD})
    assert res.status_code == 200
    return test_client


@pytest.fixture()
def alice_client(flask_app, users):
    return _logged_in_client(flask_app, 'alice')


@pytest.fixture()
def bob_client(flask_app, users):
    return _logged_in_client(flask_app, 'bob')


@pytest.fixture()
def carol_client(flask_app, users):
    return _logged_in_client(flask_app, 'carol')


@pytest.fixture()
def sio_factory(flask_app):
    """Open Socket.IO test clients on /ws; identity comes from a logged-in Flask test client."""
    opened = []

    def _connect(http_client=None):
        test_client = socketio.test_client(flask_app, namespace='/ws', flask_test_client=http_client)
        opened.append(test_client)
        return test_client

    yield _connect
    for test_client in opened:
        if test_client.is_connected('/ws'):
            test_client.disconnect(namespace='/ws')


class RecordingGateway:
    """Captures notifications instead of emitting them."""

    def __init__(self):
        self.user_events = []
        self.game_events = []

    def to_user(self, user_id, event, payload):
        self.user_events.append((user_id, event.value, payload))
        return True

    def to_game(self, game_id, event, payload):
        self.game_events.append((game_id, event.value, payload))
        return True


@pytest.fixture()
def gateway():
    return RecordingGateway()


@pytest.fixture()
def service(flask_app, users, app_ctx, gateway):
    from chesschat.services.games.session import GameSessionService
    from chesschat.services.games.store import GameStore
    from chesschat.services.locking import KeyedLocks
    return GameSessionService(GameStore(db.session), gateway, KeyedLocks(), logger=flask_app.logger)
