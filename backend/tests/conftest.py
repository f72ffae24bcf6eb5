import os
import sys
import pytest

# Ensure the backend root (containing the `emoji_puzzles` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from emoji_puzzles import create_app, db


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    BCRYPT_LOG_ROUNDS = 4
    PUZZLE_PAGE_SIZE_DEFAULT = 20
    PUZZLE_PAGE_SIZE_MAX = 100
    CORS_ORIGINS = ['http://localhost:5173']
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    # The app context is only held for setup/teardown: requests must get
    # their own context so Flask-Login's per-context user does not leak
    # between test clients.
    with application.app_context():
        # Ensure models are imported so tables are created
        import emoji_puzzles.models  # noqa: F401
        db.create_all()
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_ctx(flask_app):
    """Push an app context for tests that call the services directly."""
    with flask_app.app_context():
        yield flask_app
        db.session.remove()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


def _logged_in_client(flask_app, username):
    test_client = flask_app.test_client()
    res = test_client.post('/register', json={'username': username, 'password': 'password'})
    assert res.status_code == 201
    test_client.user = res.get_json()['user']
    return test_client


@pytest.fixture()
def alice(flask_app):
    return _logged_in_client(flask_app, 'alice')


@pytest.fixture()
def bob(flask_app):
    return _logged_in_client(flask_app, 'bob')


@pytest.fixture()
def users(app_ctx):
    """Two users created directly in the database; returns their ids."""
    from emoji_puzzles.models import User
    created = []
    for name in ('alice', 'bob'):
        user = User(username=name)
        user.set_password('password')
        db.session.add(user)
        created.append(user)
    db.session.commit()
    return [u.id for u in created]


@pytest.fixture()
def system_puzzle_id(flask_app):
    from emoji_puzzles.models import Puzzle
    with flask_app.app_context():
        puzzle = Puzzle(
            user_id=None,
            emoji_sequence='🦁👑',
            answer='The Lion King',
            category='movie',
            difficulty='easy',
            is_system=True,
        )
        db.session.add(puzzle)
        db.session.commit()
        return puzzle.id
