"""
Pytest configuration and fixtures

Every test gets its own SQLite file under tmp_path, so nothing leaks
between tests and no cleanup is needed beyond disposing the engine.
"""
import pytest

from config import Config
from db import Database
from models import Piece, PieceStatus, Exercise
from practice.repository import PracticeStore
from app import create_app


@pytest.fixture
def config(tmp_path):
    return Config(
        DATA_DIR=tmp_path / "data",
        DATABASE_URL=f"sqlite:///{(tmp_path / 'practice.db').as_posix()}",
        API_PREFIX="/api",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def database(config):
    db = Database(config.DATABASE_URL)
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def store(database):
    session = database.session()
    yield PracticeStore(session)
    session.close()


@pytest.fixture
def fresh_store(database):
    """Open a second, independent session (to read back what was committed)."""
    sessions = []

    def _open():
        s = database.session()
        sessions.append(s)
        return PracticeStore(s)

    yield _open
    for s in sessions:
        s.close()


@pytest.fixture
def seed(database):
    """Insert rows with explicit ids and commit them."""

    def _seed(*rows):
        with database.session() as s, s.begin():
            s.add_all(rows)

    return _seed


def make_piece(id, name="Prelude in C", composer="Bach", status=PieceStatus.TRAINING, **kw):
    return Piece(id=id, name=name, composer=composer, status=status, play_count=kw.pop("play_count", 0), **kw)


def make_exercise(id, name="Hanon No. 1", **kw):
    return Exercise(id=id, name=name, **kw)


@pytest.fixture
def app(config):
    app = create_app(config)
    app.config["TESTING"] = True
    yield app
    app.extensions["practice_db"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()
