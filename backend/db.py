from __future__ import annotations

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session

logger = logging.getLogger(__name__)

class Base(DeclarativeBase):
    pass

def make_engine(database_url: str, echo: bool = False) -> Engine:
    connect_args = {}
    is_sqlite = database_url.startswith("sqlite:")
    if is_sqlite:
        connect_args = {"check_same_thread": False}
    engine = create_engine(database_url, future=True, echo=echo, connect_args=connect_args)

    if is_sqlite:
        # SQLite ships with FK enforcement off; join rows must never dangle.
        # The driver's own BEGIN handling is disabled so that SAVEPOINTs nest properly.
        @event.listens_for(engine, "connect")
        def _configure_sqlite(dbapi_conn, connection_record):
            dbapi_conn.isolation_level = None
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _sqlite_begin(conn):
            conn.exec_driver_sql("BEGIN")

    return engine

def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


class Database:
    """Owns the engine and session factory for the lifetime of the process.

    Constructed once when the app starts and handed to whoever needs a
    session; ``dispose()`` releases pooled connections at shutdown.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.url = database_url
        self.engine = make_engine(database_url, echo=echo)
        self.session_factory = make_session_factory(self.engine)
        self._disposed = False
        logger.info("Database opened: %s", self.engine.url.render_as_string(hide_password=True))

    def create_all(self) -> None:
        # models must be imported so their tables are registered on Base.metadata
        import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        if self._disposed:
            raise RuntimeError("Database has been disposed")
        return self.session_factory()

    def dispose(self) -> None:
        if self._disposed:
            return
        self.engine.dispose()
        self._disposed = True
        logger.info("Database closed")
