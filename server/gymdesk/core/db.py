from __future__ import annotations

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


class Database:
    """Owns the engine and session factory for one running application.

    Created by the application lifespan with ``init`` and released with
    ``teardown``; request handlers only ever see sessions.
    """

    def __init__(self, url: str, **engine_options) -> None:
        self.url = url
        self.engine_options = engine_options
        self.engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    def init(self) -> "Database":
        if self.engine is not None:
            return self
        options = {"future": True, "pool_pre_ping": True}
        if self.url.startswith("sqlite"):
            options = {"future": True, "connect_args": {"check_same_thread": False}}
        options.update(self.engine_options)
        self.engine = create_engine(self.url, **options)
        self._session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            future=True,
        )
        return self

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database.init() must run before sessions are requested")
        return self._session_factory()

    def teardown(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self._session_factory = None


def get_db(request: Request) -> Generator[Session, None, None]:
    database: Database = request.app.state.database
    session = database.session()
    try:
        yield session
    finally:
        session.close()
