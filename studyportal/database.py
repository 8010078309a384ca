from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from studyportal.core import config


Base = declarative_base()


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, url: str | None = None, engine: Engine | None = None):
        self.url = url or config.DATABASE_URL
        self.engine = engine or _build_engine(self.url)
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )

    def create_schema(self) -> None:
        # Model modules must be imported so their tables are registered on Base.
        from studyportal.models import session, task, user  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        self.engine.dispose()


def _build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if url in {"sqlite://", "sqlite:///:memory:"}:
            return create_engine(
                url,
                connect_args=connect_args,
                poolclass=StaticPool,
                echo=config.DATABASE_ECHO,
            )
        return create_engine(url, connect_args=connect_args, echo=config.DATABASE_ECHO)
    return create_engine(url, pool_pre_ping=True, echo=config.DATABASE_ECHO)


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.database.session()
    try:
        yield db
    except SQLAlchemyError:
        db.rollback()
        raise
    finally:
        db.close()
