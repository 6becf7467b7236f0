from typing import Generator

from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.pool import StaticPool

from src.server.settings.config import settings


def build_engine(database_url: str, echo: bool = False):
    connect_args = {}
    kwargs = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        # In-memory-SQLite måste dela EN anslutning, annars ser varje session en tom databas
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, echo=echo, connect_args=connect_args, **kwargs)


engine = build_engine(settings.database_url, echo=settings.debug and settings.environment == "dev")


def init_db(bind=None) -> None:
    # Se till att modellerna laddas (EN gång, via src.server.*)
    from src.server.models import __all_models  # noqa: F401
    SQLModel.metadata.create_all(bind or engine)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
