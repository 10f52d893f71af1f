import os
from pathlib import Path
from typing import Generator, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./clashzone.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("true", "1", "yes")


def build_engine(url: str, echo: bool = False) -> Engine:
    """Engine for *url*; SQLite files get their parent directory created."""
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo)

    if ":memory:" not in url:
        Path(url.replace("sqlite:///", "", 1)).parent.mkdir(parents=True, exist_ok=True)
    # Sessions cross FastAPI's threadpool
    return create_engine(url, echo=echo, connect_args={"check_same_thread": False})


engine: Engine = build_engine(DATABASE_URL, SQL_ECHO)


def get_session() -> Generator[Session, None, None]:
    """Database session for one request"""
    with Session(engine) as session:
        yield session


def init_db(bind: Optional[Engine] = None) -> None:
    """Create the bracket tables on *bind* (the app engine by default)"""
    # Registers every table with SQLModel metadata
    import clashzone.models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)
