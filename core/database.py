from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from utils.logger import get_logger

logger = get_logger(__name__)

Base = declarative_base()


class Database:
    """
    Owns the SQLAlchemy engine and session factory.

    Constructed once at startup (see main.lifespan) and disposed at shutdown,
    instead of living as a module-level connection.
    """

    def __init__(self, url: str, echo: bool = False):
        connect_args = {}
        if url.startswith("sqlite"):
            # SQLite connections are shared across FastAPI's threadpool
            connect_args["check_same_thread"] = False

        self.url = url
        self.engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True, echo=echo)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Generator[Session, None, None]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def create_all(self):
        # Import models so every table is registered on Base.metadata
        import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables ensured", extra={"tables": sorted(Base.metadata.tables)})

    def dispose(self):
        self.engine.dispose()
        logger.info("Database connections closed")
