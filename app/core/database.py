from typing import Generator, Optional
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import settings
from app.core.exceptions import UnavailableError

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """
    Owns the engine and session factory for one connection string.

    The engine is created on first use (or by an explicit ``init()`` at
    startup) and released by ``dispose()``. Without a connection string the
    database stays unconfigured and every ``session()`` call raises
    ``UnavailableError``, which lets the API boot locally without a store.
    """

    def __init__(self, url: Optional[str], echo: bool = False, **engine_kwargs):
        self.url = url
        self.echo = echo
        self.engine_kwargs = engine_kwargs
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def configured(self) -> bool:
        return bool(self.url)

    @property
    def engine(self) -> Engine:
        self.init()
        return self._engine

    def init(self) -> None:
        if self._engine is not None:
            return
        if not self.url:
            logger.warning("Database.init: No database_url configured")
            raise UnavailableError("Database not available")

        logger.info("Database.init: Entry")
        try:
            self._engine = create_engine(
                self.url, echo=self.echo, pool_pre_ping=True, **self.engine_kwargs
            )
            self._session_factory = sessionmaker(
                autocommit=False, autoflush=False, bind=self._engine
            )
            logger.info("Database.init: Success")
        except Exception as e:
            self._engine = None
            self._session_factory = None
            logger.error(f"Database.init: Failure - {e}")
            raise UnavailableError("Database not available")

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        self.init()
        return self._session_factory()

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database.dispose: Engine disposed")
        self._engine = None
        self._session_factory = None


database = Database(settings.database_url, echo=settings.database_echo)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding one session per request"""
    db = database.session()
    try:
        yield db
    finally:
        db.close()
