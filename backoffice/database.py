import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    def __init__(self, url: str):
        self.url = url
        engine_args = {}
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite":
            # request handlers run in a worker thread pool
            engine_args["connect_args"] = {"check_same_thread": False}
            if parsed.database in (None, "", ":memory:"):
                # an in-memory database lives only as long as its one connection
                engine_args["poolclass"] = StaticPool
        self.engine = create_engine(url, **engine_args)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def init_db(self) -> None:
        # register the tables on Base.metadata
        from backoffice import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ready (%s)", self.engine.url.render_as_string(hide_password=True))

    def session(self) -> Session:
        return self.SessionLocal()

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def close(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed")
