from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def make_engine(url, pool_size=10, connect_args=None):
    """Create the engine for ``url``; its pool is the only state shared between requests."""
    url = make_url(url)
    if url.get_backend_name() == "sqlite":
        args = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # one shared connection, otherwise every checkout sees an empty database
            return create_engine(url, connect_args=args, poolclass=StaticPool)
        return create_engine(url, connect_args=args)
    return create_engine(
        url,
        pool_size=pool_size,
        pool_pre_ping=True,
        connect_args=connect_args or {},
    )


class Database:
    """Owns the engine and hands out sessions bound to it."""

    def __init__(self, engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_config(cls, config):
        return cls(make_engine(
            config["DATABASE_URL"],
            pool_size=config.get("DB_POOL_SIZE", 10),
            connect_args=config.get("DB_CONNECT_ARGS"),
        ))

    @contextmanager
    def session(self):
        # closing the session returns its connection to the pool on every exit path
        with self.SessionLocal() as db:
            yield db

    def create_schema(self):
        Base.metadata.create_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()
