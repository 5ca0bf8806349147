import os
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///newsroom.sqlite3")
SQLITE_BUSY_TIMEOUT = float(os.getenv("SQLITE_BUSY_TIMEOUT", "30"))  # segundos


class Base(DeclarativeBase):
    pass


def make_engine(url: Optional[str] = None) -> Engine:
    url = url or DATABASE_URL
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    # SQLite + threads (FastAPI e worker de ingestão)
    engine = create_engine(
        url,
        connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT},
        pool_pre_ping=True,
    )

    # pysqlite não emite BEGIN sozinho; sem isso SAVEPOINT não funciona direito
    @event.listens_for(engine, "connect")
    def _sqlite_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _sqlite_begin(conn):
        # IMMEDIATE: writers concorrentes esperam o lock (busy timeout) em vez de falhar no upgrade
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autocommit=False, autoflush=False, expire_on_commit=False)


engine = make_engine()
SessionLocal = make_session_factory(engine)


def init_db(bind: Optional[Engine] = None) -> None:
    from newsroom.storage import models  # noqa: F401  (registra as tabelas)

    Base.metadata.create_all(bind=bind or engine)


# FastAPI-Dependency:
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
