"""SQLAlchemy schema and engine helpers for the local expense database."""

from __future__ import annotations

import logging

from sqlalchemy import Column, Float, Integer, String, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


class ExpenseRow(Base):
    __tablename__ = "expenses"
    # AUTOINCREMENT keeps ids monotonic; SQLite would otherwise reuse freed ids.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    amount = Column(Float, nullable=False)
    category = Column(String, nullable=False)
    note = Column(String, nullable=True)
    date = Column(String, nullable=False, index=True)


def make_engine(database_url: str) -> Engine:
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create any missing tables; existing tables are left untouched."""
    logger.debug("Ensuring schema on %s", engine.url)
    Base.metadata.create_all(bind=engine, checkfirst=True)
