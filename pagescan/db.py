# db.py
"""
Database module using SQLAlchemy (SQLite).
Stores the latest detection report under two fixed keys so the
explanation view can read it back.
"""

import json
import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import create_engine, Column, DateTime, String, Text
from sqlalchemy.orm import sessionmaker, declarative_base

from pagescan.config import DB_FILE
from pagescan.models import DetectionOutcome

logger = logging.getLogger("db")

REPORT_KEY = "phish_report"
SUMMARY_KEY = "phish_report_summary"

Base = declarative_base()
engine = None
SessionLocal = None


class StoredEntry(Base):
    __tablename__ = "report_store"
    key = Column(String(64), primary_key=True)
    value_json = Column(Text)  # store full JSON as text
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


def configure(database_url: str) -> None:
    """Point the module at another database (tests use a temporary file)."""
    global engine, SessionLocal
    engine = create_engine(database_url, connect_args={"check_same_thread": False})
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)


configure(f"sqlite:///{DB_FILE}")


def init_db():
    Base.metadata.create_all(bind=engine)


def save_entry(key: str, value: Any) -> None:
    session = SessionLocal()
    try:
        entry = session.get(StoredEntry, key)
        if entry is None:
            entry = StoredEntry(key=key)
            session.add(entry)
        entry.value_json = json.dumps(value)
        entry.updated_at = datetime.utcnow()
        session.commit()
    finally:
        session.close()


def get_entry(key: str) -> Optional[Any]:
    session = SessionLocal()
    entry = session.get(StoredEntry, key)
    session.close()
    if not entry:
        return None
    return json.loads(entry.value_json)


def store_outcome(outcome: DetectionOutcome) -> None:
    """Persist the report (or failure record) and, when there is one, its summary."""
    record = outcome.to_record()
    save_entry(REPORT_KEY, record)
    summary = outcome.summary()
    if summary is not None:
        save_entry(SUMMARY_KEY, summary)
        logger.info("Stored report for %s (score=%s)", summary["url"], summary["score"])
    else:
        logger.warning("Stored failure record for %s: %s", record.get("url"), record.get("error"))
