from __future__ import annotations

from typing import Generator

from sqlalchemy.orm import Session

from app.core.db import get_sessionmaker


def get_db() -> Generator[Session, None, None]:
    """
    Request-scoped session: opened per request, always closed at the end.
    """
    SessionLocal = get_sessionmaker()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
