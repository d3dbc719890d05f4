from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC now; SQLite drops tzinfo so every stored datetime is naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
