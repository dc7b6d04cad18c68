import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def generate_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass
