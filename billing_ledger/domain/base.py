from datetime import datetime, timezone
from sqlalchemy import BigInteger, Integer
from sqlmodel import SQLModel

# SQLite only autoincrements INTEGER PRIMARY KEY columns
BigIntId = BigInteger().with_variant(Integer(), "sqlite")


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp; timestamp columns reject naive values."""
    return datetime.now(timezone.utc)


class BaseModel(SQLModel):
    pass
