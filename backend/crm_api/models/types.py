from datetime import datetime, timezone
from sqlalchemy import BigInteger, Integer

# 64-bit ids on PostgreSQL; SQLite only generates ids for INTEGER primary keys
BigIntId = BigInteger().with_variant(Integer(), "sqlite")


def utcnow() -> datetime:
    """Timezone-aware current time, used for column defaults and stage moves."""
    return datetime.now(timezone.utc)
