from collections.abc import Sequence
from typing import Any

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from lido_social.database import Base


def insert_ignoring_conflicts(
    session: Session,
    model: type[Base],
    values: dict[str, Any],
    index_elements: Sequence[str],
) -> bool:
    """
    Insert a row with ON CONFLICT (...) DO NOTHING.

    Returns True when a row was written, False when the unique key already existed.
    The caller owns the transaction.
    """
    dialect = session.get_bind().dialect.name
    stmt: Any
    if dialect == "sqlite":
        stmt = sqlite_insert(model).values(values)
    else:
        stmt = pg_insert(model).values(values)

    stmt = stmt.on_conflict_do_nothing(index_elements=list(index_elements))
    result = session.execute(stmt)
    return max(getattr(result, "rowcount", 0), 0) > 0
