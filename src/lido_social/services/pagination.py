from datetime import UTC, datetime


def normalize_cursor(cursor: datetime | None) -> datetime | None:
    """Cursors are compared against UTC timestamps; naive values are taken as UTC."""
    if cursor is None:
        return None
    if cursor.tzinfo is None:
        return cursor.replace(tzinfo=UTC)
    return cursor.astimezone(UTC)


def next_cursor(timestamps: list[datetime], limit: int) -> datetime | None:
    """
    The last timestamp of a full page, or None once a short page signals the end.

    When exactly ``limit`` items remain the caller fetches one extra, empty page.
    """
    if limit <= 0 or len(timestamps) != limit:
        return None
    return timestamps[-1]
