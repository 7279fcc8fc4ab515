from datetime import UTC, datetime

EPOCH = datetime.min.replace(tzinfo=UTC)


def as_utc(value):
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
