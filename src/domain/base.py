import uuid
from datetime import UTC, datetime


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Naive UTC timestamp, matching what DateTime columns hand back"""
    return datetime.now(UTC).replace(tzinfo=None)
