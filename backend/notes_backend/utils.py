"""Clock and identifier helpers shared by the services."""

import uuid
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def generate_id() -> str:
    return str(uuid.uuid4())
