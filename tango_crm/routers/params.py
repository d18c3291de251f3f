"""Query-string parsing helpers shared by the routers."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from tango_crm.core.errors import InvalidArgument
from tango_crm.domain.periods import as_utc


def parse_iso8601(value: Optional[str], name: str = "date") -> Optional[datetime]:
    """Parse ISO8601 strings (accepting a Z suffix) and normalize to UTC."""
    if value is None or value == "":
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise InvalidArgument(f"Invalid {name}: {value}") from exc
    return as_utc(parsed)
