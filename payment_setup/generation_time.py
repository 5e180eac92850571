import re
from datetime import datetime, timezone

GENERATION_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# strptime alone accepts single-digit fields; the wire format never does.
_GENERATION_TIME_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z")


def parse_generation_time(value: str) -> datetime:
    """
    Parse a ``generationtime`` string such as ``2023-05-01T12:00:00Z``.

    The trailing ``Z`` is a literal character, not a zone designator: the
    result is always interpreted as UTC. Only ASCII digits are accepted, so
    parsing does not depend on the process locale.

    Returns:
        A timezone-aware datetime in UTC.

    Raises:
        ValueError: If the string does not match the format exactly or names
            an impossible date or time.
    """
    if not isinstance(value, str) or not value.isascii():
        raise ValueError("Generation time must be an ASCII string.")
    if _GENERATION_TIME_PATTERN.fullmatch(value) is None:
        raise ValueError("Generation time does not match yyyy-MM-ddTHH:mm:ssZ.")
    try:
        parsed = datetime.strptime(value, GENERATION_TIME_FORMAT)
    except ValueError:
        raise ValueError("Generation time is not a valid calendar timestamp.")
    return parsed.replace(tzinfo=timezone.utc)
