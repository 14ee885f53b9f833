"""Lenient query-string parsing shared by the list endpoints."""


def parse_int(raw: str | None, default: int) -> int:
    """Parse ``raw`` as an int, falling back to ``default`` when absent or garbage."""
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def clamp_limit(raw: str | None, default: int, maximum: int) -> int:
    """Clamp a page size to ``[0, maximum]``; zero or negative means an empty page."""
    return max(0, min(parse_int(raw, default), maximum))


def clamp_offset(raw: str | None) -> int:
    return max(0, parse_int(raw, 0))
