"""Page/limit handling for list endpoints."""

from dataclasses import dataclass

DEFAULT_LIMIT = 12
MAX_LIMIT = 48


@dataclass(frozen=True)
class Page:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _to_int(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_pagination(page=None, limit=None) -> Page:
    """Lenient parsing: garbage falls back to defaults, values are clamped.

    ``page`` is at least 1; ``limit`` lies in ``[1, MAX_LIMIT]``.
    """
    return Page(
        page=max(1, _to_int(page, 1)),
        limit=min(MAX_LIMIT, max(1, _to_int(limit, DEFAULT_LIMIT))),
    )
