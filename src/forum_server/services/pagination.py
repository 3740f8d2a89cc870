import math
from dataclasses import dataclass

from forum_server.errors import InvalidInputError


@dataclass(frozen=True, slots=True)
class PageWindow:
    page: int
    offset: int
    total_pages: int
    page_size: int

    @property
    def is_past_end(self) -> bool:
        return self.page > self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def paginate(total_count: int, page_size: int, requested_page: int) -> PageWindow:
    """Compute the slice of a listing to show for ``requested_page``.

    Pages below 1 are treated as page 1. Pages past the last one are returned
    as-is; deciding whether to redirect is left to the caller.
    """
    if page_size < 1:
        raise InvalidInputError("page_size must be positive")
    if total_count < 0:
        raise InvalidInputError("total_count must not be negative")

    total_pages = max(math.ceil(total_count / page_size), 1)
    page = max(requested_page, 1)
    return PageWindow(
        page=page,
        offset=(page - 1) * page_size,
        total_pages=total_pages,
        page_size=page_size,
    )


def parse_page(value: str | None) -> int:
    """Page number from a query string; anything unparseable is page 1."""
    try:
        return int(value or 1)
    except ValueError:
        return 1
