# =============================================================================
# core/pagination.py  —  Turn page-at-a-time listings into one collection
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Requests page 1, 2, 3, ... of a listing and concatenates the records,
#   stopping when the MOST RECENT response says there is nothing more.
#
# TWO STOP SIGNALS IN THE CURSOR API:
#   - daily usage / usage events carry pagination.hasNextPage (boolean)
#   - spend carries totalPages (number); we stop once page >= totalPages
#
#   Both are read from each response as it arrives; nothing is precomputed
#   from the first page, because totals can change between calls.
#
# WHAT THIS MODULE DOES NOT DO:
#   - No deduplication or reordering: a record the server returns on two
#     pages appears twice in the result.
#   - No partial results: if page k fails the exception propagates and the
#     records from pages 1..k-1 are dropped with the local list.
#   - No ceiling unless max_pages is given.
# =============================================================================

from typing import Callable, Iterator, Optional, TypeVar

from core.errors import PageLimitExceededError

P = TypeVar("P")
T = TypeVar("T")

# (page result, page number it was fetched as) -> True when it is the last one
StopPredicate = Callable[[P, int], bool]


def iter_pages(
    fetch_page: Callable[[int], P],
    is_last_page: StopPredicate,
    max_pages: Optional[int] = None,
) -> Iterator[P]:
    """Yield page results for page = 1, 2, ... until is_last_page says stop."""
    page = 1
    while True:
        if max_pages is not None and page > max_pages:
            raise PageLimitExceededError(max_pages)
        result = fetch_page(page)
        yield result
        if is_last_page(result, page):
            return
        page += 1


def paginate_until(
    fetch_page: Callable[[int], P],
    extract_records: Callable[[P], list[T]],
    is_last_page: StopPredicate,
    max_pages: Optional[int] = None,
) -> list[T]:
    """Fetch every page and return all records in fetch order.

    Args:
        fetch_page: Called with the 1-based page number; all other query
            parameters must already be fixed inside it.
        extract_records: Pulls the record list out of one page result.
        is_last_page: Stop predicate, see stop_when_no_next_page and
            stop_at_total_pages.
        max_pages: Optional ceiling; PageLimitExceededError past it.
    """
    records: list[T] = []
    for result in iter_pages(fetch_page, is_last_page, max_pages):
        records.extend(extract_records(result))
    return records


def stop_when_no_next_page(page_info_of: Callable[[P], object]) -> StopPredicate:
    """Stop predicate for listings that report a hasNextPage flag."""
    return lambda result, page: not page_info_of(result).has_next_page


def stop_at_total_pages(total_pages_of: Callable[[P], int]) -> StopPredicate:
    """Stop predicate for listings that report a totalPages count."""
    return lambda result, page: page >= total_pages_of(result)
