"""Aggregation of the backend's fixed-size result pages.

The backend returns search results 25 at a time. The first page reports
``size``, the number of records in the whole matching set, which decides how
many further pages are requested. All pages are concatenated in page order and
folded into a dictionary keyed by record ``id``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from .exceptions import DeadlineExceeded

log = logging.getLogger(__name__)

PAGE_SIZE = 25

Record = Dict[str, Any]
PageFetcher = Callable[[int], "PageResponse"]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class PageResponse:
    """One decoded page of search results.

    ``size`` is the total across all pages, not the length of ``results``.
    It is None when the backend did not report an integer.
    """

    results: List[Record] = field(default_factory=list)
    size: Optional[int] = None

    @classmethod
    def from_json(cls, payload: Any) -> "PageResponse":
        if not isinstance(payload, Mapping):
            return cls()
        size = payload.get("size")
        return cls(
            results=list(payload.get("results") or []),
            size=size if _is_int(size) else None,
        )


def total_pages(size: Optional[int], page_size: int = PAGE_SIZE) -> int:
    """Number of pages to request for a result set of ``size`` records.

    When ``size`` is an exact multiple of the page size this asks for one
    trailing page more than strictly needed, which the backend answers with
    an empty page:

    >>> [total_pages(n) for n in (0, 1, 25, 26, 49, 50, 51)]
    [1, 1, 1, 2, 2, 3, 3]
    """
    if _is_int(size) and size > page_size:
        return size // page_size + 1
    return 1


def hash_results(records: Iterable[Record]) -> Dict[Any, Record]:
    """Key records by ``id``; a later record replaces an earlier one."""
    return {record["id"]: record for record in records}


def paginate(
    fetch_page: PageFetcher,
    *,
    logger: Optional[logging.Logger] = None,
    deadline: Optional[float] = None,
) -> Dict[Any, Record]:
    """Fetch every page of a query and return the records keyed by id.

    Parameters:
        fetch_page: Called with the 1-based page index; returns that page.
        logger: Logger for progress messages, defaults to this module's.
        deadline: Seconds the whole operation may take. Checked before each
            page after the first.

    Returns:
        A dict mapping record id to record. Empty when the first page did not
        report an integer ``size``.

    Raises:
        DeadlineExceeded: if ``deadline`` passed before all pages arrived.
        Any error raised by ``fetch_page`` propagates unchanged; no partial
        result is returned.
    """
    logger = logger or log
    started = time.monotonic()

    first = fetch_page(1)
    if first.size is None:
        return {}

    records = list(first.results)
    pages = total_pages(first.size)

    for index in range(2, pages + 1):
        if deadline is not None and time.monotonic() - started > deadline:
            raise DeadlineExceeded(deadline, index - 1)
        logger.debug("Retrieving page %d of %d", index, pages)
        page = fetch_page(index)
        if page.results:
            records.extend(page.results)

    return hash_results(records)
