"""
Table synchronisation helpers.

``sync_table`` replaces the contents of a table-backed list row by row,
telling the view about every single removal and insertion.
``RequestGeneration`` guards a table against results of superseded requests.
"""

import logging
from typing import Callable, Iterable, MutableSequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def sync_table(
    target: MutableSequence[T],
    fresh_data: Iterable[T],
    on_remove: Callable[[int], None],
    on_insert: Callable[[int], None],
) -> None:
    """
    Replace ``target`` with ``fresh_data``, one notification per row.

    Every existing row is removed from the front, with ``on_remove(0)``
    called after each removal. The fresh rows are then appended in order,
    with ``on_insert(index)`` called after each insertion.

    Args:
        target: List backing the table, mutated in place
        fresh_data: Rows to show
        on_remove: Called with the removed index (always 0)
        on_insert: Called with the inserted index
    """
    for _ in range(len(target)):
        del target[0]
        on_remove(0)

    # Clear whatever a callback may have appended meanwhile
    target.clear()

    for index, item in enumerate(fresh_data):
        target.insert(index, item)
        on_insert(index)


class RequestGeneration:
    """
    Monotonic request counter for one table.

    Only the most recently started request is current; results of older
    requests must be discarded. Use from the UI thread only.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._current = 0

    @property
    def current(self) -> int:
        return self._current

    def next(self) -> int:
        """Start a new request and return its token."""
        self._current += 1
        return self._current

    def is_current(self, token: int) -> bool:
        """Check whether ``token`` belongs to the latest request."""
        if token != self._current:
            logger.debug(f"Discarding stale {self.name} result {token} (current {self._current})")
            return False
        return True
