from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Iterator, Optional

from .errors import HalPreconditionError

if TYPE_CHECKING:
    from .resource import Resource


class IteratorState(str, Enum):
    NOT_STARTED = "not_started"
    POSITIONED = "positioned"
    EXHAUSTED = "exhausted"


class PaginationIterator(Iterator["Resource"]):
    """
    Walks a chain of resources through their 'next' links.

    The seed resource is returned first without any request; every later step
    fetches the current resource's 'next' link. Not restartable and not safe
    to share between threads. A failed fetch is raised to the caller and
    leaves the iterator exhausted.
    """

    def __init__(self, seed: "Resource"):
        self._resource: Optional["Resource"] = seed
        self._state = IteratorState.NOT_STARTED

    @property
    def state(self) -> IteratorState:
        return self._state

    @property
    def current(self) -> Optional["Resource"]:
        """Resource returned by the last advance(), None before the first."""
        if self._state is IteratorState.POSITIONED:
            return self._resource
        return None

    def has_next(self) -> bool:
        if self._state is IteratorState.NOT_STARTED:
            return True
        if self._state is IteratorState.POSITIONED:
            return self._resource.has_next()
        return False

    def advance(self) -> "Resource":
        if not self.has_next():
            raise HalPreconditionError(
                f"No next resource (iterator is {self._state.value}); "
                f"check has_next() first"
            )

        if self._state is IteratorState.NOT_STARTED:
            self._state = IteratorState.POSITIONED
            return self._resource

        try:
            following = self._resource.next()
        except Exception:
            self._state = IteratorState.EXHAUSTED
            self._resource = None
            raise
        self._resource = following
        return following

    def __iter__(self) -> "PaginationIterator":
        return self

    def __next__(self) -> "Resource":
        if not self.has_next():
            self._state = IteratorState.EXHAUSTED
            self._resource = None
            raise StopIteration
        return self.advance()


__all__ = ["PaginationIterator", "IteratorState"]
