"""Ordered, id-indexed entity collections."""

from collections.abc import Iterable, Iterator
from typing import Generic, Protocol, TypeVar


class _Identified(Protocol):
    @property
    def id(self) -> str: ...


T = TypeVar("T", bound=_Identified)


class Catalog(Generic[T]):
    """Insertion-ordered collection of entities keyed by id.

    ``find`` is the single place where a reference is resolved: it returns
    ``None`` for ids that no longer exist and callers treat that as absent.
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: list[T] = []
        for item in items:
            self.add(item)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, entity_id: object) -> bool:
        return self.find(str(entity_id)) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Catalog):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"Catalog({self._items!r})"

    def find(self, entity_id: str) -> T | None:
        """Return the entity with this id, or None when absent."""
        for item in self._items:
            if item.id == entity_id:
                return item
        return None

    def add(self, item: T) -> None:
        """Append an entity, replacing any existing one with the same id."""
        for index, current in enumerate(self._items):
            if current.id == item.id:
                self._items[index] = item
                return
        self._items.append(item)

    def replace(self, item: T) -> bool:
        """Replace the entity with the same id in place."""
        for index, current in enumerate(self._items):
            if current.id == item.id:
                self._items[index] = item
                return True
        return False

    def remove(self, entity_id: str) -> T | None:
        """Remove and return the entity with this id, if present."""
        for index, current in enumerate(self._items):
            if current.id == entity_id:
                return self._items.pop(index)
        return None
