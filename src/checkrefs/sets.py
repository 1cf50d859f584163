"""Set operations over file paths and row keys."""

from typing import Hashable, Iterable, Set, TypeVar

T = TypeVar("T", bound=Hashable)


def union(a: Iterable[T], b: Iterable[T]) -> Set[T]:
    """Return every item found in either collection."""
    result = set(a)
    result.update(b)
    return result


def intersection(a: Iterable[T], b: Iterable[T]) -> Set[T]:
    """Return the items found in both collections."""
    other = set(b)
    return {item for item in a if item in other}


def subtract(a: Iterable[T], b: Iterable[T]) -> Set[T]:
    """Return the items of ``a`` that are not in ``b``."""
    other = set(b)
    return {item for item in a if item not in other}
