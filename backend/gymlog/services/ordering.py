"""List reordering with move-by-offset semantics.

``move`` follows the list-editing convention used by drag-to-reorder UIs:
``to_index`` is a position in the sequence *before* removal (``0..N``), and
every moved element that sat before it closes the gap, so the block lands at
``to_index - count(from_indices < to_index)`` in the shortened sequence.
"""

from typing import Any, Callable, Iterable, Sequence, TypeVar

from gymlog.core.exceptions import InvalidReorderError

T = TypeVar("T")


def validate_move(size: int, from_indices: Iterable[int], to_index: int) -> list[int]:
    """Check move indices against a collection of ``size`` elements.

    An empty selection is valid and moves nothing.

    Returns:
        The sorted, de-duplicated source indices.

    Raises:
        InvalidReorderError: If any index falls outside the collection.
    """
    sources = sorted(set(from_indices))
    if not sources:
        return []
    for index in sources:
        if not 0 <= index < size:
            raise InvalidReorderError(f"Source index {index} out of range for {size} items")
    if not 0 <= to_index <= size:
        raise InvalidReorderError(f"Destination index {to_index} out of range for {size} items")
    return sources


def move(items: Sequence[T], from_indices: Iterable[int], to_index: int) -> list[T]:
    """Return a new list with the selected elements moved as one block."""
    sources = validate_move(len(items), from_indices, to_index)
    if not sources:
        return list(items)
    selected = set(sources)
    moved = [items[i] for i in sources]
    remaining = [item for i, item in enumerate(items) if i not in selected]
    insert_at = to_index - sum(1 for i in sources if i < to_index)
    return remaining[:insert_at] + moved + remaining[insert_at:]


def move_within_scope(
    items: Sequence[T],
    in_scope: Callable[[T], bool],
    from_indices: Iterable[int],
    to_index: int,
) -> list[T]:
    """Move elements of one scope while out-of-scope elements keep their slots.

    Indices are positions within the in-scope subsequence. The reordered
    subsequence is written back into the slots the scope occupied in
    ``items``, so every other element stays exactly where it was.
    """
    slots = [i for i, item in enumerate(items) if in_scope(item)]
    scoped = move([items[i] for i in slots], from_indices, to_index)
    result = list(items)
    for slot, item in zip(slots, scoped):
        result[slot] = item
    return result


def reindex(items: Iterable[Any], attribute: str = "order") -> int:
    """Assign each element its 0-based position; returns how many changed."""
    changed = 0
    for position, item in enumerate(items):
        if getattr(item, attribute) != position:
            setattr(item, attribute, position)
            changed += 1
    return changed


def ordered(items: Iterable[T], attribute: str = "order") -> list[T]:
    """Elements sorted by their persisted position."""
    return sorted(items, key=lambda item: getattr(item, attribute))
