"""Navigation over ordered child collections.

A container is any object exposing `ordered_items()`, the live list of its
children. An item carries an integer `order_number` and answers
`ordered_container()` with the container it belongs to. Tests order their
stages and stages order their questions through this one interface, so
the traversal rules below are shared by both.

Lookups scan the whole collection on every call; containers hold a few
dozen children at most.
"""

from typing import Any, List, Optional, Protocol


class OrderedItem(Protocol):
    order_number: Optional[int]

    def ordered_container(self) -> Optional["OrderedContainer"]:
        ...


class OrderedContainer(Protocol):
    def ordered_items(self) -> List[Any]:
        ...


def _position(item: OrderedItem) -> int:
    return item.order_number or 0


def _index_of(items: List[Any], item: OrderedItem) -> int:
    """Identity lookup; ORM instances compare by field values otherwise."""
    for idx, candidate in enumerate(items):
        if candidate is item:
            return idx
    return -1


def _require_member(container: OrderedContainer, item: OrderedItem) -> List[Any]:
    items = container.ordered_items()
    if _index_of(items, item) < 0:
        raise ValueError("item does not belong to this container")
    return items


def next_position(container: OrderedContainer) -> int:
    """Return the position a new child would receive when appended.

    This is the child count plus one. When a deletion left that number in
    use, the next free position above it is returned instead.
    """
    items = container.ordered_items()
    taken = {_position(i) for i in items}
    position = len(items) + 1
    while position in taken:
        position += 1
    return position


def position_taken(container: OrderedContainer, position: int, exclude: Optional[OrderedItem] = None) -> bool:
    """Return True if another child of `container` already uses `position`."""
    return any(
        _position(i) == position and i is not exclude
        for i in container.ordered_items()
    )


def append(container: OrderedContainer, item: OrderedItem) -> OrderedItem:
    """Add `item` to `container`, numbering it if it has no position yet.

    An explicit positive `order_number` is kept as is, even when it leaves
    a gap. Appending an item that is already a member is a no-op.
    """
    items = container.ordered_items()
    if _index_of(items, item) >= 0:
        return item
    if not item.order_number or item.order_number <= 0:
        item.order_number = next_position(container)
    items.append(item)
    return item


def remove(container: OrderedContainer, item: OrderedItem) -> OrderedItem:
    """Detach `item` from `container`. Remaining positions are not renumbered."""
    items = container.ordered_items()
    idx = _index_of(items, item)
    if idx >= 0:
        del items[idx]
    return item


def ordered(container: OrderedContainer) -> List[Any]:
    """Return the container's children sorted by position."""
    return sorted(container.ordered_items(), key=_position)


def first(container: OrderedContainer) -> Optional[OrderedItem]:
    items = container.ordered_items()
    if not items:
        return None
    return min(items, key=_position)


def last(container: OrderedContainer) -> Optional[OrderedItem]:
    items = container.ordered_items()
    if not items:
        return None
    return max(items, key=_position)


def previous(container: OrderedContainer, item: OrderedItem) -> Optional[OrderedItem]:
    """Return the child with the greatest position below `item`'s, or None."""
    items = _require_member(container, item)
    pos = _position(item)
    earlier = [i for i in items if _position(i) < pos]
    if not earlier:
        return None
    return max(earlier, key=_position)


def next(container: OrderedContainer, item: OrderedItem) -> Optional[OrderedItem]:
    """Return the child with the least position above `item`'s, or None."""
    items = _require_member(container, item)
    pos = _position(item)
    later = [i for i in items if _position(i) > pos]
    if not later:
        return None
    return min(later, key=_position)


def is_start(item: OrderedItem) -> bool:
    container = item.ordered_container()
    return container is not None and first(container) is item


def is_end(item: OrderedItem) -> bool:
    container = item.ordered_container()
    return container is not None and last(container) is item
