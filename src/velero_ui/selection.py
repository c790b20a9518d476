"""
Ordered, duplicate-free selection of items for multi-select steps.

Insertion order is significant: it becomes argument order when the
selection is joined into a command.
"""

from typing import Iterator, Optional, Sequence

from .models import SelectableItem


class SelectionSet:
    """
    Toggle-based multi-selection keyed by item title.

    The set is mutable while its step is active and frozen once the step is
    confirmed.
    """

    def __init__(self, items: Optional[Sequence[SelectableItem]] = None):
        self._items: list[SelectableItem] = []
        self._frozen = False
        for item in items or ():
            if item.filter_value not in self:
                self._items.append(item)

    def toggle(self, item: Optional[SelectableItem]) -> bool:
        """
        Add the item if absent, remove it if present.

        Args:
            item: The item under the cursor, or None when there is none

        Returns:
            True if the item is selected afterwards, False otherwise
        """
        if item is None:
            return False
        if self._frozen:
            raise RuntimeError("selection is frozen")

        key = item.filter_value
        for i, selected in enumerate(self._items):
            if selected.filter_value == key:
                del self._items[i]
                return False

        self._items.append(item)
        return True

    def toggle_at(self, items: Sequence[SelectableItem], index: int) -> Optional[SelectableItem]:
        """
        Toggle the item at a cursor position.

        Returns:
            The toggled item, or None when the cursor is out of range
        """
        if index < 0 or index >= len(items):
            return None
        item = items[index]
        self.toggle(item)
        return item

    def freeze(self) -> None:
        """Make the selection read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def items(self) -> tuple[SelectableItem, ...]:
        return tuple(self._items)

    def titles(self) -> list[str]:
        """Selected titles in selection order."""
        return [item.title for item in self._items]

    def join(self, separator: str = ",") -> str:
        return separator.join(self.titles())

    def __contains__(self, key: object) -> bool:
        if isinstance(key, SelectableItem):
            key = key.filter_value
        return any(item.filter_value == key for item in self._items)

    def __iter__(self) -> Iterator[SelectableItem]:
        return iter(tuple(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"SelectionSet({self.titles()!r})"
