"""
Table selection for the schema diagram.

The diagram only records which table is highlighted and tells the host
application about it; what activation means (e.g. loading the table into a
query editor) is up to the host callback.
"""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Keys that activate a focused table card, same as a click
ACTIVATION_KEYS = frozenset({"Enter", " ", "Space", "Spacebar"})


class SelectionController:
    """
    Holds the selected table name and notifies registered callbacks.

    The name is not checked against the current schema; a selection that
    matches no table simply highlights nothing.
    """

    def __init__(self, selected_table: Optional[str] = None,
                 on_table_select: Optional[Callable[[str], None]] = None):
        self._selected_table = selected_table
        self._callbacks: list[Callable[[str], None]] = []
        if on_table_select is not None:
            self._callbacks.append(on_table_select)

    @property
    def selected_table(self) -> Optional[str]:
        return self._selected_table

    def on_table_select(self, callback: Callable[[str], None]):
        """Register a callback invoked with the table name on every select."""
        self._callbacks.append(callback)

    def select(self, name: str) -> None:
        self._selected_table = name
        logger.debug("Table selected: %s", name)
        for callback in self._callbacks:
            callback(name)

    def clear(self) -> None:
        """Drop the highlight without notifying the host."""
        self._selected_table = None

    def is_selected(self, name: str) -> bool:
        return self._selected_table is not None and self._selected_table == name


def handle_table_click(selection: SelectionController, table_name: str) -> None:
    selection.select(table_name)


def handle_table_key(selection: SelectionController, table_name: str, key: str) -> bool:
    """
    Activate a table from the keyboard.

    Returns True if the key was an activation key (the UI should then
    suppress its default action), False otherwise.
    """
    if key not in ACTIVATION_KEYS:
        return False
    selection.select(table_name)
    return True
