"""
Qt table models for stations and departures.

The models keep their rows in a plain list and replace them with
``sync_table``, so attached views receive one rowsRemoved/rowsInserted
notification per row. The row count reported to views follows those
notifications rather than the list length.
"""

import logging
from typing import Any, Optional, Sequence, Tuple

from PySide6.QtCore import QAbstractTableModel, QModelIndex, QObject, Qt

from .table_sync import sync_table

logger = logging.getLogger(__name__)


class SyncedTableModel(QAbstractTableModel):
    """
    Base table model whose rows are replaced through ``sync_table``.

    Subclasses define ``COLUMNS`` as ``(header, display key)`` pairs; cell
    text comes from the row's ``to_display_dict()``.
    """

    COLUMNS: Tuple[Tuple[str, str], ...] = ()

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._rows: list = []
        self._visible_rows = 0

    @property
    def rows(self) -> tuple:
        """Current rows, read-only."""
        return tuple(self._rows)

    def row_at(self, row: int) -> Any:
        """Get the item shown at ``row``, or None if out of range."""
        if 0 <= row < len(self._rows):
            return self._rows[row]
        return None

    def replace_rows(self, fresh_data: Sequence) -> None:
        """Replace all rows, notifying views row by row."""
        sync_table(self._rows, fresh_data, self._notify_removed, self._notify_inserted)
        logger.debug(f"{self.__class__.__name__} now holds {len(self._rows)} rows")

    def _notify_removed(self, index: int) -> None:
        self.beginRemoveRows(QModelIndex(), index, index)
        self._visible_rows -= 1
        self.endRemoveRows()

    def _notify_inserted(self, index: int) -> None:
        self.beginInsertRows(QModelIndex(), index, index)
        self._visible_rows += 1
        self.endInsertRows()

    # Qt model interface

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return self._visible_rows

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self.COLUMNS)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or role != Qt.ItemDataRole.DisplayRole:
            return None

        item = self.row_at(index.row())
        if item is None or not 0 <= index.column() < len(self.COLUMNS):
            return None

        _, key = self.COLUMNS[index.column()]
        return item.to_display_dict()[key]

    def headerData(
        self,
        section: int,
        orientation: Qt.Orientation,
        role: int = Qt.ItemDataRole.DisplayRole,
    ) -> Any:
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation == Qt.Orientation.Horizontal and 0 <= section < len(self.COLUMNS):
            return self.COLUMNS[section][0]
        if orientation == Qt.Orientation.Vertical:
            return str(section + 1)
        return None


class LocationTableModel(SyncedTableModel):
    """Stations found by a location search."""

    COLUMNS = (
        ("Name", "name"),
        ("Id", "id"),
        ("Location", "location"),
    )


class DepartureTableModel(SyncedTableModel):
    """Departure board of the selected station."""

    COLUMNS = (
        ("Date", "date"),
        ("Time", "time"),
        ("Type", "type"),
        ("Track", "track"),
        ("Name", "name"),
    )
