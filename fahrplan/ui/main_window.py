"""
Main window for the Fahrplan application.

This module contains the main application window: a search bar, a stations
table, a departures table, and a status line for errors. All widgets are
created before any handler is connected.
"""

import logging

from PySide6.QtCore import QDateTime, QModelIndex, Slot
from PySide6.QtWidgets import (
    QAbstractItemView,
    QDateTimeEdit,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from ..managers.config_manager import ConfigData
from ..managers.fahrplan_manager import FahrplanManager
from .table_models import DepartureTableModel, LocationTableModel

logger = logging.getLogger(__name__)

# Format of the date sent with departure board requests
REQUEST_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


class MainWindow(QMainWindow):
    """
    Main application window.

    Wires user actions to the FahrplanManager and shows its results.
    """

    def __init__(self, config: ConfigData, manager: FahrplanManager):
        """
        Initialize the main window.

        Args:
            config: Application configuration
            manager: Manager running the API requests
        """
        super().__init__()
        self.config = config
        self.manager = manager

        self.stations_model = LocationTableModel(self)
        self.departures_model = DepartureTableModel(self)

        self.setWindowTitle(config.window.title)
        self.resize(config.window.width, config.window.height)

        self._create_widgets()
        self._create_layout()
        self._connect_signals()

        logger.debug("Main window initialized")

    def _create_widgets(self) -> None:
        self.about_label = QLabel("Async Test")
        self.about_label.setWordWrap(True)
        self.about_button = QPushButton("Async Test")

        self.search_field = QLineEdit()
        self.search_field.setPlaceholderText("Station name")
        self.search_field.setClearButtonEnabled(True)
        self.search_button = QPushButton("Search")

        self.date_time_edit = QDateTimeEdit(QDateTime.currentDateTime())
        self.date_time_edit.setCalendarPopup(True)
        self.date_time_edit.setDisplayFormat("dd.MM.yyyy HH:mm")

        self.stations_view = self._create_table_view(self.stations_model)
        self.departures_view = self._create_table_view(self.departures_model)

        self.details_label = QLabel("")
        self.details_label.setWordWrap(True)

        self.status_label = QLabel("")
        self.status_label.setStyleSheet("color: #d32f2f;")

    def _create_table_view(self, model) -> QTableView:
        view = QTableView()
        view.setModel(model)
        view.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        view.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        view.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        view.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        view.verticalHeader().setVisible(False)
        return view

    def _create_layout(self) -> None:
        central_widget = QWidget()
        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(8, 8, 8, 8)

        search_group = QGroupBox("Search")
        search_layout = QVBoxLayout(search_group)

        about_row = QHBoxLayout()
        about_row.addWidget(self.about_label, 1)
        about_row.addWidget(self.about_button)
        search_layout.addLayout(about_row)

        search_row = QHBoxLayout()
        search_row.addWidget(self.search_field, 1)
        search_row.addWidget(self.search_button)
        search_row.addWidget(self.date_time_edit)
        search_layout.addLayout(search_row)

        layout.addWidget(search_group)

        tables_row = QHBoxLayout()

        stations_group = QGroupBox("Stations")
        stations_layout = QVBoxLayout(stations_group)
        stations_layout.addWidget(self.stations_view)
        tables_row.addWidget(stations_group, 1)

        departures_group = QGroupBox("Departures")
        departures_layout = QVBoxLayout(departures_group)
        departures_layout.addWidget(self.departures_view)
        departures_layout.addWidget(self.details_label)
        tables_row.addWidget(departures_group, 1)

        layout.addLayout(tables_row, 1)
        layout.addWidget(self.status_label)

        self.setCentralWidget(central_widget)

    def _connect_signals(self) -> None:
        self.search_field.returnPressed.connect(self.on_search)
        self.search_button.clicked.connect(self.on_search)
        self.about_button.clicked.connect(self.on_about)
        self.stations_view.activated.connect(self.on_station_activated)
        self.departures_view.activated.connect(self.on_departure_activated)

        self.manager.stations_updated.connect(self.update_stations)
        self.manager.departures_updated.connect(self.update_departures)
        self.manager.departure_details_ready.connect(self.show_departure_details)
        self.manager.about_received.connect(self.about_label.setText)
        self.manager.error_occurred.connect(self.show_status)
        self.manager.busy_changed.connect(self.set_busy)

    def selected_date(self) -> str:
        """Date-time chosen in the picker, formatted for the API."""
        return self.date_time_edit.dateTime().toPython().strftime(REQUEST_DATE_FORMAT)

    # User actions

    @Slot()
    def on_search(self) -> None:
        name = self.search_field.text()
        if not name.strip():
            return
        self.show_status("")
        self.manager.search_stations(name)

    @Slot()
    def on_about(self) -> None:
        self.show_status("")
        self.manager.fetch_about()

    @Slot(QModelIndex)
    def on_station_activated(self, index: QModelIndex) -> None:
        location = self.stations_model.row_at(index.row())
        if location is None:
            return
        self.show_status("")
        self.details_label.setText("")
        self.manager.search_departures(location.id, self.selected_date())

    @Slot(QModelIndex)
    def on_departure_activated(self, index: QModelIndex) -> None:
        departure = self.departures_model.row_at(index.row())
        if departure is None:
            return
        self.show_status("")
        self.manager.fetch_departure_details(departure)

    # Manager results

    @Slot(list)
    def update_stations(self, locations: list) -> None:
        self.stations_model.replace_rows(locations)

    @Slot(list)
    def update_departures(self, departures: list) -> None:
        self.departures_model.replace_rows(departures)

    @Slot(object)
    def show_departure_details(self, departure) -> None:
        self.details_label.setText(departure.format_summary())

    @Slot(str)
    def show_status(self, message: str) -> None:
        self.status_label.setText(message)

    @Slot(bool)
    def set_busy(self, busy: bool) -> None:
        self.search_field.setEnabled(not busy)
        self.search_button.setEnabled(not busy)
