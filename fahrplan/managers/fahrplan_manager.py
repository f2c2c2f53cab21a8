"""
Background fetching for the Fahrplan application.

Every request runs on its own worker thread with a private asyncio event
loop. Results travel back as Qt signals: the manager lives in the UI thread,
so signals emitted from a worker are queued onto the UI event loop and the
manager's slots run there. Each table has its own request generation; a
result or error from a superseded request is dropped before it reaches the
UI.
"""

import asyncio
import logging
import threading
from typing import Any, Awaitable, Callable, Dict, Optional

from PySide6.QtCore import QObject, Signal, Slot

from ..api.exceptions import APIException, ServerException
from ..api.fahrplan_api import AboutClient, FahrplanAPI
from ..api.fahrplan_session import fahrplan_session
from ..models.fahrplan_data import Departure
from ..ui.table_sync import RequestGeneration
from .config_manager import ConfigData

logger = logging.getLogger(__name__)

STATIONS = "stations"
DEPARTURES = "departures"
DETAILS = "details"
ABOUT = "about"

Operation = Callable[[FahrplanAPI], Awaitable[Any]]


class FahrplanManager(QObject):
    """
    Runs API requests off the UI thread and reports their outcome.

    Public signals are only emitted for the latest request of each kind.
    """

    stations_updated = Signal(list)  # List[Location]
    departures_updated = Signal(list)  # List[Departure]
    departure_details_ready = Signal(object)  # Departure
    about_received = Signal(str)  # Raw response body
    error_occurred = Signal(str)  # Error message
    busy_changed = Signal(bool)  # True while any request is in flight

    # Worker-thread to UI-thread channel
    _request_succeeded = Signal(str, int, object)  # kind, token, result
    _request_failed = Signal(str, int, str)  # kind, token, message
    _request_finished = Signal(str)  # kind

    def __init__(self, config: ConfigData, session_runner=None, parent: Optional[QObject] = None):
        """
        Initialize the manager.

        Args:
            config: Application configuration
            session_runner: Replacement for ``fahrplan_session``, used by tests
            parent: Parent QObject
        """
        super().__init__(parent)
        self.config = config
        self._session_runner = session_runner or fahrplan_session

        self.station_requests = RequestGeneration(STATIONS)
        self.departure_requests = RequestGeneration(DEPARTURES)
        self.details_requests = RequestGeneration(DETAILS)
        self.about_requests = RequestGeneration(ABOUT)
        self._generations: Dict[str, RequestGeneration] = {
            STATIONS: self.station_requests,
            DEPARTURES: self.departure_requests,
            DETAILS: self.details_requests,
            ABOUT: self.about_requests,
        }
        self._result_signals = {
            STATIONS: self.stations_updated,
            DEPARTURES: self.departures_updated,
            DETAILS: self.departure_details_ready,
            ABOUT: self.about_received,
        }
        self._in_flight = 0

        self._request_succeeded.connect(self._on_request_succeeded)
        self._request_failed.connect(self._on_request_failed)
        self._request_finished.connect(self._on_request_finished)

        logger.debug("FahrplanManager initialized")

    @property
    def is_busy(self) -> bool:
        return self._in_flight > 0

    def update_config(self, config: ConfigData) -> None:
        """Use ``config`` for subsequent requests."""
        self.config = config

    # Requests

    def search_stations(self, name: str) -> Optional[int]:
        """
        Search stations matching ``name``.

        Returns:
            Optional[int]: Request token, None if the name is blank
        """
        name = name.strip()
        if not name:
            logger.debug("Ignoring blank station search")
            return None

        async def operation(api: FahrplanAPI):
            return await api.locations(name)

        return self._start_request(STATIONS, operation)

    def search_departures(self, location_id: int, date: str) -> int:
        """Fetch the departure board of ``location_id`` at ``date``."""

        async def operation(api: FahrplanAPI):
            return await api.departure_board(location_id, date)

        return self._start_request(DEPARTURES, operation)

    def fetch_departure_details(self, departure: Departure) -> int:
        """
        Fetch the exact departure matching ``departure``'s stop and time.

        Only useful against servers that answer a board query at an exact
        time with that single departure. A board listing every departure
        from that time onward is reported as a DecodeException.
        """
        stop_id = departure.stop_id
        date = departure.iso_date_time()

        async def operation(api: FahrplanAPI):
            return await api.departure_board_date_time(stop_id, date)

        return self._start_request(DETAILS, operation)

    def fetch_about(self) -> int:
        """Fetch the configured diagnostic URL as raw text."""
        url = self.config.api.resolved_about_url()

        async def operation(api: FahrplanAPI):
            return await AboutClient(api.session).about(url)

        return self._start_request(ABOUT, operation)

    def _start_request(self, kind: str, operation: Operation) -> int:
        token = self._generations[kind].next()
        self._in_flight += 1
        if self._in_flight == 1:
            self.busy_changed.emit(True)

        logger.debug(f"Starting {kind} request {token}")
        self._start_async(kind, token, operation)
        return token

    def _start_async(self, kind: str, token: int, operation: Operation) -> None:
        """Start the request on a worker thread with its own event loop."""

        def run_async():
            loop = asyncio.new_event_loop()
            asyncio.set_event_loop(loop)
            try:
                loop.run_until_complete(self._run_request(kind, token, operation))
            finally:
                loop.close()

        thread = threading.Thread(target=run_async, name=f"fahrplan-{kind}-{token}", daemon=True)
        thread.start()

    async def _run_request(self, kind: str, token: int, operation: Operation) -> None:
        """Run one request; report the result or the error, then completion."""
        try:
            result = await self._session_runner(self.config.api, operation)
        except ServerException as e:
            logger.warning(f"Server error in {kind} request {token}: {e.message}")
            self._request_failed.emit(kind, token, e.message)
        except APIException as e:
            logger.error(f"{kind} request {token} failed: {e}")
            self._request_failed.emit(kind, token, str(e))
        except Exception as e:
            logger.error(f"Unexpected error in {kind} request {token}: {e}", exc_info=True)
            self._request_failed.emit(kind, token, f"Unexpected error: {e}")
        else:
            self._request_succeeded.emit(kind, token, result)
        finally:
            self._request_finished.emit(kind)

    # UI-thread slots

    @Slot(str, int, object)
    def _on_request_succeeded(self, kind: str, token: int, result: Any) -> None:
        if not self._generations[kind].is_current(token):
            return
        self._result_signals[kind].emit(result)

    @Slot(str, int, str)
    def _on_request_failed(self, kind: str, token: int, message: str) -> None:
        if not self._generations[kind].is_current(token):
            return
        self.error_occurred.emit(message)

    @Slot(str)
    def _on_request_finished(self, kind: str) -> None:
        self._in_flight -= 1
        if self._in_flight == 0:
            self.busy_changed.emit(False)
