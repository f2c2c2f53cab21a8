"""
Fahrplan API client for station search and departure boards.

This module handles all communication with the Fahrplan REST API,
including error mapping and response decoding. Each call is a single
attempt; there are no retries.
"""

import asyncio
import json
import logging
from typing import Any, List, Optional
from urllib.parse import quote

import aiohttp

from ..managers.config_manager import APIConfig
from ..models.fahrplan_data import Departure, Location
from .exceptions import (
    APIException,
    DecodeException,
    NetworkException,
    ServerException,
)

logger = logging.getLogger(__name__)

__all__ = [
    "APIException",
    "NetworkException",
    "DecodeException",
    "ServerException",
    "FahrplanAPI",
    "AboutClient",
]

# JSON fields that may carry a human-readable error message
ERROR_MESSAGE_FIELDS = ("error", "message", "errorMessage", "detail")


async def _read_error_message(response: aiohttp.ClientResponse) -> str:
    """
    Extract the server's error message from a non-2xx response.

    Args:
        response: The error response

    Returns:
        str: Message from a JSON error field, the raw body, or ``HTTP {status}``
    """
    try:
        text = (await response.text()).strip()
    except (aiohttp.ClientError, UnicodeDecodeError):
        text = ""

    if text:
        try:
            body = json.loads(text)
        except ValueError:
            return text

        if isinstance(body, dict):
            for field in ERROR_MESSAGE_FIELDS:
                value = body.get(field)
                if isinstance(value, str) and value:
                    return value
        return text

    return f"HTTP {response.status}"


class FahrplanAPI:
    """
    Read operations against the Fahrplan API.

    Uses a session owned by the caller; see ``fahrplan_session`` for the
    scoped session lifetime.
    """

    def __init__(self, session: aiohttp.ClientSession, config: APIConfig):
        """
        Initialize the API client.

        Args:
            session: Open aiohttp session
            config: API configuration holding the base URL
        """
        self.session = session
        self.config = config

    @property
    def server_url(self) -> str:
        return self.config.base_url.rstrip("/")

    async def locations(self, name: str) -> List[Location]:
        """
        Search stations by name.

        Args:
            name: Station name or name fragment

        Returns:
            List[Location]: Matching stations in API order

        Raises:
            NetworkException: For transport failures
            DecodeException: If the body is not a list of locations
            ServerException: For error responses
        """
        url = f"{self.server_url}/location/{quote(name, safe='')}"
        data = await self._get_json(url)

        if not isinstance(data, list):
            raise DecodeException(f"Expected a list of locations, got {type(data).__name__}")

        locations = [Location.from_dict(item) for item in data]
        logger.info(f"Found {len(locations)} locations for '{name}'")
        return locations

    async def departure_board(self, id: int, date: str) -> List[Departure]:
        """
        Fetch the departure board of a stop.

        Args:
            id: Location id of the stop
            date: ISO date-time, e.g. ``2021-03-02T09:05:00``

        Returns:
            List[Departure]: Departures in API order
        """
        data = await self._get_json(self._departure_board_url(id), params={"date": date})

        if not isinstance(data, list):
            raise DecodeException(f"Expected a list of departures, got {type(data).__name__}")

        departures = [Departure.from_dict(item) for item in data]
        logger.info(f"Fetched {len(departures)} departures for stop {id}")
        return departures

    async def departure_board_date_time(self, id: int, date: str) -> Departure:
        """
        Fetch the single departure scheduled at an exact date-time.

        A JSON object is decoded directly; a list is accepted only when it
        holds exactly one departure.

        Raises:
            DecodeException: If zero or several departures were returned
        """
        data = await self._get_json(self._departure_board_url(id), params={"date": date})

        if isinstance(data, list):
            if len(data) != 1:
                raise DecodeException(f"Expected exactly one departure, got {len(data)}")
            data = data[0]

        return Departure.from_dict(data)

    def _departure_board_url(self, id: int) -> str:
        return f"{self.server_url}/departureBoard/{id}"

    async def _get_json(self, url: str, params: Optional[dict] = None) -> Any:
        """
        Perform a GET request and decode the JSON body.

        Raises:
            NetworkException: For transport failures and timeouts
            DecodeException: If the body is not valid JSON
            ServerException: For non-2xx responses
        """
        try:
            async with self.session.get(url, params=params) as response:
                if not 200 <= response.status < 300:
                    message = await _read_error_message(response)
                    logger.warning(f"API error {response.status} for {url}: {message}")
                    raise ServerException(message, response.status)

                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise DecodeException(f"Invalid JSON in response: {e}")

        except APIException:
            raise
        except asyncio.TimeoutError as e:
            raise NetworkException(f"Request timed out: {url}") from e
        except aiohttp.ClientError as e:
            raise NetworkException(f"Network error: {e}") from e


class AboutClient:
    """Fetches a URL and returns the body verbatim, for the "Async Test" label."""

    def __init__(self, session: aiohttp.ClientSession):
        self.session = session

    async def about(self, url: str) -> str:
        """
        Fetch ``url`` as text.

        Raises:
            NetworkException: For transport failures
            ServerException: For error responses
        """
        try:
            async with self.session.get(url) as response:
                if not 200 <= response.status < 300:
                    raise ServerException(await _read_error_message(response), response.status)
                return await response.text()
        except APIException:
            raise
        except asyncio.TimeoutError as e:
            raise NetworkException(f"Request timed out: {url}") from e
        except aiohttp.ClientError as e:
            raise NetworkException(f"Network error: {e}") from e
