"""
Global pytest configuration and fixtures.
"""

import os

# Qt widgets need a platform plugin; tests run headless
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from fahrplan.managers.config_manager import APIConfig, ConfigData, WindowConfig
from fahrplan.models.fahrplan_data import Departure, Location


@pytest.fixture
def test_config():
    """Provide a test configuration."""
    return ConfigData(
        api=APIConfig(
            base_url="https://api.example.com/freeplan/v1",
            api_key=None,
            about_url="https://api.example.com/about",
            timeout_seconds=5,
            close_timeout_seconds=0.1,
        ),
        window=WindowConfig(title="Fahrplan Test", width=800, height=500),
    )


@pytest.fixture
def test_api_responses():
    """Provide test API response data."""
    return {
        "locations": [
            {"id": 8000096, "name": "Stuttgart Hbf", "lon": 9.181635, "lat": 48.784084},
            {"id": 8005733, "name": "Stuttgart-Bad Cannstatt", "lon": 9.21484, "lat": 48.80213},
        ],
        "departures": [
            {
                "name": "ICE 594",
                "type": "ICE",
                "boardId": 8000096,
                "stopId": 8000096,
                "stopName": "Stuttgart Hbf",
                "dateTime": "2021-03-02T09:05",
                "track": "16",
                "detailsId": "715770%2F254624%2F957614%2F256729%2F80%3fstation_evaId%3D8000096",
            },
            {
                "name": "RE 19211",
                "type": "RE",
                "boardId": 8000096,
                "stopId": 8000096,
                "stopName": "Stuttgart Hbf",
                "dateTime": "2021-03-02T09:12",
                "track": None,
                "detailsId": "178452%2F63291%2F415380%2F150786%2F80%3fstation_evaId%3D8000096",
            },
        ],
    }


@pytest.fixture
def sample_locations():
    """Provide sample locations."""
    return [
        Location(id=8000096, name="Stuttgart Hbf", lon=9.181635, lat=48.784084),
        Location(id=8005733, name="Stuttgart-Bad Cannstatt", lon=9.21484, lat=48.80213),
        Location(id=8004726, name="Stuttgart-Rohr", lon=9.10839, lat=48.70829),
    ]


@pytest.fixture
def sample_departures():
    """Provide sample departures."""
    return [
        Departure(
            name="ICE 594",
            type="ICE",
            board_id=8000096,
            stop_id=8000096,
            stop_name="Stuttgart Hbf",
            date_time=datetime(2021, 3, 2, 9, 5),
            track="16",
            details_id="715770",
        ),
        Departure(
            name="RE 19211",
            type="RE",
            board_id=8000096,
            stop_id=8000096,
            stop_name="Stuttgart Hbf",
            date_time=datetime(2021, 3, 2, 9, 12),
            track=None,
            details_id="178452",
        ),
    ]


@pytest.fixture
def make_session():
    """
    Provide a factory for mocked aiohttp sessions.

    The returned session's ``get`` yields one response with the given
    status, JSON body and text body.
    """

    def factory(status=200, json_data=None, text="", json_side_effect=None):
        mock_response = AsyncMock()
        mock_response.status = status
        mock_response.json = AsyncMock(return_value=json_data, side_effect=json_side_effect)
        mock_response.text = AsyncMock(return_value=text)

        mock_context_manager = AsyncMock()
        mock_context_manager.__aenter__ = AsyncMock(return_value=mock_response)
        mock_context_manager.__aexit__ = AsyncMock(return_value=None)

        session = MagicMock()
        session.get = MagicMock(return_value=mock_context_manager)
        return session

    return factory
