"""
Unit tests for the Location and Departure models.

Covers JSON decoding, schema violations and display formatting.
"""

import dataclasses
from datetime import datetime

import pytest

from fahrplan.api.exceptions import DecodeException
from fahrplan.models.fahrplan_data import Departure, Location


def departure_json(**overrides):
    data = {
        "name": "ICE 594",
        "type": "ICE",
        "boardId": 8000096,
        "stopId": 8000096,
        "stopName": "Stuttgart Hbf",
        "dateTime": "2021-03-02T09:05",
        "track": "16",
        "detailsId": "715770",
    }
    data.update(overrides)
    return data


def make_departure(**overrides):
    values = dict(
        name="ICE 594",
        type="ICE",
        board_id=1,
        stop_id=2,
        stop_name="Stuttgart Hbf",
        date_time=datetime(2021, 3, 2, 9, 5),
        track="16",
        details_id="715770",
    )
    values.update(overrides)
    return Departure(**values)


class TestLocation:
    """Test Location decoding and display."""

    def test_from_dict(self, test_api_responses):
        location = Location.from_dict(test_api_responses["locations"][0])

        assert location == Location(id=8000096, name="Stuttgart Hbf", lon=9.181635, lat=48.784084)

    def test_integer_coordinates_become_floats(self):
        location = Location.from_dict({"id": 1, "name": "Null Island", "lon": 0, "lat": 0})

        assert isinstance(location.lon, float)
        assert isinstance(location.lat, float)

    def test_location_is_immutable(self, sample_locations):
        with pytest.raises(dataclasses.FrozenInstanceError):
            sample_locations[0].name = "Changed"

    @pytest.mark.parametrize(
        "data",
        [
            {"name": "Stuttgart Hbf", "lon": 9.1, "lat": 48.7},
            {"id": "8000096", "name": "Stuttgart Hbf", "lon": 9.1, "lat": 48.7},
            {"id": True, "name": "Stuttgart Hbf", "lon": 9.1, "lat": 48.7},
            {"id": 1, "name": None, "lon": 9.1, "lat": 48.7},
            {"id": 1, "name": "Stuttgart Hbf", "lon": "9.1", "lat": 48.7},
            ["not", "an", "object"],
        ],
    )
    def test_schema_mismatch_raises_decode_exception(self, data):
        with pytest.raises(DecodeException):
            Location.from_dict(data)

    def test_display_dict(self, sample_locations):
        display = sample_locations[0].to_display_dict()

        assert display == {
            "name": "Stuttgart Hbf",
            "id": "8000096",
            "location": "48.784084, 9.181635",
        }


class TestDeparture:
    """Test Departure decoding and display."""

    def test_from_dict(self):
        departure = Departure.from_dict(departure_json())

        assert departure.name == "ICE 594"
        assert departure.board_id == 8000096
        assert departure.stop_name == "Stuttgart Hbf"
        assert departure.date_time == datetime(2021, 3, 2, 9, 5)
        assert departure.track == "16"
        assert departure.details_id == "715770"

    def test_date_time_with_seconds(self):
        departure = Departure.from_dict(departure_json(dateTime="2021-03-02T09:05:30"))

        assert departure.date_time == datetime(2021, 3, 2, 9, 5, 30)

    def test_null_track_decodes_to_none(self):
        departure = Departure.from_dict(departure_json(track=None))

        assert departure.track is None

    def test_missing_track_decodes_to_empty_string(self):
        data = departure_json()
        del data["track"]

        departure = Departure.from_dict(data)

        assert departure.track == ""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"dateTime": "yesterday"},
            {"dateTime": "2021-03-02"},
            {"dateTime": "2021-03-02T09:05+01:00"},
            {"boardId": "8000096"},
            {"track": 16},
            {"detailsId": None},
        ],
    )
    def test_schema_mismatch_raises_decode_exception(self, overrides):
        with pytest.raises(DecodeException):
            Departure.from_dict(departure_json(**overrides))

    def test_missing_field_raises_decode_exception(self):
        data = departure_json()
        del data["stopName"]

        with pytest.raises(DecodeException) as exc_info:
            Departure.from_dict(data)

        assert "stopName" in str(exc_info.value)

    def test_format_date_zero_pads(self):
        departure = make_departure(date_time=datetime(2021, 3, 2, 9, 5))

        assert departure.format_date() == "02.03.2021"

    def test_format_time_zero_pads(self):
        departure = make_departure(date_time=datetime(2021, 3, 2, 9, 5))

        assert departure.format_time() == "09:05"

    def test_format_late_evening(self):
        departure = make_departure(date_time=datetime(2021, 12, 31, 23, 59))

        assert departure.format_date() == "31.12.2021"
        assert departure.format_time() == "23:59"

    def test_display_track_none_shows_dash(self):
        assert make_departure(track=None).display_track() == "-"

    def test_display_track_empty_stays_empty(self):
        assert make_departure(track="").display_track() == ""

    def test_display_track_value(self):
        assert make_departure(track="3a").display_track() == "3a"

    def test_iso_date_time(self):
        departure = make_departure(date_time=datetime(2021, 3, 2, 9, 5))

        assert departure.iso_date_time() == "2021-03-02T09:05:00"

    def test_display_dict(self):
        display = make_departure(track=None).to_display_dict()

        assert display == {
            "date": "02.03.2021",
            "time": "09:05",
            "type": "ICE",
            "track": "-",
            "name": "ICE 594",
        }

    def test_format_summary(self):
        summary = make_departure().format_summary()

        assert summary == "ICE 594 (ICE) from Stuttgart Hbf on 02.03.2021 at 09:05, track 16"
