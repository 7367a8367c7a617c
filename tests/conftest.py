"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from travel_ura.core.models import Prediction, PredictionSet

BASE_URL = "http://ura.example.test/interfaces/ura/instant_V1"

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def at(minutes: float) -> datetime:
    return T0 + timedelta(minutes=minutes)


@pytest.fixture
def base_url():
    """Endpoint used by mocked HTTP tests."""
    return BASE_URL


@pytest.fixture
def make_prediction():
    """Build a Prediction due a number of minutes after T0."""

    def _make(trip_id, minutes, stop="Bushof", line="33", destination="Vaals"):
        return Prediction(
            stop_point_name=stop,
            line_name=line,
            destination_text=destination,
            trip_id=trip_id,
            estimated_time=at(minutes),
        )

    return _make


@pytest.fixture
def make_prediction_set(make_prediction):
    """Build a PredictionSet from (trip_id, minutes) pairs."""

    def _make(trips, stop="Bushof", captured=0):
        return PredictionSet(
            time=at(captured),
            predictions=tuple(
                make_prediction(trip_id, minutes, stop=stop)
                for trip_id, minutes in trips
            ),
        )

    return _make


@pytest.fixture
def sample_feed():
    """Sample URA feed body for the stop Bushof."""
    return (
        '[4,"1.0",1709294400000]\n'
        '[1,"Bushof","33","Vaals Busstation",1001,1709294700000]\n'
        '[1,"Bushof","4","Uniklinik",1002,1709294520000]\n'
        '[1,"Bushof","11","Campus Melaten",1003,1709295600000]\n'
    )


@pytest.fixture
def second_stop_feed():
    """Sample URA feed body for the stop Ponttor."""
    return (
        '[4,"1.0",1709294405000]\n'
        '[1,"Ponttor","33","Vaals Busstation",1001,1709294880000]\n'
        '[1,"Ponttor","4","Uniklinik",1002,1709294460000]\n'
        '[1,"Ponttor","7","Siegel",2001,1709294600000]\n'
    )
