"""Unit tests for the URA HTTP client."""

import threading

import pytest
import requests
import responses
from responses import matchers

from travel_ura.core.client import RETURN_LIST, UraClient, build_params
from travel_ura.core.exceptions import (
    FeedFormatError,
    FetchCancelledError,
    TransportError,
    UnexpectedStatusError,
    UnknownStopError,
)
from travel_ura.core.models import UraConfig


class TestBuildParams:
    """Test request parameter construction."""

    def test_without_stop(self):
        """Test the field selection is always present."""
        assert build_params() == {"ReturnList": RETURN_LIST}

    def test_with_stop(self):
        """Test the stop filter is added when given."""
        assert build_params("Bushof") == {
            "ReturnList": RETURN_LIST,
            "StopPointName": "Bushof",
        }


class TestUraClient:
    """Test URA client."""

    @pytest.fixture
    def client(self, base_url):
        with UraClient(UraConfig(base_url=base_url, timeout=5)) as client:
            yield client

    def test_client_initialization(self):
        """Test client defaults."""
        client = UraClient()
        assert client.config.timeout == 30
        assert client.config.base_url.endswith("instant_V1")
        assert client.session.headers["User-Agent"] == client.config.user_agent
        client.close()

    @responses.activate
    def test_fetch_predictions_success(self, client, base_url, sample_feed):
        """Test a 200 response is parsed into predictions."""
        responses.add(
            responses.GET,
            base_url,
            body=sample_feed,
            status=200,
            match=[
                matchers.query_param_matcher(
                    {"ReturnList": RETURN_LIST, "StopPointName": "Bushof"}
                )
            ],
        )

        result = client.fetch_predictions("Bushof")

        assert [p.trip_id for p in result.predictions] == [1001, 1002, 1003]
        assert {p.stop_point_name for p in result.predictions} == {"Bushof"}

    @responses.activate
    def test_fetch_whole_feed_without_stop(self, client, base_url, sample_feed):
        """Test fetching without a stop filter."""
        responses.add(
            responses.GET,
            base_url,
            body=sample_feed,
            status=200,
            match=[matchers.query_param_matcher({"ReturnList": RETURN_LIST})],
        )

        assert len(client.fetch_predictions()) == 3

    @responses.activate
    def test_unknown_stop(self, client, base_url):
        """Test 416 with a stop name means the stop is unknown."""
        responses.add(responses.GET, base_url, status=416)

        with pytest.raises(UnknownStopError) as exc_info:
            client.fetch_predictions("Nowhere")

        assert exc_info.value.stop_point_name == "Nowhere"
        assert "Nowhere" in str(exc_info.value)

    @responses.activate
    def test_invalid_filter_without_stop(self, client, base_url):
        """Test 416 without a stop name is an unexpected status."""
        responses.add(responses.GET, base_url, status=416)

        with pytest.raises(UnexpectedStatusError) as exc_info:
            client.fetch_predictions()

        assert not isinstance(exc_info.value, UnknownStopError)
        assert exc_info.value.status_code == 416

    @pytest.mark.parametrize("status", [400, 404, 500, 503])
    @responses.activate
    def test_unexpected_status(self, client, base_url, status):
        """Test other non-200 statuses."""
        responses.add(responses.GET, base_url, status=status)

        with pytest.raises(UnexpectedStatusError) as exc_info:
            client.fetch_predictions("Bushof")

        assert exc_info.value.status_code == status
        assert exc_info.value.stop_point_name == "Bushof"

    @responses.activate
    def test_transport_error(self, client, base_url):
        """Test connection failures are wrapped."""
        cause = requests.exceptions.ConnectionError("connection refused")
        responses.add(responses.GET, base_url, body=cause)

        with pytest.raises(TransportError) as exc_info:
            client.fetch_predictions("Bushof")

        assert isinstance(
            exc_info.value.__cause__, requests.exceptions.ConnectionError
        )
        assert exc_info.value.stop_point_name == "Bushof"

    @responses.activate
    def test_timeout_is_transport_error(self, client, base_url):
        """Test timeouts are wrapped."""
        responses.add(
            responses.GET, base_url, body=requests.exceptions.ReadTimeout("slow")
        )

        with pytest.raises(TransportError, match="slow"):
            client.fetch_predictions("Bushof")

    @responses.activate
    def test_malformed_feed(self, client, base_url):
        """Test parser failures propagate."""
        responses.add(responses.GET, base_url, body='[4,"1.0"]\n', status=200)

        with pytest.raises(FeedFormatError):
            client.fetch_predictions("Bushof")

    @responses.activate
    def test_empty_body(self, client, base_url):
        """Test an empty 200 body is a format error."""
        responses.add(responses.GET, base_url, body="", status=200)

        with pytest.raises(FeedFormatError, match="empty"):
            client.fetch_predictions("Bushof")

    def test_cancelled_before_request(self, client):
        """Test a set cancel event stops the fetch before any request."""
        cancel_event = threading.Event()
        cancel_event.set()

        with responses.RequestsMock() as rsps:
            with pytest.raises(FetchCancelledError):
                client.fetch_predictions("Bushof", cancel_event=cancel_event)
            assert len(rsps.calls) == 0

    @responses.activate
    def test_unset_cancel_event(self, client, base_url, sample_feed):
        """Test an unset cancel event does not interfere."""
        responses.add(responses.GET, base_url, body=sample_feed, status=200)

        result = client.fetch_predictions("Bushof", cancel_event=threading.Event())

        assert len(result) == 3
