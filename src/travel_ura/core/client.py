"""HTTP client for URA instant prediction endpoints."""

import logging
import threading
from collections.abc import Iterable, Iterator
from types import TracebackType

import requests

from .exceptions import (
    FetchCancelledError,
    TransportError,
    UnexpectedStatusError,
    UnknownStopError,
)
from .feed import parse_feed
from .models import PredictionSet, UraConfig

logger = logging.getLogger(__name__)

RETURN_LIST = "StopPointName,LineName,DestinationText,EstimatedTime,TripID"

# URA answers an unknown filter value with 416 Range Not Satisfiable
INVALID_FILTER_STATUS = 416


def build_params(stop_point_name: str | None = None) -> dict[str, str]:
    """Build query parameters for a prediction request."""
    params = {"ReturnList": RETURN_LIST}
    if stop_point_name is not None:
        params["StopPointName"] = stop_point_name
    return params


class UraClient:
    """Client for one URA prediction source."""

    def __init__(self, config: UraConfig | None = None):
        """Initialize the client.

        Args:
            config: Endpoint and timeout settings
        """
        self.config = config or UraConfig()
        self.session = requests.Session()
        self.session.headers.update(
            {
                "User-Agent": self.config.user_agent,
                "Accept": "application/json, text/plain, */*",
            }
        )

    def __enter__(self) -> "UraClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def fetch_predictions(
        self,
        stop_point_name: str | None = None,
        cancel_event: threading.Event | None = None,
    ) -> PredictionSet:
        """Fetch and parse predictions, optionally filtered to one stop.

        Args:
            stop_point_name: Stop to filter on, or None for the whole feed
            cancel_event: When set, the fetch is abandoned as soon as possible

        Returns:
            PredictionSet parsed from the response body

        Raises:
            UnknownStopError: If the source rejects the stop name
            UnexpectedStatusError: If the source answers with another non-200 status
            TransportError: If the request fails at the network level
            FeedFormatError: If the response body is malformed
            FetchCancelledError: If cancel_event was set
        """
        self._check_cancelled(stop_point_name, cancel_event)
        logger.debug(f"Requesting predictions for stop {stop_point_name!r}")

        try:
            with self.session.get(
                self.config.base_url,
                params=build_params(stop_point_name),
                timeout=self.config.timeout,
                stream=True,
            ) as response:
                if response.status_code == requests.codes.ok:
                    lines = response.iter_lines()
                    if cancel_event is not None:
                        lines = self._until_cancelled(
                            lines, stop_point_name, cancel_event
                        )
                    prediction_set = parse_feed(lines)
                elif (
                    response.status_code == INVALID_FILTER_STATUS
                    and stop_point_name is not None
                ):
                    raise UnknownStopError(stop_point_name)
                else:
                    raise UnexpectedStatusError(response.status_code, stop_point_name)

        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"Failed to fetch predictions: {str(e)}", stop_point_name
            ) from e

        logger.info(
            f"Fetched {len(prediction_set)} predictions for stop {stop_point_name!r}"
        )
        return prediction_set

    @staticmethod
    def _check_cancelled(
        stop_point_name: str | None, cancel_event: threading.Event | None
    ) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise FetchCancelledError(
                f"Fetch for stop {stop_point_name!r} was cancelled", stop_point_name
            )

    @classmethod
    def _until_cancelled(
        cls,
        lines: Iterable[bytes],
        stop_point_name: str | None,
        cancel_event: threading.Event,
    ) -> Iterator[bytes]:
        for line in lines:
            cls._check_cancelled(stop_point_name, cancel_event)
            yield line
