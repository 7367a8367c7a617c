"""Core URA prediction query functionality."""

from .client import UraClient
from .combinator import intersect
from .exceptions import (
    FeedFormatError,
    FetchCancelledError,
    FetchError,
    TransportError,
    UnexpectedStatusError,
    UnknownStopError,
    UraError,
    ValidationError,
)
from .feed import datetime_from_millis, parse_feed
from .models import Prediction, PredictionQuery, PredictionSet, UraConfig
from .query import build_query, fetch_all, find_common_trips

__all__ = [
    "Prediction",
    "PredictionQuery",
    "PredictionSet",
    "UraConfig",
    "UraClient",
    "parse_feed",
    "datetime_from_millis",
    "intersect",
    "build_query",
    "fetch_all",
    "find_common_trips",
    "UraError",
    "ValidationError",
    "FeedFormatError",
    "FetchError",
    "UnknownStopError",
    "UnexpectedStatusError",
    "TransportError",
    "FetchCancelledError",
]
