"""Parser for URA newline-delimited JSON prediction feeds.

A feed starts with a metadata record such as ``[4,"1.0",1700000000000]``
whose third element is the capture time in epoch milliseconds. Every
following line is a prediction record laid out in ``ReturnList`` order::

    [1,"Bushof","33","Vaals Busstation",123456,1700000090000]
"""

import json
import logging
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import FeedFormatError
from .models import Prediction, PredictionSet

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

METADATA_TIMESTAMP_INDEX = 2
PREDICTION_FIELDS = (
    "stop_point_name",
    "line_name",
    "destination_text",
    "trip_id",
    "estimated_time",
)


class _MetadataRecord(BaseModel):
    model_config = ConfigDict(strict=True)

    timestamp: int


class _PredictionRecord(BaseModel):
    model_config = ConfigDict(strict=True)

    stop_point_name: str
    line_name: str
    destination_text: str
    trip_id: int = Field(..., ge=0)
    estimated_time: int


def datetime_from_millis(timestamp: int) -> datetime:
    """Convert epoch milliseconds to a timezone-aware local datetime.

    Division floors toward negative infinity, so ``-500`` is half a second
    before the epoch rather than after it.
    """
    seconds, millis = divmod(timestamp, 1000)
    return (EPOCH + timedelta(seconds=seconds, milliseconds=millis)).astimezone()


def _convert_timestamp(timestamp: int, line_number: int) -> datetime:
    try:
        return datetime_from_millis(timestamp)
    except (OverflowError, ValueError) as e:
        raise FeedFormatError(f"Line {line_number}: timestamp out of range") from e


def _decode_line(raw: str | bytes, line_number: int) -> str:
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FeedFormatError(f"Line {line_number} is not valid UTF-8") from e
    return raw


def _load_array(line: str, line_number: int) -> list[Any]:
    try:
        value = json.loads(line)
    except json.JSONDecodeError as e:
        raise FeedFormatError(f"Line {line_number} is not valid JSON: {e}") from e
    if not isinstance(value, list):
        raise FeedFormatError(f"Line {line_number} is not a JSON array")
    return value


def parse_metadata(array: list[Any], line_number: int = 1) -> datetime:
    """Extract the capture timestamp from a metadata record."""
    if len(array) <= METADATA_TIMESTAMP_INDEX:
        raise FeedFormatError(
            f"Line {line_number}: metadata record needs at least "
            f"{METADATA_TIMESTAMP_INDEX + 1} elements, got {len(array)}"
        )
    try:
        record = _MetadataRecord(timestamp=array[METADATA_TIMESTAMP_INDEX])
    except PydanticValidationError as e:
        raise FeedFormatError(f"Line {line_number}: invalid metadata record: {e}") from e
    return _convert_timestamp(record.timestamp, line_number)


def parse_prediction(array: list[Any], line_number: int) -> Prediction:
    """Convert one prediction record into a Prediction."""
    if len(array) <= len(PREDICTION_FIELDS):
        raise FeedFormatError(
            f"Line {line_number}: prediction record needs at least "
            f"{len(PREDICTION_FIELDS) + 1} elements, got {len(array)}"
        )
    fields = dict(zip(PREDICTION_FIELDS, array[1 : len(PREDICTION_FIELDS) + 1]))
    try:
        record = _PredictionRecord.model_validate(fields)
    except PydanticValidationError as e:
        raise FeedFormatError(
            f"Line {line_number}: invalid prediction record: {e}"
        ) from e
    return Prediction(
        stop_point_name=record.stop_point_name,
        line_name=record.line_name,
        destination_text=record.destination_text,
        trip_id=record.trip_id,
        estimated_time=_convert_timestamp(record.estimated_time, line_number),
    )


def parse_feed(lines: Iterable[str | bytes]) -> PredictionSet:
    """Parse a URA feed into a PredictionSet.

    Args:
        lines: Feed lines, as text or UTF-8 bytes. Blank lines are ignored.

    Returns:
        PredictionSet holding the capture time and the predictions in the
        order they were received

    Raises:
        FeedFormatError: If the feed is empty or any record is malformed
    """
    capture_time: datetime | None = None
    predictions: list[Prediction] = []

    for line_number, raw in enumerate(lines, 1):
        line = _decode_line(raw, line_number).strip()
        if not line:
            continue
        array = _load_array(line, line_number)
        if capture_time is None:
            capture_time = parse_metadata(array, line_number)
        else:
            predictions.append(parse_prediction(array, line_number))

    if capture_time is None:
        raise FeedFormatError("Feed is empty: missing metadata record")

    logger.debug(f"Parsed {len(predictions)} predictions captured at {capture_time}")
    return PredictionSet(time=capture_time, predictions=tuple(predictions))
