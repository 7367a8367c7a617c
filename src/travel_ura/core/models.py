"""Data models for URA bus predictions."""

from datetime import datetime
from operator import attrgetter

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BASE_URL = "http://ivu.aseag.de/interfaces/ura/instant_V1"


class Prediction(BaseModel):
    """One vehicle's predicted visit to one stop."""

    model_config = ConfigDict(frozen=True)

    stop_point_name: str = Field(..., description="Stop the prediction was observed at")
    line_name: str = Field(..., description="Service/route label")
    destination_text: str = Field(..., description="Human-readable destination")
    trip_id: int = Field(..., ge=0, description="Identifies one vehicle journey")
    estimated_time: datetime = Field(
        ..., description="Predicted arrival at the stop (timezone-aware)"
    )

    def __str__(self) -> str:
        return f"{self.line_name} → {self.destination_text} (trip {self.trip_id})"


class PredictionSet(BaseModel):
    """Predictions captured by one feed pull."""

    model_config = ConfigDict(frozen=True)

    time: datetime = Field(..., description="Capture timestamp reported by the source")
    predictions: tuple[Prediction, ...] = Field(
        default_factory=tuple, description="Predictions in received order"
    )

    def __len__(self) -> int:
        return len(self.predictions)

    def trip_ids(self) -> set[int]:
        """Get the trip identifiers present in this set."""
        return {p.trip_id for p in self.predictions}

    def sorted_by_time(self) -> "PredictionSet":
        """Get a copy with predictions sorted by estimated time."""
        return PredictionSet(
            time=self.time,
            predictions=tuple(
                sorted(self.predictions, key=attrgetter("estimated_time"))
            ),
        )

    def minutes_until(self, prediction: Prediction) -> int:
        """Whole minutes from the capture time to the prediction, truncated toward zero."""
        seconds = (prediction.estimated_time - self.time).total_seconds()
        return int(seconds / 60)


class PredictionQuery(BaseModel):
    """Request model for a multi-stop prediction query."""

    stops: list[str] = Field(
        ..., min_length=1, description="Stop point names in travel order"
    )
    ordered: bool = Field(
        True, description="Require the vehicle to reach the stops in the given order"
    )

    @field_validator("stops")
    @classmethod
    def _stops_not_blank(cls, stops: list[str]) -> list[str]:
        for stop in stops:
            if not stop.strip():
                raise ValueError("Stop point name cannot be empty")
        return stops


class UraConfig(BaseModel):
    """Settings for talking to a URA prediction source."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(DEFAULT_BASE_URL, description="URA instant endpoint")
    timeout: float = Field(30.0, gt=0, description="Request timeout in seconds")
    max_workers: int = Field(8, ge=1, description="Maximum concurrent stop fetches")
    user_agent: str = Field("travel-ura/0.1.0", description="User-Agent header")
