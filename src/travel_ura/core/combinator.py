"""Order-aware intersection of per-stop prediction sets."""

import logging
from collections.abc import Iterable
from operator import attrgetter

from .models import Prediction, PredictionSet

logger = logging.getLogger(__name__)


def intersect(
    prediction_sets: Iterable[PredictionSet], ordered: bool = True
) -> PredictionSet | None:
    """Keep only the trips that appear in every prediction set.

    Sets must be given in the order the stops are travelled. With ``ordered``
    a trip also has to be predicted at each stop no later than at the next
    one. Each surviving trip is reported by its prediction at the first stop.

    Args:
        prediction_sets: One PredictionSet per stop, in stop order
        ordered: Enforce the visiting order of the stops

    Returns:
        PredictionSet anchored at the first set's capture time with the common
        trips sorted by estimated time, or None if no sets were given
    """
    sets = iter(prediction_sets)
    first = next(sets, None)
    if first is None:
        return None

    # duplicate trip ids within one feed: last record wins
    trips: dict[int, Prediction] = {p.trip_id: p for p in first.predictions}

    for stop_index, prediction_set in enumerate(sets, 2):
        common: dict[int, Prediction] = {}
        # every duplicate of a trip in this set is checked against the same pred
        for p in prediction_set.predictions:
            pred = trips.get(p.trip_id)
            if pred is None:
                continue
            if not ordered or pred.estimated_time <= p.estimated_time:
                common[p.trip_id] = pred
        logger.debug(
            f"Stop {stop_index}: {len(common)} of {len(trips)} trips remain"
        )
        trips = common

    return PredictionSet(
        time=first.time,
        predictions=tuple(sorted(trips.values(), key=attrgetter("estimated_time"))),
    )
