"""Concurrent multi-stop prediction queries."""

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait

from pydantic import ValidationError as PydanticValidationError

from .client import UraClient
from .combinator import intersect
from .exceptions import UraError, ValidationError
from .models import PredictionQuery, PredictionSet, UraConfig

logger = logging.getLogger(__name__)

ClientFactory = Callable[[UraConfig], UraClient]


def build_query(stops: Sequence[str], ordered: bool = True) -> PredictionQuery:
    """Validate stop names into a PredictionQuery.

    Raises:
        ValidationError: If no stops are given or a stop name is blank
    """
    try:
        return PredictionQuery(stops=list(stops), ordered=ordered)
    except PydanticValidationError as e:
        messages = "; ".join(error["msg"] for error in e.errors())
        raise ValidationError(f"Invalid query: {messages}") from e


def _fetch_stop(
    stop_point_name: str,
    config: UraConfig,
    cancel_event: threading.Event,
    client_factory: ClientFactory,
) -> PredictionSet:
    try:
        with client_factory(config) as client:
            return client.fetch_predictions(stop_point_name, cancel_event=cancel_event)
    except UraError as e:
        if e.stop_point_name is None:
            e.stop_point_name = stop_point_name
        raise


def fetch_all(
    stops: Sequence[str],
    config: UraConfig | None = None,
    client_factory: ClientFactory = UraClient,
) -> list[PredictionSet]:
    """Fetch predictions for every stop concurrently.

    At most ``config.max_workers`` fetches run at once. The first failure
    cancels the fetches that have not finished yet and is raised without
    waiting for them.

    Args:
        stops: Stop point names in travel order
        config: Source settings
        client_factory: Builds one client per fetch

    Returns:
        PredictionSets in the same order as ``stops``

    Raises:
        UraError: The first failure among the fetches
    """
    config = config or UraConfig()
    if not stops:
        return []

    cancel_event = threading.Event()
    executor = ThreadPoolExecutor(
        max_workers=min(config.max_workers, len(stops)),
        thread_name_prefix="ura-fetch",
    )
    futures: list[Future[PredictionSet]] = [
        executor.submit(_fetch_stop, stop, config, cancel_event, client_factory)
        for stop in stops
    ]
    logger.info(f"Fetching predictions for {len(stops)} stops")

    try:
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        for future in futures:
            error = future.exception() if future in done else None
            if error is not None:
                raise error
        results = [future.result() for future in futures]
    except BaseException:
        cancel_event.set()
        executor.shutdown(wait=False, cancel_futures=True)
        raise

    executor.shutdown()
    return results


def find_common_trips(
    query: PredictionQuery,
    config: UraConfig | None = None,
    client_factory: ClientFactory = UraClient,
) -> PredictionSet:
    """Find the trips that visit every stop of the query.

    Args:
        query: Stops in travel order and whether to enforce that order
        config: Source settings
        client_factory: Builds one client per fetch

    Returns:
        Combined PredictionSet relative to the first stop's capture time

    Raises:
        UraError: If any stop could not be fetched or parsed
    """
    prediction_sets = fetch_all(query.stops, config, client_factory)
    combined = intersect(prediction_sets, ordered=query.ordered)
    if combined is None:
        raise ValidationError("Query must name at least one stop")
    logger.info(
        f"{len(combined)} trips common to {len(query.stops)} stops "
        f"({'ordered' if query.ordered else 'unordered'})"
    )
    return combined
