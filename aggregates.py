"""
Maintenance of the derived averages stored on a bootcamp.

`average_cost` is the mean course tuition rounded up to the next multiple of
10; `average_rating` is the plain mean review rating. Both are recomputed from
scratch after a course or review write has committed. When a bootcamp has no
children left the field is removed.

Failures never propagate: they are logged and the triggering request still
succeeds. Two concurrent recomputes for the same bootcamp may read
overlapping snapshots; the later write wins.
"""

import math
from typing import Optional

from pymongo.errors import PyMongoError

from database import Store
from errors import AggregateComputeError, ApiError
from logger import get_logger

logger = get_logger(__name__)


def _mean(collection, bootcamp_id: str, field: str) -> Optional[float]:
    pipeline = [
        {"$match": {"bootcamp_id": bootcamp_id}},
        {"$group": {"_id": "$bootcamp_id", "average": {"$avg": f"${field}"}}},
    ]
    try:
        rows = collection.aggregate(pipeline)
    except (ApiError, PyMongoError) as exc:
        raise AggregateComputeError(f"Could not aggregate {field}: {exc}") from exc
    if not rows:
        return None
    value = rows[0].get("average")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        raise AggregateComputeError(f"Non-numeric {field} average for bootcamp {bootcamp_id}: {value!r}")
    return float(value)


def _write(store: Store, bootcamp_id: str, field: str, value: Optional[float]) -> None:
    update = {"$unset": {field: ""}} if value is None else {"$set": {field: value}}
    try:
        store.bootcamps.update_by_id(bootcamp_id, update)
    except (ApiError, PyMongoError) as exc:
        raise AggregateComputeError(f"Could not write {field}: {exc}") from exc


def round_up_to_ten(value: float) -> int:
    return int(math.ceil(value / 10.0)) * 10


def recompute_average_cost(store: Store, bootcamp_id: str) -> None:
    try:
        mean = _mean(store.courses, bootcamp_id, "tuition")
        _write(store, bootcamp_id, "average_cost", None if mean is None else round_up_to_ten(mean))
    except AggregateComputeError as exc:
        logger.error("average cost not updated", bootcamp_id=bootcamp_id, error=exc.message)


def recompute_average_rating(store: Store, bootcamp_id: str) -> None:
    try:
        mean = _mean(store.reviews, bootcamp_id, "rating")
        _write(store, bootcamp_id, "average_rating", mean)
    except AggregateComputeError as exc:
        logger.error("average rating not updated", bootcamp_id=bootcamp_id, error=exc.message)
