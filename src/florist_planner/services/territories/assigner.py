"""Distance-threshold territory assignment."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ...models.domain import Territory


@dataclass(frozen=True, slots=True)
class DistanceThreshold:
    territory_id: str
    max_distance_miles: float


@dataclass(slots=True)
class ReassignmentPlan:
    to_add: set[str]
    to_remove: set[str]

    @property
    def is_noop(self) -> bool:
        return not self.to_add and not self.to_remove


def thresholds_from_territories(territories: Iterable[Territory]) -> list[DistanceThreshold]:
    """Territories carrying a distance limit; the rest are manual-only."""

    return [
        DistanceThreshold(territory.id, territory.max_distance_miles)
        for territory in territories
        if territory.max_distance_miles is not None
    ]


def assign_territories(
    distance_miles: Optional[float],
    thresholds: Sequence[DistanceThreshold],
) -> set[str]:
    """Return every territory whose threshold the distance satisfies.

    Thresholds are independent: a florist 8 miles out qualifies for both a
    10-mile and a 30-mile territory. An unknown distance satisfies none.
    """

    distance = math.inf if distance_miles is None else distance_miles
    return {
        threshold.territory_id
        for threshold in thresholds
        if distance <= threshold.max_distance_miles
    }


def plan_reassignment(
    current: Iterable[str],
    desired: Iterable[str],
    managed: Iterable[str],
) -> ReassignmentPlan:
    """Diff current memberships against the desired set.

    Only ``managed`` (threshold-driven) territories are ever removed, so
    manual assignments survive a re-run.
    """

    current_set = set(current)
    desired_set = set(desired)
    managed_set = set(managed)
    return ReassignmentPlan(
        to_add=desired_set - current_set,
        to_remove=(current_set & managed_set) - desired_set,
    )
