"""
Cheapest-insertion cost model for open (no return-to-depot) routes.
"""

import logging
from typing import Sequence

from .models import InsertionPoint, Location, Task

logger = logging.getLogger(__name__)


def best_position(origin: Location, route: Sequence[Task], target: Location) -> InsertionPoint:
    """
    Find the cheapest position to insert a target into a route.

    Positions are scanned in prepend, between, append order and only a
    strictly cheaper position replaces the current best, so the earliest
    index wins ties.

    Args:
        origin: Current location of the plane
        route: Tasks the plane already intends to visit, in order
        target: Location of the candidate task

    Returns:
        InsertionPoint with the route index and the marginal distance cost
    """
    # Go first
    min_cost = origin.distance_to(target)
    best = 0
    if route:
        head = route[0].location
        min_cost += target.distance_to(head) - origin.distance_to(head)

    # Go after the i'th task
    for i in range(len(route) - 1):
        prev = route[i].location
        nxt = route[i + 1].location
        cost = prev.distance_to(target) + target.distance_to(nxt) - prev.distance_to(nxt)
        if cost < min_cost:
            min_cost = cost
            best = i + 1

    # Go at the end
    if route:
        cost = route[-1].location.distance_to(target)
        if cost < min_cost:
            min_cost = cost
            best = len(route)

    logger.debug("Best position for %s in route of %d: %d (%.4f)", target, len(route), best, min_cost)
    return InsertionPoint(index=best, cost=min_cost)


def route_cost(origin: Location, route: Sequence[Task]) -> float:
    """Length of the open path from origin through every task of the route."""
    total = 0.0
    current = origin
    for task in route:
        total += current.distance_to(task.location)
        current = task.location
    return total
