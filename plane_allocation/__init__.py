"""
Plane Task Allocation
Auction-based allocation of spatial tasks to a fleet of planes in a
discrete-time simulation.
"""

from .models import Location, Task, Plane, Station, InsertionPoint, Bid, AllocationResult
from .insertion import best_position, route_cost
from .problem import ProblemDefinition, PlaneDefinition, TaskDefinition, StationDefinition
from .visibility import VisibilityModel, OmniscientVisibility, RangeVisibility
from .strategies import (
    AllocationStrategy,
    SSIAllocation,
    NearestAllocation,
    MILPAllocation
)
from .world import World
from .analyzer import AllocationAnalyzer

__version__ = "0.1.0"

__all__ = [
    "Location",
    "Task",
    "Plane",
    "Station",
    "InsertionPoint",
    "Bid",
    "AllocationResult",
    "best_position",
    "route_cost",
    "ProblemDefinition",
    "PlaneDefinition",
    "TaskDefinition",
    "StationDefinition",
    "VisibilityModel",
    "OmniscientVisibility",
    "RangeVisibility",
    "AllocationStrategy",
    "SSIAllocation",
    "NearestAllocation",
    "MILPAllocation",
    "World",
    "AllocationAnalyzer",
]
