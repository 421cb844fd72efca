"""
Core data models for the plane task allocation engine.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
import math


@dataclass(frozen=True)
class Location:
    """Represents a 2D location with x, y coordinates."""
    x: float
    y: float

    def distance_to(self, other: 'Location') -> float:
        """Calculate Euclidean distance to another location."""
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2)

    def move_towards(self, target: 'Location', step: float) -> 'Location':
        """
        Return the point reached after travelling towards a target.

        Args:
            target: Location to travel towards
            step: Distance to travel

        Returns:
            The new location, never past the target
        """
        if step < 0:
            msg = f"step must be non-negative, got {step}"
            raise ValueError(msg)
        distance = self.distance_to(target)
        if distance <= step:
            return target
        ratio = step / distance
        return Location(
            x=self.x + (target.x - self.x) * ratio,
            y=self.y + (target.y - self.y) * ratio
        )

    def __repr__(self) -> str:
        return f"Location({self.x:.2f}, {self.y:.2f})"


@dataclass(frozen=True)
class Task:
    """A point in space that must be visited by exactly one plane."""
    task_id: int
    location: Location
    time: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __repr__(self) -> str:
        return f"Task(id={self.task_id}, loc={self.location})"


@dataclass(eq=False)
class Plane:
    """
    A mobile agent with a location and a planned route.

    Planes are compared and hashed by identity, so they can key the
    visibility and assignment maps while their location and route change.
    """
    plane_id: int
    location: Location
    speed: float = 1.0
    communication_range: float = float('inf')
    route: List[Task] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def next_task(self) -> Optional[Task]:
        """Return the task the plane is currently heading to, if any."""
        return self.route[0] if self.route else None

    def __repr__(self) -> str:
        return f"Plane(id={self.plane_id}, loc={self.location}, route={len(self.route)})"


@dataclass(frozen=True)
class Station:
    """A recharging station."""
    station_id: int
    location: Location


@dataclass(frozen=True)
class InsertionPoint:
    """Cheapest position to insert a task into a route and its marginal cost."""
    index: int
    cost: float


@dataclass(frozen=True, eq=False)
class Bid:
    """A claim by one plane on one task at a given position of its route."""
    plane: Plane
    task: Task
    position: InsertionPoint

    @property
    def cost(self) -> float:
        return self.position.cost

    def __repr__(self) -> str:
        return (f"Bid(plane={self.plane.plane_id}, task={self.task.task_id}, "
                f"index={self.position.index}, cost={self.cost:.2f})")


@dataclass
class AllocationResult:
    """Contains the outcome of one allocation pass."""
    assignment: Dict[Plane, Task]
    reverse_assignment: Dict[Task, Plane]
    accepted_bids: List[Bid]
    total_cost: float
    unassigned_tasks: List[Task]
    computation_time: float
    strategy_name: str
    routes: Dict[Plane, List[Task]] = field(default_factory=dict)
    stale_bids: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def route_ids(self) -> Dict[int, List[int]]:
        """Map each plane id to the task ids of its route at the end of the pass."""
        return {
            plane.plane_id: [task.task_id for task in route]
            for plane, route in self.routes.items()
        }

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of the allocation result."""
        return {
            "strategy": self.strategy_name,
            "num_assigned_planes": len(self.assignment),
            "num_accepted_bids": len(self.accepted_bids),
            "num_stale_bids": self.stale_bids,
            "num_unassigned": len(self.unassigned_tasks),
            "total_cost": self.total_cost,
            "computation_time": self.computation_time,
            "average_cost": self.total_cost / len(self.accepted_bids) if self.accepted_bids else 0,
        }

    def __repr__(self) -> str:
        return (f"AllocationResult(strategy={self.strategy_name}, "
                f"assigned={len(self.assignment)}, "
                f"unassigned={len(self.unassigned_tasks)}, "
                f"cost={self.total_cost:.2f})")
