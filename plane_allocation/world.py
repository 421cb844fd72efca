"""
Discrete-time world that keeps track of planes, tasks and stations and runs
one allocation pass per tick.
"""

from collections import deque
from typing import Deque, Dict, List, Optional, Any
import logging
from .models import Location, Plane, Station, Task, AllocationResult
from .problem import ProblemDefinition
from .strategies import AllocationStrategy
from .visibility import VisibilityModel, OmniscientVisibility
from . import config

logger = logging.getLogger(__name__)


class World:
    """
    Represents the world where a simulation runs.

    The world submits tasks when their time comes, asks the allocation
    strategy for each plane's next target, moves planes towards their targets
    and removes tasks once a plane reaches them.
    """

    def __init__(self, strategy: AllocationStrategy, visibility_model: Optional[VisibilityModel] = None):
        """
        Initialize an empty world.

        Args:
            strategy: Strategy run once per tick
            visibility_model: Decides which tasks each plane can claim
                (defaults to omniscient visibility)
        """
        self.strategy = strategy
        self.visibility_model = visibility_model or OmniscientVisibility()
        self.width = config.DEFAULT_WIDTH
        self.height = config.DEFAULT_HEIGHT
        self.duration = config.DEFAULT_DURATION
        self.time = 0
        self.planes: List[Plane] = []
        self.stations: List[Station] = []
        self.assignment: Dict[Plane, Task] = {}
        self.reverse_assignment: Dict[Task, Plane] = {}
        self.completed: List[tuple] = []
        self.last_result: Optional[AllocationResult] = None
        self._tasks: Dict[Task, None] = {}
        self._schedule: Deque[Task] = deque()

    def init(self, problem: ProblemDefinition):
        """
        Initialize the simulation according to a problem definition.

        Args:
            problem: Scenario to simulate
        """
        self.width = problem.width
        self.height = problem.height
        self.duration = problem.duration
        self.time = 0
        self.planes = [
            Plane(
                plane_id=i,
                location=Location(p.x, p.y),
                speed=p.speed,
                communication_range=p.communication_range
            )
            for i, p in enumerate(problem.planes)
        ]
        self.stations = [
            Station(station_id=i, location=Location(s.x, s.y))
            for i, s in enumerate(problem.stations)
        ]
        tasks = [
            Task(task_id=i, location=Location(t.x, t.y), time=t.time)
            for i, t in enumerate(problem.tasks)
        ]
        self._schedule = deque(sorted(tasks, key=lambda t: (t.time, t.task_id)))
        self._tasks = {}
        self.assignment = {}
        self.reverse_assignment = {}
        self.completed = []
        self.last_result = None
        logger.info("World initialized: %d planes, %d tasks, %d stations",
                    len(self.planes), len(tasks), len(self.stations))

    @property
    def tasks(self) -> List[Task]:
        """Submitted tasks that have not been completed yet."""
        return list(self._tasks)

    @property
    def finished(self) -> bool:
        """True once every task has been submitted and completed."""
        return not self._schedule and not self._tasks

    def add_task(self, task: Task):
        """Add a new task to the world."""
        self._tasks[task] = None

    def remove_task(self, task: Task):
        """Remove a completed task from the world."""
        self._tasks.pop(task, None)

    def get_nearest_station(self, location: Location) -> Optional[Station]:
        """Get the recharging station closest to a location, if any."""
        if not self.stations:
            return None
        return min(self.stations, key=lambda s: s.location.distance_to(location))

    def allocate(self) -> AllocationResult:
        """Submit the tasks due now and run one allocation pass without moving planes."""
        while self._schedule and self._schedule[0].time <= self.time:
            task = self._schedule.popleft()
            logger.debug("t=%d: task %d submitted", self.time, task.task_id)
            self.add_task(task)

        tasks = self.tasks
        visibility = self.visibility_model.compute(self.planes, tasks)
        self.last_result = self.strategy.allocate(
            self.planes, tasks, visibility, self.assignment, self.reverse_assignment
        )
        return self.last_result

    def step(self) -> AllocationResult:
        """Advance the simulation by one tick."""
        self.allocate()

        for plane in self.planes:
            target = self.assignment.get(plane)
            if target is None:
                continue
            plane.location = plane.location.move_towards(target.location, plane.speed)
            if plane.location == target.location:
                self._complete(plane, target)

        self.time += 1
        return self.last_result

    def _complete(self, plane: Plane, task: Task):
        logger.debug("t=%d: plane %d completed task %d", self.time, plane.plane_id, task.task_id)
        self.remove_task(task)
        if task in plane.route:
            plane.route.remove(task)
        self.assignment.pop(plane, None)
        self.reverse_assignment.pop(task, None)
        self.completed.append((task, self.time))

    def run(self, ticks: Optional[int] = None) -> Dict[str, Any]:
        """
        Run the simulation.

        Args:
            ticks: Maximum number of ticks to run (None runs until the
                scenario's duration elapses or every task is completed)

        Returns:
            Dictionary with the simulation statistics
        """
        elapsed = 0
        while self.time < self.duration and not self.finished:
            if ticks is not None and elapsed >= ticks:
                break
            self.step()
            elapsed += 1
        logger.info("Simulation stopped at t=%d: %d tasks completed, %d pending",
                    self.time, len(self.completed), len(self._tasks))
        return self.get_statistics()

    def get_statistics(self) -> Dict[str, Any]:
        """Get a summary of the simulation progress."""
        latencies = [done - task.time for task, done in self.completed]
        return {
            "time": self.time,
            "num_planes": len(self.planes),
            "completed_tasks": len(self.completed),
            "pending_tasks": len(self._tasks),
            "scheduled_tasks": len(self._schedule),
            "average_latency": sum(latencies) / len(latencies) if latencies else 0,
        }
