"""
Allocation strategies that decide which task each plane should head to next.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Optional, Set
import heapq
import itertools
import logging
import time
import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp
from .insertion import best_position
from .models import Plane, Task, Bid, InsertionPoint, AllocationResult

logger = logging.getLogger(__name__)

Visibility = Dict[Plane, Set[Task]]


class AllocationStrategy(ABC):
    """Base class for allocation strategies."""

    @abstractmethod
    def allocate(
        self,
        planes: List[Plane],
        tasks: List[Task],
        visibility: Visibility,
        assignment: Optional[Dict[Plane, Task]] = None,
        reverse_assignment: Optional[Dict[Task, Plane]] = None
    ) -> AllocationResult:
        """
        Run one allocation pass.

        Args:
            planes: Ordered plane roster
            tasks: Uncompleted tasks of the world
            visibility: Tasks each plane can currently perceive
            assignment: Plane to next-task map, updated in place if given
            reverse_assignment: Task to plane map, rebuilt in place if given

        Returns:
            AllocationResult describing the pass
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Return the name of the strategy."""
        pass

    @staticmethod
    def _pending_pool(tasks: List[Task]) -> Dict[Task, None]:
        # Insertion-ordered by task id; this order is the task tie-break policy
        return dict.fromkeys(sorted(tasks, key=lambda t: t.task_id))

    @staticmethod
    def _publish(
        planes: List[Plane],
        routes: Dict[Plane, List[Task]],
        assignment: Dict[Plane, Task],
        reverse_assignment: Dict[Task, Plane]
    ) -> Dict[Plane, List[Task]]:
        """
        Write the working routes back and rebuild both assignment maps.

        Returns:
            Snapshot of every plane's route
        """
        reverse_assignment.clear()
        for plane in planes:
            route = routes[plane]
            plane.route = route
            if route:
                assignment[plane] = route[0]
                reverse_assignment[route[0]] = plane
            else:
                assignment.pop(plane, None)
        return {plane: list(routes[plane]) for plane in planes}


class SSIAllocation(AllocationStrategy):
    """
    Sequential single-item auction over cheapest-insertion bids.

    Every plane bids for the visible pending task it can insert into its
    route at the lowest marginal cost. The globally cheapest bid is accepted,
    the winner bids again, and the process repeats until no task is pending
    or no plane has anything left to bid for. Bids made stale by an earlier
    acceptance are left in the queue and discarded when popped.
    """

    def __init__(self, persistent_routes: bool = False):
        """
        Initialize the SSI auction.

        Args:
            persistent_routes: Seed each pass with the routes planes kept
                from the previous pass instead of starting from scratch
        """
        self.persistent_routes = persistent_routes

    def get_name(self) -> str:
        name = "SSI Auction"
        if self.persistent_routes:
            name += " (persistent routes)"
        return name

    def best_bid(
        self,
        plane: Plane,
        route: List[Task],
        pending: Dict[Task, None],
        visible: Set[Task]
    ) -> Optional[Bid]:
        """
        Find the cheapest visible pending task for a plane.

        Args:
            plane: The bidding plane
            route: The plane's working route
            pending: Tasks not yet claimed, in tie-break order
            visible: Tasks the plane can perceive

        Returns:
            The best Bid, or None if the plane sees no pending task
        """
        best_task = None
        best_point = None
        for task in pending:
            if task not in visible:
                continue
            point = best_position(plane.location, route, task.location)
            if best_point is None or point.cost < best_point.cost:
                best_task = task
                best_point = point

        if best_task is None:
            return None
        return Bid(plane=plane, task=best_task, position=best_point)

    def _initial_route(self, plane: Plane, pending: Dict[Task, None]) -> List[Task]:
        if not self.persistent_routes:
            return []
        route = []
        for task in plane.route:
            if task in pending:
                route.append(task)
                del pending[task]
        return route

    def allocate(
        self,
        planes: List[Plane],
        tasks: List[Task],
        visibility: Visibility,
        assignment: Optional[Dict[Plane, Task]] = None,
        reverse_assignment: Optional[Dict[Task, Plane]] = None
    ) -> AllocationResult:
        """Run the auction for one simulation tick."""
        start_time = time.time()

        if assignment is None:
            assignment = {}
        if reverse_assignment is None:
            reverse_assignment = {}

        pending = self._pending_pool(tasks)
        initial_pending = len(pending)
        logger.debug("Tasks to allocate: %s", list(pending))

        # Initialize the working routes and first bids
        routes: Dict[Plane, List[Task]] = {}
        queue = []
        sequence = itertools.count()
        for plane in planes:
            routes[plane] = self._initial_route(plane, pending)
            bid = self.best_bid(plane, routes[plane], pending, visibility.get(plane, set()))
            if bid is not None:
                logger.debug("New bid: %s", bid)
                heapq.heappush(queue, (bid.cost, next(sequence), bid))
            else:
                logger.debug("Plane %s has no bid to make", plane.plane_id)

        accepted: List[Bid] = []
        stale = 0
        while queue and pending:
            _, _, bid = heapq.heappop(queue)

            # Stale bids stay queued until popped; the plane just bids again
            if bid.task in pending:
                logger.debug("Accepted bid: %s", bid)
                routes[bid.plane].insert(bid.position.index, bid.task)
                del pending[bid.task]
                accepted.append(bid)
            else:
                stale += 1

            new_bid = self.best_bid(bid.plane, routes[bid.plane], pending,
                                    visibility.get(bid.plane, set()))
            if new_bid is not None:
                logger.debug("New bid: %s", new_bid)
                heapq.heappush(queue, (new_bid.cost, next(sequence), new_bid))

        snapshot = self._publish(planes, routes, assignment, reverse_assignment)

        total_cost = sum(b.cost for b in accepted)
        computation_time = time.time() - start_time
        logger.info("%s: %d bids accepted, %d stale, %d tasks left pending",
                    self.get_name(), len(accepted), stale, len(pending))

        return AllocationResult(
            assignment=assignment,
            reverse_assignment=reverse_assignment,
            accepted_bids=accepted,
            total_cost=total_cost,
            unassigned_tasks=list(pending),
            computation_time=computation_time,
            strategy_name=self.get_name(),
            routes=snapshot,
            stale_bids=stale,
            metadata={"initial_pending": initial_pending}
        )


class NearestAllocation(AllocationStrategy):
    """Each plane, in roster order, takes the nearest visible unclaimed task."""

    def get_name(self) -> str:
        return "Nearest Task Allocation"

    def allocate(
        self,
        planes: List[Plane],
        tasks: List[Task],
        visibility: Visibility,
        assignment: Optional[Dict[Plane, Task]] = None,
        reverse_assignment: Optional[Dict[Task, Plane]] = None
    ) -> AllocationResult:
        """Greedily give each plane its nearest visible task."""
        start_time = time.time()

        if assignment is None:
            assignment = {}
        if reverse_assignment is None:
            reverse_assignment = {}

        pending = self._pending_pool(tasks)
        routes: Dict[Plane, List[Task]] = {}
        accepted: List[Bid] = []

        for plane in planes:
            visible = visibility.get(plane, set())
            best_task = None
            best_distance = float('inf')

            for task in pending:
                if task in visible:
                    distance = plane.location.distance_to(task.location)
                    if distance < best_distance:
                        best_distance = distance
                        best_task = task

            if best_task is not None:
                routes[plane] = [best_task]
                del pending[best_task]
                accepted.append(Bid(plane=plane, task=best_task,
                                    position=InsertionPoint(index=0, cost=best_distance)))
            else:
                routes[plane] = []

        snapshot = self._publish(planes, routes, assignment, reverse_assignment)

        return AllocationResult(
            assignment=assignment,
            reverse_assignment=reverse_assignment,
            accepted_bids=accepted,
            total_cost=sum(b.cost for b in accepted),
            unassigned_tasks=list(pending),
            computation_time=time.time() - start_time,
            strategy_name=self.get_name(),
            routes=snapshot
        )


class MILPAllocation(AllocationStrategy):
    """
    Optimal one-task-per-plane allocation using Mixed Integer Linear Programming.

    Maximizes the number of planes that receive a visible task and, among
    those allocations, minimizes the total plane-to-task distance. Solved with
    SciPy's HiGHS interface.
    """

    def __init__(self, time_limit: Optional[float] = None):
        """
        Initialize MILP allocation strategy.

        Args:
            time_limit: Maximum time in seconds for solver (None for no limit)
        """
        self.time_limit = time_limit

    def get_name(self) -> str:
        return "MILP Optimal Allocation"

    def allocate(
        self,
        planes: List[Plane],
        tasks: List[Task],
        visibility: Visibility,
        assignment: Optional[Dict[Plane, Task]] = None,
        reverse_assignment: Optional[Dict[Task, Plane]] = None
    ) -> AllocationResult:
        """Solve the next-task allocation as a MILP."""
        start_time = time.time()

        if assignment is None:
            assignment = {}
        if reverse_assignment is None:
            reverse_assignment = {}

        ordered_tasks = list(self._pending_pool(tasks))
        task_index = {task: j for j, task in enumerate(ordered_tasks)}

        # Decision variables: one per visible (plane, task) pair
        pairs = []
        for i, plane in enumerate(planes):
            for task in visibility.get(plane, set()):
                if task in task_index:
                    pairs.append((i, task_index[task]))
        pairs.sort()

        routes: Dict[Plane, List[Task]] = {plane: [] for plane in planes}
        accepted: List[Bid] = []
        status = "No visible tasks"

        if pairs:
            distances = np.array([
                planes[i].location.distance_to(ordered_tasks[j].location)
                for i, j in pairs
            ])
            # Reward large enough that one more assignment always beats any distance saving
            reward = distances.sum() + 1.0
            c = distances - reward

            a = np.zeros((len(planes) + len(ordered_tasks), len(pairs)))
            for k, (i, j) in enumerate(pairs):
                a[i, k] = 1.0
                a[len(planes) + j, k] = 1.0

            options = {}
            if self.time_limit:
                options["time_limit"] = self.time_limit

            res = milp(
                c=c,
                constraints=LinearConstraint(a, -np.inf, 1.0),
                integrality=np.ones(len(pairs)),
                bounds=Bounds(0, 1),
                options=options
            )
            status = res.message
            if res.x is None:
                logger.warning("MILP solver returned no solution: %s", res.message)
            else:
                for k, (i, j) in enumerate(pairs):
                    if res.x[k] > 0.5:
                        plane = planes[i]
                        task = ordered_tasks[j]
                        routes[plane] = [task]
                        accepted.append(Bid(plane=plane, task=task,
                                            position=InsertionPoint(index=0, cost=float(distances[k]))))

        snapshot = self._publish(planes, routes, assignment, reverse_assignment)

        claimed = {b.task for b in accepted}
        return AllocationResult(
            assignment=assignment,
            reverse_assignment=reverse_assignment,
            accepted_bids=accepted,
            total_cost=sum(b.cost for b in accepted),
            unassigned_tasks=[t for t in ordered_tasks if t not in claimed],
            computation_time=time.time() - start_time,
            strategy_name=self.get_name(),
            routes=snapshot,
            metadata={"solver_status": status}
        )
