"""
Analyzer for comparing, checking and visualizing allocation results.
"""

from typing import List, Dict, Any, Optional, Set
import json
import logging
from .insertion import route_cost
from .models import AllocationResult, Plane, Task

logger = logging.getLogger(__name__)


class AllocationAnalyzer:
    """Analyzes and compares allocation results from different strategies."""

    def __init__(self):
        """Initialize the analyzer."""
        self.results: List[AllocationResult] = []

    def add_result(self, result: AllocationResult):
        """Add a result to analyze."""
        self.results.append(result)

    def clear_results(self):
        """Clear all stored results."""
        self.results = []

    @staticmethod
    def check_invariants(result: AllocationResult) -> List[str]:
        """
        Check the structural guarantees of an allocation pass.

        A task must appear in at most one route, and every non-empty route's
        first task must be the plane's assignment (and map back to it).

        Returns:
            Human readable descriptions of every violation (empty if none)
        """
        violations = []
        owners: Dict[Task, Plane] = {}

        for plane, route in result.routes.items():
            for task in route:
                if task in owners and owners[task] is not plane:
                    violations.append(
                        f"task {task.task_id} in routes of planes "
                        f"{owners[task].plane_id} and {plane.plane_id}"
                    )
                owners[task] = plane

            head = route[0] if route else None
            if result.assignment.get(plane) is not head:
                violations.append(f"plane {plane.plane_id} assignment does not match its route head")
            if head is not None and result.reverse_assignment.get(head) is not plane:
                violations.append(f"task {head.task_id} does not map back to plane {plane.plane_id}")

        return violations

    @staticmethod
    def unclaimed_visible_tasks(
        result: AllocationResult,
        visibility: Dict[Plane, Set[Task]]
    ) -> Dict[int, List[int]]:
        """
        Find tasks left pending although some plane could see them.

        Returns:
            Dictionary mapping plane id to the ids of visible pending tasks
        """
        pending = set(result.unassigned_tasks)
        unclaimed = {}
        for plane, visible in visibility.items():
            left = sorted(t.task_id for t in visible & pending)
            if left:
                unclaimed[plane.plane_id] = left
        return unclaimed

    @staticmethod
    def route_length(result: AllocationResult) -> float:
        """Total open-path length of every route in the result."""
        return sum(route_cost(plane.location, route) for plane, route in result.routes.items())

    def compare_strategies(self) -> Dict[str, Any]:
        """
        Compare all stored results.

        Returns:
            Dictionary with comparison metrics
        """
        if not self.results:
            return {}

        comparison = {
            "strategies": [],
            "best_cost": None,
            "best_route_length": None,
            "most_assigned": None,
            "fastest": None,
        }

        best_cost_value = float('inf')
        best_length_value = float('inf')
        most_assigned_count = -1
        fastest_time = float('inf')

        for result in self.results:
            summary = result.get_summary()
            summary["route_length"] = self.route_length(result)
            comparison["strategies"].append(summary)

            if result.total_cost < best_cost_value:
                best_cost_value = result.total_cost
                comparison["best_cost"] = result.strategy_name

            if summary["route_length"] < best_length_value:
                best_length_value = summary["route_length"]
                comparison["best_route_length"] = result.strategy_name

            if len(result.assignment) > most_assigned_count:
                most_assigned_count = len(result.assignment)
                comparison["most_assigned"] = result.strategy_name

            if result.computation_time < fastest_time:
                fastest_time = result.computation_time
                comparison["fastest"] = result.strategy_name

        return comparison

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistical summary of all results.

        Returns:
            Dictionary with statistical metrics
        """
        if not self.results:
            return {}

        costs = [r.total_cost for r in self.results]
        times = [r.computation_time for r in self.results]
        assigned = [len(r.assignment) for r in self.results]

        def describe(values):
            return {"min": min(values), "max": max(values), "avg": sum(values) / len(values)}

        return {
            "num_strategies": len(self.results),
            "cost": describe(costs),
            "computation_time": describe(times),
            "assigned_planes": describe(assigned),
        }

    def print_comparison(self):
        """Print a formatted comparison of all results."""
        if not self.results:
            print("No results to compare.")
            return

        print("=" * 80)
        print("ALLOCATION STRATEGY COMPARISON")
        print("=" * 80)

        for result in self.results:
            print(f"\nStrategy: {result.strategy_name}")
            print("-" * 80)
            print(f"  Assigned Planes:   {len(result.assignment)}")
            print(f"  Accepted Bids:     {len(result.accepted_bids)}")
            print(f"  Stale Bids:        {result.stale_bids}")
            print(f"  Unassigned Tasks:  {len(result.unassigned_tasks)}")
            print(f"  Total Cost:        {result.total_cost:.2f}")
            print(f"  Route Length:      {self.route_length(result):.2f}")
            print(f"  Computation Time:  {result.computation_time:.6f}s")

        print("\n" + "=" * 80)
        print("BEST PERFORMERS")
        print("=" * 80)

        comparison = self.compare_strategies()
        print(f"  Lowest Cost:       {comparison['best_cost']}")
        print(f"  Shortest Routes:   {comparison['best_route_length']}")
        print(f"  Most Assigned:     {comparison['most_assigned']}")
        print(f"  Fastest:           {comparison['fastest']}")
        print("=" * 80)

    def export_to_json(self, filepath: str):
        """
        Export results to JSON file.

        Args:
            filepath: Path to output JSON file
        """
        data = {
            "comparison": self.compare_strategies(),
            "statistics": self.get_statistics(),
            "results": [
                dict(result.get_summary(), routes=result.route_ids())
                for result in self.results
            ]
        }

        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2)

    def visualize(self, save_path: Optional[str] = None):
        """
        Plot the routes of every stored result.

        Args:
            save_path: Path to save the figure (if None, displays interactively)
        """
        if not self.results:
            print("No results to visualize.")
            return

        import matplotlib.pyplot as plt

        num_results = len(self.results)
        fig, axes = plt.subplots(1, num_results, figsize=(6 * num_results, 6), squeeze=False)

        for ax, result in zip(axes[0], self.results):
            for plane, route in result.routes.items():
                ax.scatter([plane.location.x], [plane.location.y], c='blue', marker='^', s=100, alpha=0.7)
                if route:
                    xs = [plane.location.x] + [t.location.x for t in route]
                    ys = [plane.location.y] + [t.location.y for t in route]
                    ax.plot(xs, ys, 'g--', alpha=0.5)
                    ax.scatter(xs[1:], ys[1:], c='red', marker='o', s=60, alpha=0.7)

            if result.unassigned_tasks:
                ax.scatter(
                    [t.location.x for t in result.unassigned_tasks],
                    [t.location.y for t in result.unassigned_tasks],
                    c='gray', marker='x', s=80, label='Unassigned', alpha=0.7
                )
                ax.legend()

            ax.set_title(f"{result.strategy_name}\nCost: {result.total_cost:.2f}")
            ax.set_xlabel("X coordinate")
            ax.set_ylabel("Y coordinate")
            ax.grid(True, alpha=0.3)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            plt.close(fig)
            logger.info("Visualization saved to %s", save_path)
        else:
            plt.show()
