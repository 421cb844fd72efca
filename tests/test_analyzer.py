"""
Tests for allocation analyzer.
"""

import json
import os
import tempfile
import unittest
from plane_allocation.analyzer import AllocationAnalyzer
from plane_allocation.models import AllocationResult, Location, Plane, Task
from plane_allocation.problem import ProblemDefinition
from plane_allocation.strategies import SSIAllocation, NearestAllocation
from plane_allocation.world import World


class TestAllocationAnalyzer(unittest.TestCase):
    """Test AllocationAnalyzer class."""

    def setUp(self):
        """Set up test fixtures."""
        self.analyzer = AllocationAnalyzer()
        self.problem = ProblemDefinition.generate_random_problem(num_planes=3, num_tasks=8, seed=42)

    def solve(self, strategy):
        world = World(strategy)
        world.init(self.problem)
        return world.allocate()

    def test_add_result(self):
        """Test adding results to analyzer."""
        self.analyzer.add_result(self.solve(SSIAllocation()))
        self.assertEqual(len(self.analyzer.results), 1)

    def test_compare_strategies(self):
        """Test comparing multiple strategies."""
        self.analyzer.add_result(self.solve(SSIAllocation()))
        self.analyzer.add_result(self.solve(NearestAllocation()))

        comparison = self.analyzer.compare_strategies()

        self.assertEqual(len(comparison["strategies"]), 2)
        self.assertIsNotNone(comparison["best_cost"])
        self.assertIn(comparison["most_assigned"], ("SSI Auction", "Nearest Task Allocation"))

    def test_get_statistics(self):
        """Test getting statistics."""
        self.analyzer.add_result(self.solve(SSIAllocation()))
        self.analyzer.add_result(self.solve(NearestAllocation()))

        stats = self.analyzer.get_statistics()

        self.assertEqual(stats["num_strategies"], 2)
        self.assertLessEqual(stats["cost"]["min"], stats["cost"]["max"])
        self.assertEqual(stats["assigned_planes"]["max"], 3)

    def test_empty_analyzer(self):
        """Test analyzer with no results."""
        self.assertEqual(self.analyzer.compare_strategies(), {})
        self.assertEqual(self.analyzer.get_statistics(), {})

    def test_clear_results(self):
        self.analyzer.add_result(self.solve(SSIAllocation()))
        self.analyzer.clear_results()
        self.assertEqual(len(self.analyzer.results), 0)

    def test_export_to_json(self):
        """Test exporting results to JSON."""
        self.analyzer.add_result(self.solve(SSIAllocation()))

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "results.json")
            self.analyzer.export_to_json(path)
            with open(path) as f:
                data = json.load(f)

        self.assertIn("comparison", data)
        self.assertIn("statistics", data)
        routed = sum(len(r) for r in data["results"][0]["routes"].values())
        self.assertEqual(routed, 8)

    def test_visualize_to_file(self):
        """Test saving a route plot."""
        import matplotlib
        matplotlib.use("Agg")

        self.analyzer.add_result(self.solve(SSIAllocation()))
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "routes.png")
            self.analyzer.visualize(save_path=path)
            self.assertTrue(os.path.exists(path))


class TestInvariantChecks(unittest.TestCase):
    """Test the structural checks on allocation results."""

    def test_valid_result_has_no_violations(self):
        problem = ProblemDefinition.generate_random_problem(num_planes=4, num_tasks=12, seed=9)
        world = World(SSIAllocation())
        world.init(problem)
        self.assertEqual(AllocationAnalyzer.check_invariants(world.allocate()), [])

    def test_double_allocation_detected(self):
        """Test that a task shared by two routes is reported."""
        a = Plane(plane_id=0, location=Location(0, 0))
        b = Plane(plane_id=1, location=Location(5, 5))
        t = Task(task_id=0, location=Location(1, 1))
        result = AllocationResult(
            assignment={a: t, b: t},
            reverse_assignment={t: a},
            accepted_bids=[],
            total_cost=0.0,
            unassigned_tasks=[],
            computation_time=0.0,
            strategy_name="Broken",
            routes={a: [t], b: [t]}
        )

        violations = AllocationAnalyzer.check_invariants(result)

        self.assertTrue(any("routes of planes 0 and 1" in v for v in violations))
        self.assertTrue(any("does not map back to plane 1" in v for v in violations))

    def test_unclaimed_visible_tasks(self):
        a = Plane(plane_id=0, location=Location(0, 0))
        t = Task(task_id=3, location=Location(1, 1))
        result = AllocationResult(
            assignment={},
            reverse_assignment={},
            accepted_bids=[],
            total_cost=0.0,
            unassigned_tasks=[t],
            computation_time=0.0,
            strategy_name="Idle",
            routes={a: []}
        )
        self.assertEqual(AllocationAnalyzer.unclaimed_visible_tasks(result, {a: {t}}), {0: [3]})
        self.assertEqual(AllocationAnalyzer.unclaimed_visible_tasks(result, {a: set()}), {})


if __name__ == '__main__':
    unittest.main()
