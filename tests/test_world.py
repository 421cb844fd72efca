"""
Tests for the simulation world.
"""

import unittest
from plane_allocation.models import Location, Task
from plane_allocation.problem import ProblemDefinition, PlaneDefinition, TaskDefinition, StationDefinition
from plane_allocation.strategies import SSIAllocation
from plane_allocation.visibility import RangeVisibility
from plane_allocation.world import World


def single_plane_problem(*tasks, speed=1.0):
    problem = ProblemDefinition()
    problem.add_plane(PlaneDefinition(0, 0, speed=speed))
    for x, y, t in tasks:
        problem.add_task(TaskDefinition(x, y, time=t))
    return problem


class TestWorld(unittest.TestCase):
    """Test World class."""

    def test_init_builds_planes_and_stations(self):
        problem = ProblemDefinition.generate_random_problem(num_planes=3, num_tasks=4, num_stations=2, seed=5)
        world = World(SSIAllocation())
        world.init(problem)
        self.assertEqual([p.plane_id for p in world.planes], [0, 1, 2])
        self.assertEqual(len(world.stations), 2)
        self.assertEqual(world.tasks, [])

    def test_plane_travels_and_completes_task(self):
        """Test that a plane reaches its task and the task is removed."""
        world = World(SSIAllocation())
        world.init(single_plane_problem((3, 0, 0)))

        result = world.step()
        self.assertEqual(len(result.accepted_bids), 1)
        self.assertEqual(world.planes[0].location, Location(1, 0))

        world.step()
        world.step()
        self.assertEqual(world.tasks, [])
        self.assertEqual(len(world.completed), 1)
        self.assertEqual(world.completed[0][1], 2)
        self.assertEqual(world.assignment, {})
        self.assertTrue(world.finished)

    def test_run_until_all_tasks_completed(self):
        """Test that run stops once every task is done."""
        world = World(SSIAllocation())
        world.init(single_plane_problem((2, 0, 0), (4, 0, 0), speed=2.0))

        stats = world.run()

        self.assertEqual(stats["completed_tasks"], 2)
        self.assertEqual(stats["pending_tasks"], 0)
        self.assertEqual(stats["time"], 2)

    def test_tasks_submitted_at_their_time(self):
        """Test that tasks only become allocatable once submitted."""
        world = World(SSIAllocation())
        world.init(single_plane_problem((5, 0, 5)))

        stats = world.run(ticks=3)
        self.assertEqual(stats["scheduled_tasks"], 1)
        self.assertEqual(world.assignment, {})

        world.run(ticks=3)
        self.assertEqual(len(world.tasks), 1)
        self.assertIn(world.planes[0], world.assignment)

    def test_range_visibility_limits_allocation(self):
        """Test that out-of-range tasks are never allocated."""
        problem = ProblemDefinition()
        problem.add_plane(PlaneDefinition(0, 0, communication_range=10))
        problem.add_task(TaskDefinition(100, 0))
        world = World(SSIAllocation(), RangeVisibility())
        world.init(problem)

        result = world.step()
        self.assertEqual(result.assignment, {})
        self.assertEqual(len(result.unassigned_tasks), 1)

    def test_persistent_routes_across_ticks(self):
        """Test that persistent routes survive between allocation passes."""
        world = World(SSIAllocation(persistent_routes=True))
        world.init(single_plane_problem((10, 0, 0), (20, 0, 0)))

        first = world.step()
        second = world.step()
        self.assertEqual(len(first.accepted_bids), 2)
        self.assertEqual(second.accepted_bids, [])
        self.assertEqual([t.task_id for t in world.planes[0].route], [0, 1])

    def test_add_and_remove_task(self):
        world = World(SSIAllocation())
        task = Task(task_id=7, location=Location(1, 1))
        world.add_task(task)
        self.assertEqual(world.tasks, [task])
        world.remove_task(task)
        world.remove_task(task)
        self.assertEqual(world.tasks, [])

    def test_get_nearest_station(self):
        """Test finding the closest recharging station."""
        problem = ProblemDefinition(stations=[StationDefinition(0, 0), StationDefinition(10, 10)])
        world = World(SSIAllocation())
        self.assertIsNone(world.get_nearest_station(Location(0, 0)))

        world.init(problem)
        station = world.get_nearest_station(Location(8, 9))
        self.assertEqual(station.station_id, 1)


if __name__ == '__main__':
    unittest.main()
