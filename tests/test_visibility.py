"""
Tests for visibility models.
"""

import unittest
from plane_allocation.models import Location, Plane, Task
from plane_allocation.visibility import OmniscientVisibility, RangeVisibility


class TestOmniscientVisibility(unittest.TestCase):
    """Test OmniscientVisibility."""

    def test_every_plane_sees_every_task(self):
        planes = [Plane(plane_id=i, location=Location(i, i)) for i in range(3)]
        tasks = [Task(task_id=i, location=Location(100 * i, 0)) for i in range(4)]

        visibility = OmniscientVisibility().compute(planes, tasks)

        self.assertEqual(len(visibility), 3)
        for plane in planes:
            self.assertEqual(visibility[plane], set(tasks))
        self.assertIsNot(visibility[planes[0]], visibility[planes[1]])


class TestRangeVisibility(unittest.TestCase):
    """Test RangeVisibility."""

    def test_fixed_range_is_inclusive(self):
        """Test that a task exactly at the range limit is visible."""
        plane = Plane(plane_id=0, location=Location(0, 0))
        edge = Task(task_id=0, location=Location(3, 4))
        outside = Task(task_id=1, location=Location(6, 0))

        visibility = RangeVisibility(5.0).compute([plane], [edge, outside])

        self.assertEqual(visibility[plane], {edge})

    def test_per_plane_range(self):
        """Test that each plane's own communication range is used."""
        short = Plane(plane_id=0, location=Location(0, 0), communication_range=1.0)
        wide = Plane(plane_id=1, location=Location(0, 0))
        task = Task(task_id=0, location=Location(50, 50))

        visibility = RangeVisibility().compute([short, wide], [task])

        self.assertEqual(visibility[short], set())
        self.assertEqual(visibility[wide], {task})

    def test_empty_inputs(self):
        """Test that missing tasks or planes produce empty visibility."""
        plane = Plane(plane_id=0, location=Location(0, 0))
        self.assertEqual(RangeVisibility(10).compute([plane], []), {plane: set()})
        self.assertEqual(RangeVisibility(10).compute([], [Task(task_id=0, location=Location(0, 0))]), {})


if __name__ == '__main__':
    unittest.main()
