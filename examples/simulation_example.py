"""
Example simulating a stream of tasks over time with range-limited visibility.
"""

import logging
from plane_allocation import (
    ProblemDefinition,
    PlaneDefinition,
    TaskDefinition,
    StationDefinition,
    SSIAllocation,
    RangeVisibility,
    World,
)
from plane_allocation.config import configure_logging


def main():
    configure_logging("INFO")
    logging.getLogger("plane_allocation.strategies").setLevel(logging.WARNING)

    problem = ProblemDefinition(width=200, height=200, duration=2000)
    for x, y in [(0, 0), (200, 0), (0, 200), (200, 200)]:
        problem.add_plane(PlaneDefinition(x, y, speed=2.0, communication_range=120.0))
    problem.add_station(StationDefinition(100, 100))

    tasks_data = [
        (10, 10, 0), (190, 15, 0), (20, 180, 30),
        (180, 190, 30), (100, 100, 60), (60, 140, 90),
        (150, 40, 120), (40, 60, 150),
    ]
    for x, y, t in tasks_data:
        problem.add_task(TaskDefinition(x, y, time=t))

    for persistent in (False, True):
        world = World(SSIAllocation(persistent_routes=persistent), RangeVisibility())
        world.init(problem)
        stats = world.run()
        print(f"{world.strategy.get_name()}: {stats}")


if __name__ == "__main__":
    main()
