"""
Basic example of running one SSI auction pass.
"""

from plane_allocation import (
    ProblemDefinition,
    SSIAllocation,
    World,
)


def main():
    print("=" * 80)
    print("Plane Task Allocation - Basic Example")
    print("=" * 80)

    print("\nGenerating random problem...")
    problem = ProblemDefinition.generate_random_problem(
        num_planes=5,
        num_tasks=20,
        seed=42
    )
    print(f"Created {problem}")

    world = World(SSIAllocation())
    world.init(problem)
    result = world.allocate()

    print("\n" + "-" * 80)
    print(f"Strategy: {result.strategy_name}")
    print(f"Accepted Bids: {len(result.accepted_bids)}")
    print(f"Stale Bids: {result.stale_bids}")
    print(f"Total Cost: {result.total_cost:.2f}")
    print(f"Computation Time: {result.computation_time:.6f}s")
    for plane_id, route in result.route_ids().items():
        print(f"  Plane {plane_id}: {route}")

    print("\n" + "=" * 80)
    print("Example completed!")
    print("=" * 80)


if __name__ == "__main__":
    main()
