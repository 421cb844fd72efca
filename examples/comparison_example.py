"""
Example comparing the SSI auction with the baseline strategies.
"""

from plane_allocation import (
    ProblemDefinition,
    SSIAllocation,
    NearestAllocation,
    MILPAllocation,
    RangeVisibility,
    AllocationAnalyzer,
    World,
)


def main():
    print("=" * 80)
    print("Plane Task Allocation - Strategy Comparison")
    print("=" * 80)

    problem = ProblemDefinition.generate_random_problem(
        num_planes=8,
        num_tasks=30,
        communication_range=300.0,
        seed=42
    )
    print(f"\nCreated {problem}")

    analyzer = AllocationAnalyzer()
    strategies = [
        SSIAllocation(),
        NearestAllocation(),
        MILPAllocation(time_limit=10.0),
    ]

    print("\nAllocating with different strategies...")
    for strategy in strategies:
        world = World(strategy, RangeVisibility())
        world.init(problem)
        analyzer.add_result(world.allocate())
        print(f"  - {strategy.get_name()}")

    print("\n")
    analyzer.print_comparison()

    stats = analyzer.get_statistics()
    print(f"\nCost: min {stats['cost']['min']:.2f}, max {stats['cost']['max']:.2f}")

    analyzer.export_to_json("comparison_results.json")
    print("Results exported to comparison_results.json")

    analyzer.visualize(save_path="comparison_routes.png")


if __name__ == "__main__":
    main()
