"""
Demo script to show navigation with fog-of-war and unlock decisions.
Run from project root: python demo_navigation.py
"""
from src.navigation import EventType, GridMap, Objective
from src.runtime import SimulationRuntime
from src.world import Scenario


def build_scenario() -> Scenario:
    """
    7x5 grid with a terrain wall and two lurking obstacle types.

    Objective 1 offers unlocking type 2 or type 3; only type 3 opens the
    short way to objective 2.
    """
    width, height = 7, 5
    cells = []
    for x in range(width):
        for y in range(height):
            cell_type = 0
            if x == 3 and y in (0, 1, 2, 3):
                cell_type = 1      # wall with a gap at the top
            elif (x, y) == (3, 4):
                cell_type = 3      # gap guarded by type 3
            elif (x, y) in ((1, 2), (5, 1)):
                cell_type = 2
            cells.append((x, y, cell_type))

    edges = []
    for x in range(width):
        for y in range(height):
            if x + 1 < width:
                edges.append(((x, y), (x + 1, y), 1.0))
            if y + 1 < height:
                edges.append(((x, y), (x, y + 1), 1.0))

    return Scenario(
        width=width,
        height=height,
        cells=cells,
        edges=edges,
        radius=1,
        start=(0, 0),
        objectives=[
            Objective(2, 4, alternatives=(2, 3)),
            Objective(6, 0),
        ],
    )


def main():
    print("=== Grid Navigation Demo ===\n")

    scenario = build_scenario()
    grid = scenario.build_grid()
    print("Initial grid ('o' = hidden obstacle, '#' = terrain):")
    print(grid.to_ascii(position=scenario.start))
    print()

    def show(event):
        if event.event_type == EventType.PATH_IMPASSABLE:
            print(f"  [step {event.step}] route blocked at ({event.data['x']}, {event.data['y']})")

    runtime = SimulationRuntime(scenario)
    result = runtime.run(sink=show)

    print("\n=== Output Log ===")
    for line in result.lines:
        print(line)

    print("\n=== Summary ===")
    print(f"Success: {result.success}")
    print(f"Objectives reached: {result.objectives_reached}/{result.total_objectives}")
    print(f"Steps: {result.steps}, replans: {result.replans}")

    controller = runtime.last_controller
    for decision in controller.decisions:
        print(f"Option costs: {decision.costs} -> chose {decision.chosen}")

    print("\nFinal grid ('X' = discovered obstacle):")
    print(controller.grid.to_ascii(position=result.final_position))


if __name__ == "__main__":
    main()
