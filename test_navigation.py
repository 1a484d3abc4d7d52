"""
Test script for the NavigationController state machine.

Tests the full flow: plan -> walk -> reveal -> replan -> objective -> decision

Usage:
    python test_navigation.py
"""
import pytest

from src.navigation import (
    EventLog,
    EventType,
    GridMap,
    NavigationConfig,
    NavigationController,
    NavigationPhase,
    Objective,
    VisibilityConfig,
    run_navigation,
)


def make_controller(grid, start, objectives, radius=0, **config):
    log = EventLog()
    controller = NavigationController(
        grid,
        start,
        objectives,
        visibility_config=VisibilityConfig(radius=radius),
        config=NavigationConfig(**config),
        sink=log,
    )
    return controller, log


def moved_cells(log: EventLog):
    return [(e.data["x"], e.data["y"]) for e in log.of_type(EventType.MOVED)]


def test_open_grid_single_objective():
    """3x3 uniform grid, (0,0) -> (2,2): four moves, cost 4, no invalidation."""
    grid = GridMap.uniform(3, 3)
    controller, log = make_controller(grid, (0, 0), [Objective(2, 2)])

    assert controller.run()

    walked = [(0, 0)] + moved_cells(log)
    assert len(walked) == 5
    assert walked[-1] == (2, 2)
    assert grid.path_cost(walked) == 4.0
    assert len(log.of_type(EventType.OBJECTIVE_REACHED)) == 1
    assert log.of_type(EventType.PATH_IMPASSABLE) == []
    assert log.to_lines()[-1] == "Objective 1 reached!"

    state = controller.get_state()
    assert state.phase == NavigationPhase.COMPLETE
    assert state.is_complete
    assert state.position == (2, 2)
    assert state.steps == 4
    assert state.replans == 0


def test_obstacle_visible_from_start_is_avoided_silently():
    grid = GridMap.uniform(3, 3, types={(1, 1): 2})
    controller, log = make_controller(grid, (0, 0), [Objective(2, 2)], radius=2)

    assert controller.run()

    walked = [(0, 0)] + moved_cells(log)
    assert (1, 1) not in walked
    assert grid.path_cost(walked) == 4.0
    assert not grid.is_passable(1, 1)
    assert log.of_type(EventType.PATH_IMPASSABLE) == []
    assert log.to_lines()[-1] == "Objective 1 reached!"


def test_radius_zero_discovers_on_arrival():
    grid = GridMap.uniform(3, 3, types={(1, 1): 2})
    controller, log = make_controller(grid, (0, 0), [Objective(2, 2)], radius=0)

    assert controller.run()
    assert controller.position == (2, 2)
    for event in log.of_type(EventType.PATH_IMPASSABLE):
        assert (event.data["x"], event.data["y"]) == (1, 1)


def test_blocked_route_is_reported_and_replanned():
    # Cheap route along y=0 runs through a hidden obstacle at (3,0)
    grid = GridMap.uniform(5, 2, types={(3, 0): 2})
    controller, log = make_controller(grid, (0, 0), [Objective(4, 0)], radius=1)

    assert controller.run()
    assert log.to_lines() == [
        "Moving to 1-0",
        "Moving to 2-0",
        "Path is impassable!",
        "Moving to 2-1",
        "Moving to 3-1",
        "Moving to 4-1",
        "Moving to 4-0",
        "Objective 1 reached!",
    ]
    assert controller.get_state().replans == 1


def test_invalidation_on_origin_is_silent():
    """
    Returning to the starting cell and discovering the route is blocked
    there triggers a replan without a "Path is impassable!" line.
    """
    grid = GridMap.uniform(3, 1, types={(1, 0): 2})
    controller, log = make_controller(
        grid, (1, 0), [Objective(0, 0), Objective(2, 0)],
        radius=0, reveal_at_start=False,
    )

    assert controller.run()
    assert log.to_lines() == [
        "Moving to 0-0",
        "Objective 1 reached!",
        "Moving to 1-0",
        "Moving to 2-0",
        "Objective 2 reached!",
    ]
    assert controller.get_state().replans == 1


def test_same_discovery_away_from_origin_is_reported():
    grid = GridMap.uniform(4, 1, types={(2, 0): 2})
    controller, log = make_controller(grid, (0, 0), [Objective(3, 0)], radius=0)

    assert controller.run()
    assert log.to_lines() == [
        "Moving to 1-0",
        "Moving to 2-0",
        "Path is impassable!",
        "Moving to 3-0",
        "Objective 1 reached!",
    ]


def test_unreachable_objective_stops_the_run():
    grid = GridMap.uniform(3, 1, types={(1, 0): 1})
    controller, log = make_controller(grid, (0, 0), [Objective(2, 0), Objective(0, 0)])

    assert not controller.run()

    events = log.events
    assert len(events) == 1
    assert events[0].event_type == EventType.OBJECTIVE_UNREACHABLE
    assert events[0].data["objective"] == 1
    assert events[0].data["reason"] == "unreachable"
    assert controller.phase == NavigationPhase.BLOCKED
    assert controller.objectives_reached == 0


def test_later_objective_unreachable_keeps_earlier_progress():
    grid = GridMap.uniform(4, 1, types={(2, 0): 1})
    controller, log = make_controller(grid, (0, 0), [Objective(1, 0), Objective(3, 0), Objective(0, 0)])

    assert not controller.run()
    assert log.to_lines() == [
        "Moving to 1-0",
        "Objective 1 reached!",
        "Objective 2 cannot be reached!",
    ]
    assert controller.objectives_reached == 1
    assert log.of_type(EventType.RUN_COMPLETED) == []


def test_decision_unlocks_chosen_type():
    """Only unlocking type 3 reaches the next objective, though it is listed second."""
    grid = GridMap.uniform(4, 1, types={(2, 0): 3})
    controller, log = make_controller(
        grid, (0, 0), [Objective(1, 0, alternatives=(2, 3)), Objective(3, 0)], radius=1,
    )

    assert controller.run()
    assert log.to_lines() == [
        "Moving to 1-0",
        "Objective 1 reached!",
        "Number 3 is chosen!",
        "Moving to 2-0",
        "Moving to 3-0",
        "Objective 2 reached!",
    ]
    assert grid.cell_type(2, 0) == 0
    assert controller.decisions[0].costs == {2: None, 3: 2.0}


def test_no_viable_option_leaves_grid_unchanged():
    grid = GridMap.uniform(4, 1, types={(2, 0): 3, (0, 0): 4})
    controller, log = make_controller(
        grid, (0, 0), [Objective(1, 0, alternatives=(2, 4)), Objective(3, 0)], radius=1,
    )

    assert not controller.run()
    assert log.to_lines() == [
        "Moving to 1-0",
        "Objective 1 reached!",
        "No option is chosen!",
        "Objective 2 cannot be reached!",
    ]
    no_choice = log.of_type(EventType.NO_OPTION_CHOSEN)[0]
    assert no_choice.data["reason"] == "all_unreachable"
    assert grid.cell_type(0, 0) == 4
    assert grid.cell_type(2, 0) == 3


def test_alternatives_at_final_objective_are_skipped():
    grid = GridMap.uniform(3, 1, types={(2, 0): 2})
    controller, log = make_controller(grid, (0, 0), [Objective(1, 0, alternatives=(2,))])

    assert controller.run()
    no_choice = log.of_type(EventType.NO_OPTION_CHOSEN)
    assert len(no_choice) == 1
    assert no_choice[0].data["reason"] == "no_next_objective"
    assert grid.cell_type(2, 0) == 2
    assert log.events[-1].event_type == EventType.RUN_COMPLETED


def test_replan_limit_fails_objective():
    grid = GridMap.uniform(5, 2, types={(3, 0): 2})
    controller, log = make_controller(
        grid, (0, 0), [Objective(4, 0)], radius=1, max_replans_per_objective=0,
    )

    assert not controller.run()
    assert log.to_lines()[-2:] == ["Path is impassable!", "Objective 1 cannot be reached!"]
    assert log.of_type(EventType.OBJECTIVE_UNREACHABLE)[0].data["reason"] == "replan_limit"


def test_objective_at_current_position():
    grid = GridMap.uniform(2, 2)
    controller, log = make_controller(grid, (1, 1), [Objective(1, 1)])

    assert controller.run()
    assert log.to_lines() == ["Objective 1 reached!"]


def test_history_and_single_run():
    grid = GridMap.uniform(2, 1)
    controller, log = make_controller(grid, (0, 0), [Objective(1, 0)])
    controller.run()

    assert [e.to_dict() for e in controller.history] == log.get_history()
    with pytest.raises(RuntimeError):
        controller.run()

    quiet, quiet_log = make_controller(GridMap.uniform(2, 1), (0, 0), [Objective(1, 0)], enable_logging=False)
    quiet.run()
    assert quiet.history == []
    assert len(quiet_log) == 3


def test_out_of_bounds_objective_is_rejected():
    with pytest.raises(IndexError):
        NavigationController(GridMap.uniform(2, 2), (0, 0), [Objective(5, 5)])


def test_non_obstacle_alternative_is_rejected_before_run():
    grid = GridMap.uniform(3, 1)
    log = EventLog()
    objectives = [Objective(1, 0, alternatives=(1,)), Objective(2, 0)]

    with pytest.raises(ValueError):
        NavigationController(grid, (0, 0), objectives, sink=log)
    assert len(log) == 0
    assert grid.cell_type(1, 0) == 0



def test_run_navigation_helper():
    log = run_navigation(GridMap.uniform(3, 1), (0, 0), [Objective(2, 0)])
    assert log.to_lines() == ["Moving to 1-0", "Moving to 2-0", "Objective 1 reached!"]


def main():
    print("=" * 60)
    print("Testing NavigationController")
    print("=" * 60)
    test_open_grid_single_objective()
    test_obstacle_visible_from_start_is_avoided_silently()
    test_radius_zero_discovers_on_arrival()
    test_blocked_route_is_reported_and_replanned()
    test_invalidation_on_origin_is_silent()
    test_same_discovery_away_from_origin_is_reported()
    test_unreachable_objective_stops_the_run()
    test_later_objective_unreachable_keeps_earlier_progress()
    test_decision_unlocks_chosen_type()
    test_no_viable_option_leaves_grid_unchanged()
    test_alternatives_at_final_objective_are_skipped()
    test_replan_limit_fails_objective()
    test_objective_at_current_position()
    test_history_and_single_run()
    test_out_of_bounds_objective_is_rejected()
    test_non_obstacle_alternative_is_rejected_before_run()
    test_run_navigation_helper()

    grid = GridMap.uniform(5, 2, types={(3, 0): 2})
    log = run_navigation(grid, (0, 0), [Objective(4, 0)], radius=1)
    print()
    for line in log.to_lines():
        print(f"  {line}")
    print(grid.to_ascii())
    print("\nNavigation tests passed!")


if __name__ == "__main__":
    main()
