"""
Grid navigation under fog-of-war.

This module provides the simulation core:
- GridMap: typed cells with directional edge costs
- DijkstraPathfinder: shortest routes over currently passable cells
- VisibilityTracker: reveals lurking obstacles around the agent
- OptionEvaluator: look-ahead choice between unlock alternatives
- NavigationController: the per-objective plan/walk/replan state machine

Example usage:
    from src.navigation import GridMap, NavigationController, Objective, EventLog
    from src.navigation import VisibilityConfig

    grid = GridMap.uniform(3, 3, cost=1.0, types={(1, 1): 2})
    log = EventLog()
    controller = NavigationController(
        grid,
        start=(0, 0),
        objectives=[Objective(2, 2)],
        visibility_config=VisibilityConfig(radius=1),
        sink=log,
    )
    success = controller.run()
    print("\\n".join(log.to_lines()))
"""

# Shared data structures
from .base import (
    Objective,
    NavigationPhase,
    NavigationState,
    SimulationContext,
)

# Grid model
from .grid_map import (
    GridMap,
    Cell,
    Coord,
    Direction,
    NO_EDGE,
)

# Priority queue and Dijkstra
from .priority_queue import KeyedMinHeap
from .pathfinding import (
    DijkstraPathfinder,
    PathfindingConfig,
    PathResult,
)

# Fog-of-war
from .visibility import (
    VisibilityTracker,
    VisibilityConfig,
    VisibilityOutcome,
)

# Decisions
from .option_evaluator import (
    OptionEvaluator,
    OptionDecision,
)

# Events
from .events import (
    Event,
    EventType,
    EventLog,
    EventSink,
)

# Controller
from .controller import (
    NavigationController,
    NavigationConfig,
    run_navigation,
)

__all__ = [
    # Base
    "Objective",
    "NavigationPhase",
    "NavigationState",
    "SimulationContext",
    # Grid
    "GridMap",
    "Cell",
    "Coord",
    "Direction",
    "NO_EDGE",
    # Pathfinding
    "KeyedMinHeap",
    "DijkstraPathfinder",
    "PathfindingConfig",
    "PathResult",
    # Visibility
    "VisibilityTracker",
    "VisibilityConfig",
    "VisibilityOutcome",
    # Decisions
    "OptionEvaluator",
    "OptionDecision",
    # Events
    "Event",
    "EventType",
    "EventLog",
    "EventSink",
    # Controller
    "NavigationController",
    "NavigationConfig",
    "run_navigation",
]
