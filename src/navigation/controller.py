"""
NavigationController - drives the agent through its objectives.

Per objective the controller runs a small state machine:
1. PLANNING: Dijkstra from the current cell to the objective
2. WALKING: step along the route, revealing obstacles after every move
3. INVALIDATED: a discovered obstacle blocks the rest of the route,
   go back to PLANNING from where the agent stands
4. OBJECTIVE_REACHED: report the objective (1-based)
5. DECIDING: if alternatives are offered, pick one by look-ahead and
   unlock its obstacle type on the live grid

An unreachable objective is terminal (BLOCKED) and ends the whole run.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence
import logging

from .base import NavigationPhase, NavigationState, Objective, SimulationContext
from .events import Event, EventLog, EventSink, EventType
from .grid_map import Coord, FIRST_OBSTACLE_TYPE, GridMap
from .option_evaluator import OptionDecision, OptionEvaluator
from .pathfinding import DijkstraPathfinder
from .visibility import VisibilityConfig, VisibilityOutcome, VisibilityTracker

logger = logging.getLogger(__name__)


@dataclass
class NavigationConfig:
    """Configuration for the navigation controller."""
    enable_logging: bool = True  # Keep every emitted event in the controller history
    reveal_at_start: bool = True  # Scan around the start before the first plan
    max_replans_per_objective: Optional[int] = None  # None = replan until no route is left


class NavigationController:
    """
    Runs one deterministic navigation pass over a grid.

    The controller owns the live grid for the duration of the run. Events
    are pushed to the sink as they happen.

    Usage:
        log = EventLog()
        controller = NavigationController(
            grid, start=(0, 0), objectives=[Objective(2, 2)],
            visibility_config=VisibilityConfig(radius=1), sink=log,
        )
        success = controller.run()
        print("\\n".join(log.to_lines()))
    """

    def __init__(
        self,
        grid: GridMap,
        start: Coord,
        objectives: Sequence[Objective],
        visibility_config: Optional[VisibilityConfig] = None,
        config: Optional[NavigationConfig] = None,
        sink: Optional[EventSink] = None,
        pathfinder: Optional[DijkstraPathfinder] = None,
    ):
        self.config = config or NavigationConfig()

        # Out-of-bounds coordinates and non-obstacle unlocks are caller errors
        grid.index(*start)
        for objective in objectives:
            grid.index(*objective.coord)
            for option in objective.alternatives:
                if option < FIRST_OBSTACLE_TYPE:
                    raise ValueError(
                        f"Objective {objective.coord} offers alternative {option}, "
                        f"only obstacle types (>= {FIRST_OBSTACLE_TYPE}) can be unlocked"
                    )

        self._objectives: List[Objective] = list(objectives)
        self._pathfinder = pathfinder or DijkstraPathfinder()
        self._tracker = VisibilityTracker(visibility_config)
        self._evaluator = OptionEvaluator(self._pathfinder)
        self._sink = sink

        self._context = SimulationContext(grid=grid, origin=start, position=start)
        self._phase = NavigationPhase.IDLE
        self._objective_index: Optional[int] = None
        self._objectives_reached = 0
        self._decisions: List[OptionDecision] = []
        self._history: List[Event] = []

    @property
    def grid(self) -> GridMap:
        return self._context.grid

    @property
    def position(self) -> Coord:
        return self._context.position

    @property
    def phase(self) -> NavigationPhase:
        return self._phase

    @property
    def objectives(self) -> List[Objective]:
        return list(self._objectives)

    @property
    def objectives_reached(self) -> int:
        return self._objectives_reached

    @property
    def decisions(self) -> List[OptionDecision]:
        """Option decisions taken so far (for debugging)."""
        return list(self._decisions)

    @property
    def history(self) -> List[Event]:
        return list(self._history)

    def run(self) -> bool:
        """
        Process every objective in order.

        Returns:
            True if all objectives were reached, False if the run stopped
            at an unreachable objective
        """
        if self._phase != NavigationPhase.IDLE:
            raise RuntimeError("NavigationController.run() can only be called once")

        ctx = self._context
        logger.info(
            "Starting run at %s with %d objective(s), visibility radius %d",
            ctx.origin, len(self._objectives), self._tracker.radius,
        )

        if self.config.reveal_at_start:
            self._tracker.reveal(ctx.grid, ctx.origin)

        for index in range(len(self._objectives)):
            if not self._process_objective(index):
                logger.info("Run stopped at objective %d", index + 1)
                return False

        self._phase = NavigationPhase.COMPLETE
        self._emit(EventType.RUN_COMPLETED, {"objectives_reached": self._objectives_reached})
        logger.info("Run completed after %d step(s), %d replan(s)", ctx.steps, ctx.replans)
        return True

    def _process_objective(self, index: int) -> bool:
        """Plan, walk and replan until the objective is reached or proven unreachable."""
        ctx = self._context
        objective = self._objectives[index]
        self._objective_index = index
        replans = 0

        while True:
            self._phase = NavigationPhase.PLANNING

            path = self._pathfinder.find_path(ctx.grid, ctx.position, objective.coord)
            if not path:
                self._fail(index, "unreachable")
                return False

            logger.debug("Objective %d: planned %d cell(s) from %s", index + 1, len(path), ctx.position)
            ctx.path = path
            ctx.path_index = 0

            outcome = self._walk()
            if not outcome.invalidated:
                break

            replans += 1
            ctx.replans += 1
            limit = self.config.max_replans_per_objective
            if limit is not None and replans > limit:
                self._fail(index, "replan_limit")
                return False

        self._phase = NavigationPhase.OBJECTIVE_REACHED
        self._objectives_reached += 1
        self._emit(EventType.OBJECTIVE_REACHED, {
            "objective": index + 1,
            "x": objective.x,
            "y": objective.y,
        })

        if objective.has_alternatives:
            self._decide(index)

        return True

    def _walk(self) -> VisibilityOutcome:
        """Follow the planned path, stopping early if the route gets invalidated."""
        ctx = self._context
        self._phase = NavigationPhase.WALKING

        for i in range(1, len(ctx.path)):
            step = ctx.path[i]
            ctx.position = step
            ctx.path_index = i
            ctx.steps += 1
            self._emit(EventType.MOVED, {"x": step[0], "y": step[1]})

            outcome = self._tracker.check(ctx.grid, step, ctx.remaining_path, ctx.origin)
            if not outcome.invalidated:
                continue

            # Blocking discovered while standing on the origin is not reported
            if outcome == VisibilityOutcome.INVALIDATED_ELSEWHERE:
                self._emit(EventType.PATH_IMPASSABLE, {"x": step[0], "y": step[1]})

            logger.debug("Route invalidated at %s (%s), replanning", step, outcome.name)
            self._phase = NavigationPhase.INVALIDATED
            return outcome

        return VisibilityOutcome.NO_CHANGE

    def _decide(self, index: int) -> Optional[OptionDecision]:
        """Evaluate the objective's alternatives and commit the winner to the live grid."""
        ctx = self._context
        objective = self._objectives[index]
        self._phase = NavigationPhase.DECIDING

        if index + 1 >= len(self._objectives):
            self._emit(EventType.NO_OPTION_CHOSEN, {
                "objective": index + 1,
                "reason": "no_next_objective",
            })
            return None

        next_objective = self._objectives[index + 1]
        decision = self._evaluator.evaluate(
            ctx.grid, ctx.position, objective.alternatives, next_objective.coord
        )
        self._decisions.append(decision)

        if not decision.has_choice:
            logger.warning(
                "Objective %d: no alternative in %s reaches objective %d",
                index + 1, list(objective.alternatives), index + 2,
            )
            self._emit(EventType.NO_OPTION_CHOSEN, {
                "objective": index + 1,
                "reason": "all_unreachable",
            })
            return decision

        converted = ctx.grid.convert_type_to_passable(decision.chosen)
        logger.info(
            "Objective %d: chose option %d (cost %.2f), unlocked %d cell(s)",
            index + 1, decision.chosen, decision.cost, converted,
        )
        self._emit(EventType.OPTION_CHOSEN, {
            "objective": index + 1,
            "option": decision.chosen,
            "cost": decision.cost,
        })
        return decision

    def _fail(self, index: int, reason: str) -> None:
        objective = self._objectives[index]
        self._phase = NavigationPhase.BLOCKED
        logger.warning("Objective %d at %s cannot be reached (%s)", index + 1, objective.coord, reason)
        self._emit(EventType.OBJECTIVE_UNREACHABLE, {
            "objective": index + 1,
            "x": objective.x,
            "y": objective.y,
            "reason": reason,
        })

    def _emit(self, event_type: EventType, data: Dict[str, Any]) -> None:
        event = Event(event_type=event_type, step=self._context.steps, data=data)
        if self.config.enable_logging:
            self._history.append(event)
        if self._sink is not None:
            self._sink(event)

    def get_state(self) -> NavigationState:
        """Get current navigation state."""
        ctx = self._context
        return NavigationState(
            phase=self._phase,
            position=ctx.position,
            objective_index=self._objective_index,
            objectives_reached=self._objectives_reached,
            total_objectives=len(self._objectives),
            steps=ctx.steps,
            replans=ctx.replans,
            remaining_path=ctx.remaining_path,
        )


def run_navigation(
    grid: GridMap,
    start: Coord,
    objectives: Sequence[Objective],
    radius: int = 0,
) -> EventLog:
    """Convenience function: run a whole simulation and return its event log."""
    log = EventLog()
    controller = NavigationController(
        grid,
        start,
        objectives,
        visibility_config=VisibilityConfig(radius=radius),
        sink=log,
    )
    controller.run()
    return log
