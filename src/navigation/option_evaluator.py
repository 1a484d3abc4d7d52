"""
Look-ahead choice between unlock alternatives.

Each alternative is simulated on a private clone of the live grid: its
obstacle type is converted to open ground and the cost of the route to the
next objective is measured. The live grid is never touched here.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence
import logging

from .grid_map import Coord, GridMap
from .pathfinding import DijkstraPathfinder

logger = logging.getLogger(__name__)


@dataclass
class OptionDecision:
    """Result of evaluating the alternatives at one objective."""
    chosen: Optional[int]
    cost: float = float("inf")
    # Route cost per alternative, None where the next objective was unreachable
    costs: Dict[int, Optional[float]] = field(default_factory=dict)

    @property
    def has_choice(self) -> bool:
        return self.chosen is not None


class OptionEvaluator:
    """
    Picks the alternative that makes the next objective cheapest to reach.

    Alternatives are evaluated in listed order and only a strictly cheaper
    cost replaces the current best, so the earliest one wins ties.
    """

    def __init__(self, pathfinder: Optional[DijkstraPathfinder] = None):
        self.pathfinder = pathfinder or DijkstraPathfinder()

    def evaluate(
        self,
        grid: GridMap,
        position: Coord,
        alternatives: Sequence[int],
        next_target: Coord,
    ) -> OptionDecision:
        """
        Simulate every alternative and select the cheapest.

        Args:
            grid: Live grid (only cloned, never mutated)
            position: Agent's current cell
            alternatives: Obstacle type ids in offered order
            next_target: Coordinates of the following objective

        Returns:
            OptionDecision; chosen is None if every alternative leaves the
            next objective unreachable
        """
        decision = OptionDecision(chosen=None)

        for option in alternatives:
            trial = grid.copy()
            trial.convert_type_to_passable(option)
            path = self.pathfinder.find_path(trial, position, next_target)

            if not path:
                decision.costs[option] = None
                logger.debug("Option %d: next objective %s unreachable", option, next_target)
                continue

            cost = trial.path_cost(path)
            decision.costs[option] = cost
            logger.debug("Option %d: route cost %.2f", option, cost)

            if cost < decision.cost:
                decision.chosen = option
                decision.cost = cost

        return decision
