"""
Fog-of-war tracking.

Lurking obstacles (type >= 2) look passable until the agent comes within
the visibility radius. Discovery is one-way: a revealed obstacle stays
impassable unless its whole type is unlocked.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, List, Optional
import logging

from .grid_map import Coord, FIRST_OBSTACLE_TYPE, GridMap

logger = logging.getLogger(__name__)


class VisibilityOutcome(Enum):
    """Result of a reveal step as seen by the navigation controller."""
    NO_CHANGE = auto()               # Nothing new on the remaining route
    INVALIDATED_AT_START = auto()    # Route blocked while standing on the run's origin
    INVALIDATED_ELSEWHERE = auto()   # Route blocked anywhere else

    @property
    def invalidated(self) -> bool:
        return self is not VisibilityOutcome.NO_CHANGE


@dataclass
class VisibilityConfig:
    """Configuration for obstacle discovery."""
    radius: int = 1  # Euclidean reveal radius in cells (0 = current cell only)


class VisibilityTracker:
    """
    Reveals lurking obstacles around the agent.

    Usage:
        tracker = VisibilityTracker(VisibilityConfig(radius=2))
        outcome = tracker.check(grid, position, path[i:], origin)
        if outcome.invalidated:
            ...  # replan from position
    """

    def __init__(self, config: Optional[VisibilityConfig] = None):
        self.config = config or VisibilityConfig()
        if self.config.radius < 0:
            raise ValueError(f"Visibility radius must be non-negative, got {self.config.radius}")

    @property
    def radius(self) -> int:
        return self.config.radius

    def reveal(self, grid: GridMap, center: Coord) -> List[Coord]:
        """
        Mark every hidden obstacle within the radius as impassable.

        Scans the bounding square around center and keeps cells whose
        Euclidean distance is within the radius.

        Returns:
            Cells that became impassable in this call (empty if none)
        """
        r = self.radius
        cx, cy = center
        revealed = []

        for dx in range(-r, r + 1):
            for dy in range(-r, r + 1):
                x, y = cx + dx, cy + dy
                if not grid.in_bounds(x, y):
                    continue
                if dx * dx + dy * dy > r * r:
                    continue

                i = grid.index(x, y)
                if grid.types[i] >= FIRST_OBSTACLE_TYPE and grid.passable[i]:
                    grid.passable[i] = False
                    revealed.append((x, y))

        if revealed:
            logger.debug("Revealed %d obstacle(s) around %s: %s", len(revealed), center, revealed)
        return revealed

    def reveal_around(
        self,
        grid: GridMap,
        center: Coord,
        remaining_path: Iterable[Coord],
    ) -> bool:
        """Reveal around center; True if a newly blocked cell lies on remaining_path."""
        revealed = self.reveal(grid, center)
        if not revealed:
            return False
        remaining = set(remaining_path)
        return any(cell in remaining for cell in revealed)

    def check(
        self,
        grid: GridMap,
        center: Coord,
        remaining_path: Iterable[Coord],
        origin: Coord,
    ) -> VisibilityOutcome:
        """
        Reveal around center and classify the effect on the route.

        Args:
            grid: Live grid (mutated)
            center: Agent's current cell
            remaining_path: Route cells from the current cell up to the target
            origin: Starting cell of the whole run

        Returns:
            VisibilityOutcome for the controller's state machine
        """
        if not self.reveal_around(grid, center, remaining_path):
            return VisibilityOutcome.NO_CHANGE
        if center == origin:
            return VisibilityOutcome.INVALIDATED_AT_START
        return VisibilityOutcome.INVALIDATED_ELSEWHERE
