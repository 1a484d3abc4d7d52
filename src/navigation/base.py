"""
Shared data structures for grid navigation.

This module defines the objects passed between the navigation components:
- Objective: an ordered waypoint with optional unlock alternatives
- NavigationPhase: states of the per-objective state machine
- SimulationContext: mutable state of a single run
- NavigationState: read-only progress snapshot for monitoring/debugging
"""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple

from .grid_map import Coord, GridMap


@dataclass(frozen=True)
class Objective:
    """A waypoint the agent must reach, in sequence."""
    x: int
    y: int
    alternatives: Tuple[int, ...] = ()  # Obstacle types offered for unlocking

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)

    @property
    def has_alternatives(self) -> bool:
        return len(self.alternatives) > 0


class NavigationPhase(Enum):
    """States of the navigation controller."""
    IDLE = auto()
    PLANNING = auto()
    WALKING = auto()
    INVALIDATED = auto()
    OBJECTIVE_REACHED = auto()
    DECIDING = auto()
    BLOCKED = auto()     # Terminal: an objective could not be reached
    COMPLETE = auto()    # Terminal: every objective reached


@dataclass
class SimulationContext:
    """
    Mutable state of one simulation run.

    Created by the controller when a run starts and owned exclusively by it.
    """
    grid: GridMap
    origin: Coord                 # First cell of the whole run
    position: Coord               # Agent's current cell
    path: List[Coord] = field(default_factory=list)
    path_index: int = 0           # Index of position within path
    steps: int = 0                # Cells walked so far
    replans: int = 0              # Invalidation-triggered replans so far

    @property
    def remaining_path(self) -> List[Coord]:
        return self.path[self.path_index:]


@dataclass
class NavigationState:
    """Current state of navigation progress."""
    phase: NavigationPhase
    position: Coord
    objective_index: Optional[int]  # 0-based index of the active objective
    objectives_reached: int
    total_objectives: int
    steps: int
    replans: int
    remaining_path: List[Coord]

    @property
    def is_complete(self) -> bool:
        return self.phase == NavigationPhase.COMPLETE

    @property
    def is_blocked(self) -> bool:
        return self.phase == NavigationPhase.BLOCKED
