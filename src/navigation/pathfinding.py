"""
Dijkstra shortest-path search over the grid map.

Only currently passable cells are relaxed, and edges are weighted by the
direction-specific cost stored on the cell being left. An unreachable
target is a normal outcome reported as an empty path.
"""
from dataclasses import dataclass, field
from typing import List, Optional
import numpy as np

from .grid_map import Coord, GridMap
from .priority_queue import KeyedMinHeap


@dataclass
class PathfindingConfig:
    """Configuration for Dijkstra pathfinding."""
    max_expansions: Optional[int] = None  # Safety limit on settled cells (None = no limit)


@dataclass
class PathResult:
    """Outcome of a single search."""
    path: List[Coord] = field(default_factory=list)
    cost: float = float("inf")
    expansions: int = 0

    @property
    def found(self) -> bool:
        return len(self.path) > 0


class DijkstraPathfinder:
    """
    Single-source Dijkstra restricted to passable cells.

    Distances and predecessors live in flat arrays indexed like the grid,
    so no cell holds a reference to another.
    """

    def __init__(self, config: Optional[PathfindingConfig] = None):
        self.config = config or PathfindingConfig()

    def search(self, grid: GridMap, start: Coord, target: Coord) -> PathResult:
        """
        Find the cheapest route from start to target.

        Args:
            grid: Grid map with the current passability state
            start: Starting cell (x, y); its own passability is not checked
            target: Target cell (x, y)

        Returns:
            PathResult whose path starts at start and ends at target,
            or an empty path if the target cannot be reached
        """
        source = grid.index(*start)
        goal = grid.index(*target)

        distances = np.full(grid.size, np.inf)
        previous = np.full(grid.size, -1, dtype=np.int64)
        settled = np.zeros(grid.size, dtype=bool)

        distances[source] = 0.0
        heap = KeyedMinHeap(key=lambda i: distances[i])
        heap.insert(source)
        expansions = 0
        limit = self.config.max_expansions

        while not heap.is_empty():
            current = heap.extract_min()
            if settled[current]:
                continue
            settled[current] = True
            expansions += 1

            if current == goal:
                return PathResult(
                    path=self._reconstruct_path(grid, previous, goal),
                    cost=float(distances[goal]),
                    expansions=expansions,
                )

            if limit is not None and expansions >= limit:
                break

            cx, cy = grid.coord(current)
            for (nx, ny), cost in grid.neighbors(cx, cy):
                neighbor = grid.index(nx, ny)
                if settled[neighbor] or not grid.passable[neighbor]:
                    continue

                new_distance = distances[current] + cost
                if new_distance < distances[neighbor]:
                    distances[neighbor] = new_distance
                    previous[neighbor] = current
                    heap.insert(neighbor)

        return PathResult(expansions=expansions)

    def find_path(self, grid: GridMap, start: Coord, target: Coord) -> List[Coord]:
        """Convenience wrapper returning only the path (empty if unreachable)."""
        return self.search(grid, start, target).path

    def _reconstruct_path(
        self,
        grid: GridMap,
        previous: np.ndarray,
        goal: int,
    ) -> List[Coord]:
        """Walk predecessor links back from goal to the start and reverse."""
        path = []
        current = goal
        while current != -1:
            path.append(grid.coord(int(current)))
            current = previous[current]
        path.reverse()
        return path
