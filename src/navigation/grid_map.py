"""
Weighted grid map for navigation.

Each cell carries a terrain type, a passability flag and four directional
traversal costs. State is stored in flat numpy arrays with row-major
indexing (index = y * width + x), so cloning the map for what-if
simulations is a handful of array copies.

Cell types:
- 0: open ground, always passable
- 1: terrain, permanently impassable
- >=2: lurking obstacle, passable until revealed by the visibility tracker
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np

Coord = Tuple[int, int]  # (x, y)

# Cost of an edge that was never loaded. Anything at or above this is "no edge".
NO_EDGE = 100000001.0

OPEN_TYPE = 0
TERRAIN_TYPE = 1
FIRST_OBSTACLE_TYPE = 2


class Direction(IntEnum):
    RIGHT = 0
    LEFT = 1
    UP = 2
    DOWN = 3


# Coordinate deltas for each direction (x, y)
DIRECTION_DELTAS: Dict[Direction, Tuple[int, int]] = {
    Direction.RIGHT: (1, 0),
    Direction.LEFT: (-1, 0),
    Direction.UP: (0, 1),
    Direction.DOWN: (0, -1),
}

OPPOSITE: Dict[Direction, Direction] = {
    Direction.RIGHT: Direction.LEFT,
    Direction.LEFT: Direction.RIGHT,
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
}


def direction_between(a: Coord, b: Coord) -> Optional[Direction]:
    """Direction of the step a -> b, or None if the cells are not 4-adjacent."""
    delta = (b[0] - a[0], b[1] - a[1])
    for direction, d in DIRECTION_DELTAS.items():
        if d == delta:
            return direction
    return None


@dataclass(frozen=True)
class Cell:
    """Read-only snapshot of one grid cell."""
    x: int
    y: int
    cell_type: int
    passable: bool
    to_right: float
    to_left: float
    to_up: float
    to_down: float

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)

    @property
    def is_lurking_obstacle(self) -> bool:
        return self.cell_type >= FIRST_OBSTACLE_TYPE


class GridMap:
    """
    Grid of typed cells connected by symmetric, direction-specific edges.

    Cells start as open ground (type 0) with no edges. Loaders set types with
    set_cell_type() and connect neighbours with set_edge().
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

        self.width = width
        self.height = height

        size = width * height
        self.types = np.zeros(size, dtype=np.int64)
        self.passable = np.ones(size, dtype=bool)
        self.costs = np.full((size, len(Direction)), NO_EDGE, dtype=np.float64)

    @classmethod
    def uniform(
        cls,
        width: int,
        height: int,
        cost: float = 1.0,
        types: Optional[Dict[Coord, int]] = None,
    ) -> "GridMap":
        """Build a fully connected grid with one edge cost everywhere."""
        grid = cls(width, height)
        for x in range(width):
            for y in range(height):
                if x + 1 < width:
                    grid.set_edge((x, y), (x + 1, y), cost)
                if y + 1 < height:
                    grid.set_edge((x, y), (x, y + 1), cost)
        for coord, cell_type in (types or {}).items():
            grid.set_cell_type(coord[0], coord[1], cell_type)
        return grid

    @property
    def size(self) -> int:
        return self.width * self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, x: int, y: int) -> int:
        """Flat index of (x, y). Raises IndexError when out of bounds."""
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) is outside the {self.width}x{self.height} grid")
        return y * self.width + x

    def coord(self, index: int) -> Coord:
        return (index % self.width, index // self.width)

    def cell(self, x: int, y: int) -> Cell:
        i = self.index(x, y)
        right, left, up, down = (float(c) for c in self.costs[i])
        return Cell(
            x=x,
            y=y,
            cell_type=int(self.types[i]),
            passable=bool(self.passable[i]),
            to_right=right,
            to_left=left,
            to_up=up,
            to_down=down,
        )

    def cell_type(self, x: int, y: int) -> int:
        return int(self.types[self.index(x, y)])

    def is_passable(self, x: int, y: int) -> bool:
        return bool(self.passable[self.index(x, y)])

    def set_cell_type(self, x: int, y: int, cell_type: int) -> None:
        """Set a cell's type; only terrain (type 1) starts impassable."""
        if cell_type < 0:
            raise ValueError(f"Cell type must be non-negative, got {cell_type}")
        i = self.index(x, y)
        self.types[i] = cell_type
        self.passable[i] = cell_type != TERRAIN_TYPE

    def set_edge(self, a: Coord, b: Coord, weight: float) -> None:
        """Connect two adjacent cells with the same cost in both directions."""
        direction = direction_between(a, b)
        if direction is None:
            raise ValueError(f"Cells {a} and {b} are not horizontally or vertically adjacent")
        if weight < 0:
            raise ValueError(f"Edge weight must be non-negative, got {weight}")
        if weight >= NO_EDGE:
            raise ValueError(f"Edge weight must be below {NO_EDGE:.0f}, got {weight}")

        ia = self.index(*a)
        ib = self.index(*b)
        self.costs[ia, direction] = weight
        self.costs[ib, OPPOSITE[direction]] = weight

    def edge_cost(self, a: Coord, b: Coord) -> float:
        """Stored cost of stepping a -> b (NO_EDGE if not adjacent or unconnected)."""
        direction = direction_between(a, b)
        if direction is None:
            return NO_EDGE
        return float(self.costs[self.index(*a), direction])

    def neighbors(self, x: int, y: int) -> List[Tuple[Coord, float]]:
        """
        Get cells reachable by one traversable edge.

        Passability of the neighbour is not checked here; the pathfinder
        decides that against the live state.

        Returns:
            List of ((nx, ny), cost) in right, left, up, down order
        """
        i = self.index(x, y)
        result = []
        for direction, (dx, dy) in DIRECTION_DELTAS.items():
            cost = self.costs[i, direction]
            if cost >= NO_EDGE:
                continue
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                result.append(((nx, ny), float(cost)))
        return result

    def set_impassable(self, x: int, y: int) -> None:
        self.passable[self.index(x, y)] = False

    def convert_type_to_passable(self, type_id: int) -> int:
        """
        Turn every cell of an obstacle type into open ground.

        Returns:
            Number of cells converted
        """
        if type_id < FIRST_OBSTACLE_TYPE:
            raise ValueError(f"Only obstacle types (>= {FIRST_OBSTACLE_TYPE}) can be unlocked, got {type_id}")

        mask = self.types == type_id
        self.types[mask] = OPEN_TYPE
        self.passable[mask] = True
        return int(np.count_nonzero(mask))

    def copy(self) -> "GridMap":
        """Independent deep copy sharing no mutable state with this grid."""
        clone = GridMap.__new__(GridMap)
        clone.width = self.width
        clone.height = self.height
        clone.types = self.types.copy()
        clone.passable = self.passable.copy()
        clone.costs = self.costs.copy()
        return clone

    def path_cost(self, path: Sequence[Coord]) -> float:
        """Sum of directional edge costs along consecutive path cells."""
        total = 0.0
        for a, b in zip(path, path[1:]):
            total += self.edge_cost(a, b)
        return total

    def to_ascii(
        self,
        path: Optional[Sequence[Coord]] = None,
        position: Optional[Coord] = None,
    ) -> str:
        """
        Generate ASCII visualization of the grid.

        Legend: '#' terrain, 'o' hidden obstacle, 'X' discovered obstacle,
        '*' path, '@' agent, '.' open ground.
        """
        path_set = set(path) if path else set()
        lines = []

        for y in range(self.height - 1, -1, -1):  # Top to bottom
            row = ""
            for x in range(self.width):
                i = y * self.width + x
                if (x, y) == position:
                    row += "@"
                elif (x, y) in path_set:
                    row += "*"
                elif self.types[i] == TERRAIN_TYPE:
                    row += "#"
                elif self.types[i] >= FIRST_OBSTACLE_TYPE:
                    row += "o" if self.passable[i] else "X"
                else:
                    row += "."
            lines.append(row)

        return "\n".join(lines)

    def __repr__(self) -> str:
        blocked = int(np.count_nonzero(~self.passable))
        return (
            f"GridMap(size={self.width}x{self.height}, "
            f"blocked={blocked}/{self.size})"
        )
