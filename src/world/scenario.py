"""
Scenario data and text loaders.

A scenario is read from three plain-text files:

Land file:
    rows cols            # x extent, y extent
    x y type             # one line per cell

Edge file:
    x1-y1,x2-y2 weight   # symmetric cost between adjacent cells

Objectives file:
    radius
    start_x start_y
    x y [alternative ...]

Blank lines are ignored everywhere. Cells missing from the land file stay
open ground (type 0); without edges they are unreachable anyway.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from src.navigation.base import Objective
from src.navigation.grid_map import Coord, FIRST_OBSTACLE_TYPE, GridMap, NO_EDGE

PathLike = Union[str, Path]


class ScenarioFormatError(ValueError):
    """A scenario file could not be parsed."""

    def __init__(self, source: str, line_number: int, message: str):
        self.source = source
        self.line_number = line_number
        super().__init__(f"{source}:{line_number}: {message}")


@dataclass
class Scenario:
    """Everything needed to set up one simulation run."""
    width: int
    height: int
    cells: List[Tuple[int, int, int]] = field(default_factory=list)         # (x, y, type)
    edges: List[Tuple[Coord, Coord, float]] = field(default_factory=list)    # (a, b, weight)
    radius: int = 0
    start: Coord = (0, 0)
    objectives: List[Objective] = field(default_factory=list)

    def build_grid(self) -> GridMap:
        """Create a fresh live grid from the scenario data."""
        grid = GridMap(self.width, self.height)
        for x, y, cell_type in self.cells:
            grid.set_cell_type(x, y, cell_type)
        for a, b, weight in self.edges:
            grid.set_edge(a, b, weight)
        return grid


def _data_lines(lines: Iterable[str]) -> Iterable[Tuple[int, List[str]]]:
    """Yield (line_number, tokens) for every non-blank line."""
    for number, line in enumerate(lines, start=1):
        tokens = line.split()
        if tokens:
            yield number, tokens


def _to_int(token: str, source: str, number: int) -> int:
    try:
        return int(token)
    except ValueError:
        raise ScenarioFormatError(source, number, f"expected an integer, got {token!r}") from None


def _parse_coord(token: str, source: str, number: int) -> Coord:
    parts = token.split("-")
    if len(parts) != 2:
        raise ScenarioFormatError(source, number, f"expected a cell as 'x-y', got {token!r}")
    return (_to_int(parts[0], source, number), _to_int(parts[1], source, number))


def _check_inside(
    coord: Coord,
    bounds: Optional[Tuple[int, int]],
    source: str,
    number: int,
    what: str,
) -> None:
    if bounds is None:
        return
    width, height = bounds
    if not (0 <= coord[0] < width and 0 <= coord[1] < height):
        raise ScenarioFormatError(source, number, f"{what} {coord} is outside the {width}x{height} grid")


def parse_land(lines: Iterable[str], source: str = "<land>") -> Tuple[int, int, List[Tuple[int, int, int]]]:
    """
    Parse grid dimensions and cell types.

    Returns:
        (width, height, cells) where cells is a list of (x, y, type)
    """
    rows = _data_lines(lines)
    header = next(rows, None)
    if header is None:
        raise ScenarioFormatError(source, 1, "missing grid dimensions")

    number, tokens = header
    if len(tokens) != 2:
        raise ScenarioFormatError(source, number, "dimensions must be 'rows cols'")
    width, height = (_to_int(t, source, number) for t in tokens)
    if width <= 0 or height <= 0:
        raise ScenarioFormatError(source, number, f"dimensions must be positive, got {width}x{height}")

    cells = []
    for number, tokens in rows:
        if len(tokens) != 3:
            raise ScenarioFormatError(source, number, "cell lines must be 'x y type'")
        x, y, cell_type = (_to_int(t, source, number) for t in tokens)
        _check_inside((x, y), (width, height), source, number, "cell")
        if cell_type < 0:
            raise ScenarioFormatError(source, number, f"cell type must be non-negative, got {cell_type}")
        cells.append((x, y, cell_type))

    return width, height, cells


def parse_edges(
    lines: Iterable[str],
    source: str = "<edges>",
    bounds: Optional[Tuple[int, int]] = None,
) -> List[Tuple[Coord, Coord, float]]:
    """
    Parse 'x1-y1,x2-y2 weight' lines.

    When bounds (width, height) is given, both cells must lie on that grid.
    """
    edges = []
    for number, tokens in _data_lines(lines):
        if len(tokens) != 2:
            raise ScenarioFormatError(source, number, "edge lines must be 'x1-y1,x2-y2 weight'")

        ends = tokens[0].split(",")
        if len(ends) != 2:
            raise ScenarioFormatError(source, number, f"expected two cells, got {tokens[0]!r}")
        a = _parse_coord(ends[0], source, number)
        b = _parse_coord(ends[1], source, number)
        _check_inside(a, bounds, source, number, "edge cell")
        _check_inside(b, bounds, source, number, "edge cell")

        if abs(a[0] - b[0]) + abs(a[1] - b[1]) != 1:
            raise ScenarioFormatError(source, number, f"cells {a} and {b} are not adjacent")

        try:
            weight = float(tokens[1])
        except ValueError:
            raise ScenarioFormatError(source, number, f"expected a weight, got {tokens[1]!r}") from None
        if weight < 0:
            raise ScenarioFormatError(source, number, f"weight must be non-negative, got {weight}")
        if weight >= NO_EDGE:
            raise ScenarioFormatError(source, number, f"weight must be below {NO_EDGE:.0f}, got {weight}")

        edges.append((a, b, weight))
    return edges


def parse_objectives(
    lines: Iterable[str],
    source: str = "<objectives>",
    bounds: Optional[Tuple[int, int]] = None,
) -> Tuple[int, Coord, List[Objective]]:
    """
    Parse the visibility radius, start cell and objective list.

    When bounds (width, height) is given, the start and every objective
    must lie on that grid.

    Returns:
        (radius, start, objectives)
    """
    rows = _data_lines(lines)

    header = next(rows, None)
    if header is None:
        raise ScenarioFormatError(source, 1, "missing visibility radius")
    number, tokens = header
    if len(tokens) != 1:
        raise ScenarioFormatError(source, number, "first line must be the visibility radius")
    radius = _to_int(tokens[0], source, number)
    if radius < 0:
        raise ScenarioFormatError(source, number, f"radius must be non-negative, got {radius}")

    start_line = next(rows, None)
    if start_line is None:
        raise ScenarioFormatError(source, number + 1, "missing start position")
    number, tokens = start_line
    if len(tokens) != 2:
        raise ScenarioFormatError(source, number, "start line must be 'x y'")
    start = (_to_int(tokens[0], source, number), _to_int(tokens[1], source, number))
    _check_inside(start, bounds, source, number, "start")

    objectives = []
    for number, tokens in rows:
        if len(tokens) < 2:
            raise ScenarioFormatError(source, number, "objective lines must be 'x y [alternative ...]'")
        values = [_to_int(t, source, number) for t in tokens]
        _check_inside((values[0], values[1]), bounds, source, number, "objective")
        alternatives = tuple(values[2:])
        for option in alternatives:
            if option < FIRST_OBSTACLE_TYPE:
                raise ScenarioFormatError(
                    source, number, f"alternative {option} is not an obstacle type (>= {FIRST_OBSTACLE_TYPE})"
                )
        objectives.append(Objective(x=values[0], y=values[1], alternatives=alternatives))

    return radius, start, objectives


def _read_lines(path: PathLike) -> List[str]:
    with open(path, "r", encoding="utf-8") as f:
        return f.read().splitlines()


def load_scenario(land_path: PathLike, edges_path: PathLike, objectives_path: PathLike) -> Scenario:
    """Load a scenario from its three text files."""
    width, height, cells = parse_land(_read_lines(land_path), source=str(land_path))
    bounds = (width, height)
    edges = parse_edges(_read_lines(edges_path), source=str(edges_path), bounds=bounds)
    radius, start, objectives = parse_objectives(
        _read_lines(objectives_path), source=str(objectives_path), bounds=bounds
    )

    return Scenario(
        width=width,
        height=height,
        cells=cells,
        edges=edges,
        radius=radius,
        start=start,
        objectives=objectives,
    )
