"""
Runtime orchestrator for grid navigation runs.

Wires a loaded Scenario into a fresh live grid and a NavigationController,
collects the emitted events and renders them as text log lines.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from src.navigation import (
    Coord,
    DijkstraPathfinder,
    Event,
    EventLog,
    EventSink,
    NavigationConfig,
    NavigationController,
    NavigationState,
    PathfindingConfig,
    VisibilityConfig,
)
from src.world import Scenario


@dataclass
class RuntimeConfig:
    """Configuration for a simulation run."""
    enable_logging: bool = True  # Keep the result of every run in history
    reveal_at_start: bool = True
    max_replans_per_objective: Optional[int] = None
    max_expansions: Optional[int] = None  # Pathfinding safety limit


@dataclass
class SimulationResult:
    """Result of a single simulation run."""
    success: bool
    objectives_reached: int
    total_objectives: int
    final_position: Coord
    steps: int
    replans: int
    events: List[Event] = field(default_factory=list)

    @property
    def lines(self) -> List[str]:
        """Text log lines, one per non-silent event."""
        return [line for line in (e.to_line() for e in self.events) if line is not None]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "objectives_reached": self.objectives_reached,
            "total_objectives": self.total_objectives,
            "final_position": list(self.final_position),
            "steps": self.steps,
            "replans": self.replans,
            "events": [e.to_dict() for e in self.events],
        }


class SimulationRuntime:
    """
    Runs scenarios through the navigation controller.

    Flow per run:
    1. Build a fresh live grid from the scenario
    2. Create a controller (and its per-run context)
    3. Run every objective, forwarding events to the log and an optional extra sink
    4. Return a SimulationResult

    Usage:
        runtime = SimulationRuntime(load_scenario(land, edges, objectives))
        result = runtime.run()
        for line in result.lines:
            print(line)
    """

    def __init__(
        self,
        scenario: Scenario,
        config: Optional[RuntimeConfig] = None,
    ):
        self.config = config or RuntimeConfig()
        self._scenario = scenario
        self._history: List[SimulationResult] = []
        self._last_controller: Optional[NavigationController] = None

    @property
    def scenario(self) -> Scenario:
        return self._scenario

    @property
    def last_controller(self) -> Optional[NavigationController]:
        """Controller of the most recent run (for debugging/visualization)."""
        return self._last_controller

    def run(self, sink: Optional[EventSink] = None) -> SimulationResult:
        """
        Execute one full run over a fresh copy of the scenario grid.

        Args:
            sink: Optional extra consumer receiving each event as it happens

        Returns:
            SimulationResult with events and summary counters
        """
        scenario = self._scenario
        log = EventLog()

        def forward(event: Event) -> None:
            log.record(event)
            if sink is not None:
                sink(event)

        controller = NavigationController(
            scenario.build_grid(),
            scenario.start,
            scenario.objectives,
            visibility_config=VisibilityConfig(radius=scenario.radius),
            config=NavigationConfig(
                enable_logging=self.config.enable_logging,
                reveal_at_start=self.config.reveal_at_start,
                max_replans_per_objective=self.config.max_replans_per_objective,
            ),
            sink=forward,
            pathfinder=DijkstraPathfinder(
                PathfindingConfig(max_expansions=self.config.max_expansions)
            ),
        )
        self._last_controller = controller

        success = controller.run()
        state = controller.get_state()

        result = SimulationResult(
            success=success,
            objectives_reached=state.objectives_reached,
            total_objectives=state.total_objectives,
            final_position=state.position,
            steps=state.steps,
            replans=state.replans,
            events=log.events,
        )

        if self.config.enable_logging:
            self._history.append(result)

        return result

    def get_state(self) -> Optional[NavigationState]:
        """Navigation state of the most recent run, if any."""
        if self._last_controller is None:
            return None
        return self._last_controller.get_state()

    def get_run_history(self, last_n: Optional[int] = None) -> List[Dict[str, Any]]:
        """Get run history for analysis."""
        history = self._history[-last_n:] if last_n else self._history
        return [r.to_dict() for r in history]


def write_output(result: SimulationResult, path: Union[str, Path]) -> None:
    """Write the rendered log lines of a run to a text file."""
    with open(path, "w", encoding="utf-8") as f:
        for line in result.lines:
            f.write(line + "\n")
