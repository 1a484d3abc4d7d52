from .scenario import (
    Scenario,
    ScenarioFormatError,
    load_scenario,
    parse_land,
    parse_edges,
    parse_objectives,
)

__all__ = [
    "Scenario",
    "ScenarioFormatError",
    "load_scenario",
    "parse_land",
    "parse_edges",
    "parse_objectives",
]
