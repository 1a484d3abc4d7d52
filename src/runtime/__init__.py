from .runtime import (
    SimulationRuntime,
    RuntimeConfig,
    SimulationResult,
    write_output,
)

__all__ = [
    "SimulationRuntime",
    "RuntimeConfig",
    "SimulationResult",
    "write_output",
]
