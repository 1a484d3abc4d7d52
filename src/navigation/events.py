from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional


class EventType(Enum):
    """Types of events emitted while the agent navigates."""
    # Movement events
    MOVED = auto()                  # Agent stepped onto a cell
    PATH_IMPASSABLE = auto()        # Discovered obstacle blocks the route

    # Objective events
    OBJECTIVE_REACHED = auto()
    OBJECTIVE_UNREACHABLE = auto()  # Terminal: the run stops here

    # Decision events
    OPTION_CHOSEN = auto()
    NO_OPTION_CHOSEN = auto()

    RUN_COMPLETED = auto()


@dataclass
class Event:
    """
    Represents an event in the simulation.
    step is the number of cells walked when the event was emitted.
    """
    event_type: EventType
    step: int
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type.name.lower(),
            "step": self.step,
            "data": self.data,
        }

    def to_line(self) -> Optional[str]:
        """Render the event as a line of the text log, or None if silent."""
        data = self.data
        if self.event_type == EventType.MOVED:
            return f"Moving to {data['x']}-{data['y']}"
        if self.event_type == EventType.PATH_IMPASSABLE:
            return "Path is impassable!"
        if self.event_type == EventType.OBJECTIVE_REACHED:
            return f"Objective {data['objective']} reached!"
        if self.event_type == EventType.OPTION_CHOSEN:
            return f"Number {data['option']} is chosen!"
        if self.event_type == EventType.NO_OPTION_CHOSEN:
            return "No option is chosen!"
        if self.event_type == EventType.OBJECTIVE_UNREACHABLE:
            return f"Objective {data['objective']} cannot be reached!"
        return None


# Anything that accepts an Event can receive simulation output
EventSink = Callable[[Event], None]


class EventLog:
    """
    Default event sink.
    Collects every event it receives, in order, for later inspection.
    """

    def __init__(self):
        self._events: List[Event] = []

    def __call__(self, event: Event) -> None:
        self.record(event)

    def record(self, event: Event) -> None:
        self._events.append(event)

    @property
    def events(self) -> List[Event]:
        return list(self._events)

    def of_type(self, event_type: EventType) -> List[Event]:
        return [e for e in self._events if e.event_type == event_type]

    def to_lines(self) -> List[str]:
        """Text log lines for every non-silent event."""
        lines = []
        for event in self._events:
            line = event.to_line()
            if line is not None:
                lines.append(line)
        return lines

    def get_history(self) -> List[Dict[str, Any]]:
        """Get all recorded events as dicts."""
        return [e.to_dict() for e in self._events]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
