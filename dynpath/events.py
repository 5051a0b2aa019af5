from dataclasses import dataclass
from pathlib import Path
from typing import List, Union


@dataclass(frozen=True)
class Move:
    x: int
    y: int


@dataclass(frozen=True)
class PathImpassable:
    pass


@dataclass(frozen=True)
class ObjectiveReached:
    ordinal: int


@dataclass(frozen=True)
class WizardChoice:
    code: int


Event = Union[Move, PathImpassable, ObjectiveReached, WizardChoice]


def format_event(event: Event) -> str:
    if isinstance(event, Move):
        return f"Moving to {event.x}-{event.y}"
    if isinstance(event, PathImpassable):
        return "Path is impassable!"
    if isinstance(event, ObjectiveReached):
        return f"Objective {event.ordinal} reached!"
    if isinstance(event, WizardChoice):
        return f"Number {event.code} is chosen!"
    raise TypeError(f"Unknown event: {event!r}")


class EventLog:
    """
    In-memory event sink. Pass an instance as the runner's sink; the
    transcript is written once at the end with `write`.
    """

    def __init__(self):
        self.events: List[Event] = []

    def __call__(self, event: Event):
        self.events.append(event)

    def __len__(self) -> int:
        return len(self.events)

    def lines(self) -> List[str]:
        return [format_event(e) for e in self.events]

    def count(self, kind: type) -> int:
        return sum(1 for e in self.events if isinstance(e, kind))

    def write(self, path: Union[str, Path]) -> Path:
        p = Path(path)
        if p.parent and not p.parent.exists():
            p.parent.mkdir(parents=True, exist_ok=True)
        text = "".join(line + "\n" for line in self.lines())
        p.write_text(text, encoding="utf-8")
        return p
