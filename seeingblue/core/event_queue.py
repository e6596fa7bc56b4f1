"""Event queue implementation for the simulation timeline."""

import heapq
from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List, Optional


class EventType(Enum):
    """Types of events on the timeline."""
    # A scheduled state mutation
    EFFECT = "effect"

    # Marks the end of an armed schedule
    SCHEDULE_END = "schedule_end"


@dataclass(order=True)
class Event:
    """Event on the simulation timeline.

    Events are ordered by time, then priority, then insertion order, so
    events pushed for the same time and priority pop in source order.

    Attributes:
        time: Event timestamp
        priority: Priority for tie-breaking (lower = higher priority)
        sequence: Insertion counter, assigned by the queue
        event_type: Type of event
        generation: Schedule generation the event belongs to
        effect: Callable run when the event fires
        label: Short description for logging
    """
    time: float
    priority: int = field(default=0)
    sequence: int = field(default=0)
    event_type: EventType = field(default=EventType.EFFECT, compare=False)
    generation: int = field(default=0, compare=False)
    effect: Optional[Callable[[], None]] = field(default=None, compare=False, repr=False)
    label: str = field(default="", compare=False)

    def __post_init__(self):
        """Validate event after initialization."""
        if self.time < 0:
            raise ValueError("Event time cannot be negative")

    def fire(self) -> None:
        if self.effect is not None:
            self.effect()


class EventQueue:
    """Priority queue for managing timeline events."""

    def __init__(self):
        """Initialize empty event queue."""
        self._queue: List[Event] = []
        self._event_count = 0

    def push(self, event: Event) -> None:
        """Add event to the queue.

        Args:
            event: Event to add
        """
        event.sequence = self._event_count
        heapq.heappush(self._queue, event)
        self._event_count += 1

    def pop(self) -> Event:
        """Remove and return the next event.

        Returns:
            Next event to process

        Raises:
            IndexError: If queue is empty
        """
        if self.is_empty():
            raise IndexError("Cannot pop from empty event queue")
        return heapq.heappop(self._queue)

    def peek(self) -> Optional[Event]:
        """Return the next event without removing it.

        Returns:
            Next event, or None if queue is empty
        """
        return self._queue[0] if self._queue else None

    def is_empty(self) -> bool:
        return len(self._queue) == 0

    def size(self) -> int:
        return len(self._queue)

    def count(self, event_type: EventType) -> int:
        """Number of queued events of one type."""
        return sum(1 for e in self._queue if e.event_type == event_type)

    def clear(self) -> int:
        """Remove all events from queue.

        Returns:
            Number of events removed
        """
        removed = len(self._queue)
        self._queue.clear()
        return removed

    def __len__(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        """String representation of event queue."""
        return f"EventQueue(size={len(self._queue)}, next={self.peek()})"
