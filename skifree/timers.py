"""
Scheduled Events
=================
One-shot deferred callbacks expressed as (due tick, event, entity)
entries. The simulation polls them once per tick, so nothing depends
on wall-clock time.
"""

from dataclasses import dataclass, field
from typing import List
import heapq
import itertools

# Event names
GET_UP = 'get_up'
INVINCIBILITY_END = 'invincibility_end'
YETI_BITE = 'yeti_bite'


@dataclass(order=True)
class ScheduledEvent:
    due_tick: int
    seq: int
    event: str = field(compare=False)
    entity_id: int = field(compare=False)


class Scheduler:
    """Min-heap of pending events ordered by due tick, then insertion."""

    def __init__(self):
        self._queue: List[ScheduledEvent] = []
        self._seq = itertools.count()
        self.now = 0

    def schedule(self, delay: int, event: str, entity_id: int) -> ScheduledEvent:
        """Schedule an event to fire `delay` ticks from now."""
        entry = ScheduledEvent(self.now + max(1, delay), next(self._seq), event, entity_id)
        heapq.heappush(self._queue, entry)
        return entry

    def advance(self, tick: int) -> List[ScheduledEvent]:
        """Move the clock to `tick` and pop every event that is due."""
        self.now = tick
        due = []
        while self._queue and self._queue[0].due_tick <= tick:
            due.append(heapq.heappop(self._queue))
        return due

    def pending(self, event: str) -> int:
        return sum(1 for entry in self._queue if entry.event == event)

    def __len__(self) -> int:
        return len(self._queue)
