"""
Procedural Slope Generation
============================
The mountain is an infinite grid of chunks, each split into quadrants.
Chunks are populated on demand and exactly once.

Obstacle density is controlled by one shared countdown per obstacle
type. Every quadrant visit, anywhere on the mountain, ticks every
countdown down by one; the first type (in table order) that reaches
zero spawns and redraws its countdown. This spreads each type evenly
across the world instead of clumping per chunk.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple
import logging
import math
import random

from .ecs import World
from .components import ObstacleKind
from .config import OBSTACLE_TABLE, ObstacleRate, SimConfig, CHUNK_WINDOW_X, CHUNK_WINDOW_AHEAD
from .geometry import vec_distance
from .obstacles import spawn_obstacle

logger = logging.getLogger(__name__)


# =============================================================================
# SPAWN RATE TABLE
# =============================================================================

@dataclass
class SpawnRate:
    """Countdown state for one obstacle type."""
    kind: ObstacleKind
    interval: Tuple[int, int]
    countdown: int = 0


class SpawnRateTable:
    """Shared type -> countdown table, kept in fixed priority order."""

    def __init__(self, rows: Sequence[ObstacleRate] = OBSTACLE_TABLE,
                 rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.entries: List[SpawnRate] = [
            SpawnRate(row.kind, row.interval) for row in rows
        ]
        for entry in self.entries:
            entry.countdown = self._draw(entry)

    def _draw(self, entry: SpawnRate) -> int:
        low, high = entry.interval
        return int(round(self.rng.uniform(low, high)))

    def countdown(self, kind: ObstacleKind) -> int:
        for entry in self.entries:
            if entry.kind == kind:
                return entry.countdown
        raise KeyError(kind)

    def select(self) -> Optional[ObstacleKind]:
        """
        Register one quadrant visit and pick what spawns there.

        Every countdown ticks down (floored at zero) even after a
        winner is found; only the winner is redrawn.
        """
        chosen = None
        for entry in self.entries:
            if entry.countdown > 0:
                entry.countdown -= 1

            if entry.countdown <= 0 and chosen is None:
                chosen = entry.kind
                entry.countdown = self._draw(entry)
        return chosen


# =============================================================================
# CHUNK GENERATOR
# =============================================================================

class ChunkGenerator:
    """Populates chunks with obstacles and remembers which are done."""

    def __init__(self, world: World, rates: SpawnRateTable,
                 config: Optional[SimConfig] = None,
                 rng: Optional[random.Random] = None):
        self.world = world
        self.rates = rates
        self.config = config or SimConfig()
        self.rng = rng or random.Random()
        # column -> rows already generated in it
        self._generated: Dict[int, Set[int]] = {}

    def was_generated(self, chunk: Tuple[int, int]) -> bool:
        rows = self._generated.get(chunk[0])
        return rows is not None and chunk[1] in rows

    def _register(self, chunk: Tuple[int, int]) -> None:
        self._generated.setdefault(chunk[0], set()).add(chunk[1])

    def generated_count(self) -> int:
        return sum(len(rows) for rows in self._generated.values())

    def current_chunk(self, x: float, y: float) -> Tuple[int, int]:
        """Chunk coordinate containing a world position."""
        return (
            math.floor(x / self.config.chunk_width),
            math.floor(y / self.config.chunk_height),
        )

    def generate_chunk(self, chunk: Tuple[int, int], anchor: Tuple[float, float]) -> List[int]:
        """
        Populate a chunk once. Quadrants whose spawn point lands too
        close to `anchor` are left empty.

        Returns the IDs of the obstacles created (empty on repeat calls).
        """
        if self.was_generated(chunk):
            return []

        cfg = self.config
        top_left_x = chunk[0] * cfg.chunk_width
        top_left_y = chunk[1] * cfg.chunk_height
        half_w = cfg.quadrant_width / 2
        half_h = cfg.quadrant_height / 2

        spawned = []
        for qy in range(cfg.quadrants_y):
            for qx in range(cfg.quadrants_x):
                center_x = top_left_x + (qx + 0.5) * cfg.quadrant_width
                center_y = top_left_y + (qy + 0.5) * cfg.quadrant_height

                spawn_x = center_x + self.rng.uniform(-half_w, half_w)
                spawn_y = center_y + self.rng.uniform(-half_h, half_h)

                if vec_distance(anchor[0], anchor[1], spawn_x, spawn_y) <= cfg.min_spawn_distance:
                    continue

                kind = self.rates.select()
                if kind is None:
                    continue

                spawned.append(spawn_obstacle(
                    self.world, kind, spawn_x, spawn_y, self.rng, cfg.flaming_bush_prob
                ))

        self._register(chunk)
        logger.debug("generated chunk %s with %d obstacles", chunk, len(spawned))
        return spawned

    def generate_window(self, chunk: Tuple[int, int], anchor: Tuple[float, float]) -> List[int]:
        """Generate the neighbourhood around the skier's chunk."""
        cx, cy = chunk
        spawned = []
        for y in range(cy, cy + CHUNK_WINDOW_AHEAD + 1):
            for x in range(cx - CHUNK_WINDOW_X, cx + CHUNK_WINDOW_X + 1):
                spawned.extend(self.generate_chunk((x, y), anchor))
        return spawned
