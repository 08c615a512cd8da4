"""
Per-cell simulation state for the city grid.

A Tile carries its DLA state, its building level, and the morph animation
that moves it between levels. Level changes driven by evolution or decay
are staged through ``begin_morph`` and only committed once the eased
morph progress reaches 1.0, so the logical level always reflects the
pre-transition value while a morph is in flight.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from hexcity.core.levels import (
    EVOLUTION,
    LEVEL_NAMES,
    SERVICE_RANGE,
    STATE_NAMES,
    CellState,
    Level,
)

if TYPE_CHECKING:
    from hexcity.core.hex_grid import HexGrid


DEFAULT_MORPH_DURATION_MS = 1000.0


def ease_in_out_cubic(p: float) -> float:
    """Cubic ease-in-out on [0, 1]."""
    if p < 0.5:
        return 4.0 * p * p * p
    return 1.0 - (-2.0 * p + 2.0) ** 3 / 2.0


@dataclass(eq=False)
class Tile:
    """A single hexagonal cell in odd-q offset coordinates.

    Tiles compare by identity: two tiles are the same only if they are
    the same grid cell.

    Attributes:
        q: Column index.
        r: Row index.
        state: DLA state (EMPTY, CANDIDATE, CRYSTALLIZED).
        level: Committed building level.
        target_level: Level the current morph is heading to.
        morph_progress: Eased morph fraction in [0, 1]; 1.0 means idle.
        morph_start_time: Clock value (ms) when the current morph began.
        morph_duration: Length of a morph in ms.
    """

    q: int
    r: int
    state: CellState = CellState.EMPTY
    level: Level = Level.EMPTY
    target_level: Level = Level.EMPTY
    morph_progress: float = 1.0
    morph_start_time: float = 0.0
    morph_duration: float = DEFAULT_MORPH_DURATION_MS

    @property
    def coords(self) -> tuple[int, int]:
        """Offset coordinates as a tuple."""
        return (self.q, self.r)

    @property
    def is_crystallized(self) -> bool:
        return self.state == CellState.CRYSTALLIZED

    @property
    def is_morphing(self) -> bool:
        return self.morph_progress < 1.0

    @property
    def service_range(self) -> int:
        return SERVICE_RANGE[self.level]

    # ---- Aggregation ----

    def crystallize(self) -> None:
        """Commit this cell as a fresh HOUSE."""
        self.state = CellState.CRYSTALLIZED
        self.level = Level.HOUSE
        self.target_level = Level.HOUSE

    # ---- Evolution ----

    def can_promote(self, grid: HexGrid, shadow_factor: float = 0.5) -> bool:
        """Check whether this tile qualifies for promotion to the next level.

        Requires enough crystallized neighbors at or below the current level,
        and no existing entity of the target level (or higher) inside the
        shadow radius ``SERVICE_RANGE[target] * shadow_factor``.

        Args:
            grid: The grid this tile belongs to.
            shadow_factor: Damping multiplier on the target's service range.

        Returns:
            True if the tile may begin a promotion morph.
        """
        if self.state != CellState.CRYSTALLIZED:
            return False

        rule = EVOLUTION.get(self.level)
        if rule is None:
            return False

        supporting = [
            n for n in grid.neighbors_of(self.q, self.r)
            if n.state == CellState.CRYSTALLIZED and n.level <= self.level
        ]
        if len(supporting) < rule.threshold:
            return False

        shadow_radius = SERVICE_RANGE[rule.next_level] * shadow_factor
        for other in grid.tiles:
            if other is self or other.state != CellState.CRYSTALLIZED:
                continue
            if other.level >= rule.next_level and grid.hex_distance(self, other) <= shadow_radius:
                return False
        return True

    # ---- Morphing ----

    def begin_morph(self, new_level: int, now: float) -> None:
        """Start a morph toward ``new_level``. No-op if already at that level."""
        if new_level == self.level:
            return
        self.target_level = Level(new_level)
        self.morph_progress = 0.0
        self.morph_start_time = now

    def advance_morph(self, now: float) -> bool:
        """Advance the in-flight morph to clock value ``now``.

        Returns:
            True if the morph completed on this call.
        """
        if self.morph_progress >= 1.0:
            return False

        elapsed = now - self.morph_start_time
        linear = min(max(elapsed / self.morph_duration, 0.0), 1.0)
        self.morph_progress = max(self.morph_progress, ease_in_out_cubic(linear))

        if self.morph_progress >= 1.0:
            self.morph_progress = 1.0
            self.level = self.target_level
            # State and level drop to EMPTY together.
            if self.target_level == Level.EMPTY:
                self.state = CellState.EMPTY
            return True
        return False

    # ---- Read-out ----

    def describe(self) -> str:
        """Multi-line summary for a hover read-out."""
        return "\n".join([
            f"Tile: ({self.q}, {self.r})",
            f"State: {STATE_NAMES[self.state]}",
            f"Level: {LEVEL_NAMES[self.level]}",
            f"Range: {self.service_range}",
        ])

    def to_dict(self) -> dict[str, Any]:
        """Serialize tile state to a dictionary."""
        return {
            "q": self.q,
            "r": self.r,
            "state": int(self.state),
            "level": int(self.level),
            "target_level": int(self.target_level),
            "morph_progress": self.morph_progress,
        }
