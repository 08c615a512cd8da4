"""
Hexagonal lattice for the city growth simulation.

Coordinate system: "odd-q" offset (q = column, r = row) with flat-top
hexagons; odd columns are shoved half a row down. Neighbor directions
therefore depend on column parity. Distances are computed by converting
to cube coordinates and taking the Chebyshev distance.

Reference: https://www.redblobgames.com/grids/hexagons/
"""

from __future__ import annotations

import math
from typing import Any

from hexcity.core.tile import Tile

SQRT3 = math.sqrt(3.0)


def offset_to_cube(q: int, r: int) -> tuple[int, int, int]:
    """Convert odd-q offset coordinates to cube (x, y, z). Integer-exact."""
    x = q
    z = r - (q - (q & 1)) // 2
    y = -x - z
    return (x, y, z)


def fit_grid_to_canvas(canvas_size: float, tile_size: float) -> tuple[int, int]:
    """Return ``(rows, cols)`` of flat-top hexes that fit a square canvas.

    Keeps a one-tile margin on every side and accounts for the half-row
    offset of odd columns.
    """
    col_spacing = 1.5 * tile_size
    row_spacing = SQRT3 * tile_size
    margin = tile_size
    cols = math.floor((canvas_size - 2 * margin) / col_spacing) + 1
    rows = math.floor((canvas_size - 2 * margin - row_spacing / 2) / row_spacing) + 1
    return (max(rows, 1), max(cols, 1))


class HexGrid:
    """A fixed ``rows`` x ``cols`` lattice of Tile instances.

    Tiles are stored in a flat row-major list; index = r * cols + q.
    Topology never changes after construction, only tile contents do.

    Attributes:
        rows: Number of rows (r dimension).
        cols: Number of columns (q dimension).
        tile_size: World-space hex radius, used for positions only.
        tiles: Row-major list of tiles.
    """

    # Flat-top odd-q neighbor offsets, selected by column parity.
    ODD_COLUMN_DIRECTIONS: tuple[tuple[int, int], ...] = (
        (1, 0),
        (1, 1),
        (0, 1),
        (-1, 1),
        (-1, 0),
        (0, -1),
    )
    EVEN_COLUMN_DIRECTIONS: tuple[tuple[int, int], ...] = (
        (1, -1),
        (1, 0),
        (0, 1),
        (-1, 0),
        (-1, -1),
        (0, -1),
    )

    def __init__(self, rows: int, cols: int, tile_size: float = 1.0) -> None:
        self.rows: int = rows
        self.cols: int = cols
        self.tile_size: float = tile_size
        self.tiles: list[Tile] = [
            Tile(q=q, r=r) for r in range(rows) for q in range(cols)
        ]

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self):
        return iter(self.tiles)

    def in_bounds(self, q: int, r: int) -> bool:
        return 0 <= q < self.cols and 0 <= r < self.rows

    def tile_at(self, q: int, r: int) -> Tile | None:
        """Return the tile at ``(q, r)``, or None if out of bounds."""
        if not self.in_bounds(q, r):
            return None
        return self.tiles[r * self.cols + q]

    def center_tile(self) -> Tile | None:
        """The tile at (cols // 2, rows // 2), where growth is seeded."""
        return self.tile_at(self.cols // 2, self.rows // 2)

    # ---- Neighbor queries ----

    def neighbors_of(self, q: int, r: int) -> list[Tile]:
        """Return the in-bounds tiles adjacent to ``(q, r)``.

        Args:
            q: Column coordinate.
            r: Row coordinate.

        Returns:
            Up to 6 tiles, in direction-table order.
        """
        directions = (
            self.ODD_COLUMN_DIRECTIONS if q & 1 else self.EVEN_COLUMN_DIRECTIONS
        )
        result: list[Tile] = []
        for dq, dr in directions:
            tile = self.tile_at(q + dq, r + dr)
            if tile is not None:
                result.append(tile)
        return result

    # ---- Distance ----

    @staticmethod
    def hex_distance(a: Tile, b: Tile) -> int:
        """Number of hex steps between two tiles."""
        ax, ay, az = offset_to_cube(a.q, a.r)
        bx, by, bz = offset_to_cube(b.q, b.r)
        return max(abs(ax - bx), abs(ay - by), abs(az - bz))

    # ---- Area queries ----

    def tiles_within_range(self, q: int, r: int, radius: int) -> list[Tile]:
        """Return all tiles within ``radius`` hex steps of ``(q, r)``.

        The centre tile is included. Returns an empty list when the centre
        is out of bounds.
        """
        center = self.tile_at(q, r)
        if center is None:
            return []
        return [t for t in self.tiles if self.hex_distance(center, t) <= radius]

    def edge_tiles(self) -> list[Tile]:
        """Tiles on the rectangular boundary of the index space.

        Ordered top/bottom per column, then left/right per interior row.
        Corner tiles of one-row or one-column grids may appear twice.
        """
        edges: list[Tile | None] = []
        for q in range(self.cols):
            edges.append(self.tile_at(q, 0))
            edges.append(self.tile_at(q, self.rows - 1))
        for r in range(1, self.rows - 1):
            edges.append(self.tile_at(0, r))
            edges.append(self.tile_at(self.cols - 1, r))
        return [t for t in edges if t is not None]

    # ---- World space ----

    def world_position(self, tile: Tile) -> tuple[float, float]:
        """World-space centre ``(x, z)`` of a tile."""
        size = self.tile_size
        x = 1.5 * size * tile.q
        z = SQRT3 * size * tile.r + (tile.q % 2) * (SQRT3 * size / 2)
        return (x, z)

    def tile_at_point(self, x: float, z: float) -> Tile | None:
        """Return the tile whose hexagon contains world point ``(x, z)``."""
        size = self.tile_size
        fq = (2.0 / 3.0 * x) / size
        fr = (-1.0 / 3.0 * x + SQRT3 / 3.0 * z) / size
        fs = -fq - fr

        # Cube rounding: fix the component with the largest rounding error.
        rq, rr, rs = round(fq), round(fr), round(fs)
        dq, dr, ds = abs(rq - fq), abs(rr - fr), abs(rs - fs)
        if dq > dr and dq > ds:
            rq = -rr - rs
        elif dr > ds:
            rr = -rq - rs

        q = int(rq)
        r = int(rr) + (q - (q & 1)) // 2
        return self.tile_at(q, r)

    # ---- Export ----

    def to_dict(self) -> dict[str, Any]:
        """Export dimensions and every tile with its world position."""
        tiles = []
        for tile in self.tiles:
            d = tile.to_dict()
            d["x"], d["z"] = self.world_position(tile)
            tiles.append(d)
        return {
            "rows": self.rows,
            "cols": self.cols,
            "tile_size": self.tile_size,
            "tiles": tiles,
        }
