"""Grid cell and region addressing for the world planner."""

import math
from typing import Iterator, NamedTuple, Optional, Tuple


class Cell(NamedTuple):
    """Integer grid coordinate of a square world region."""
    cx: int
    cz: int


class Bounds(NamedTuple):
    """Inclusive rectangle of cells."""
    min_cx: int
    max_cx: int
    min_cz: int
    max_cz: int


class CellBounds(NamedTuple):
    """World-space extent of a single cell."""
    min_x: float
    max_x: float
    min_z: float
    max_z: float


class Point(NamedTuple):
    x: float
    z: float


def iter_cells(bounds: Bounds) -> Iterator[Cell]:
    """Yield every cell in bounds, row by row (cz outer, cx inner)."""
    for cz in range(bounds.min_cz, bounds.max_cz + 1):
        for cx in range(bounds.min_cx, bounds.max_cx + 1):
            yield Cell(cx, cz)


def cell_count(bounds: Bounds) -> int:
    width = max(0, bounds.max_cx - bounds.min_cx + 1)
    depth = max(0, bounds.max_cz - bounds.min_cz + 1)
    return width * depth


def contains_cell(bounds: Bounds, cell: Cell) -> bool:
    return (
        bounds.min_cx <= cell.cx <= bounds.max_cx
        and bounds.min_cz <= cell.cz <= bounds.max_cz
    )


def cell_bounds(cell: Cell, cell_size: float) -> CellBounds:
    return CellBounds(
        min_x=cell.cx * cell_size,
        max_x=(cell.cx + 1) * cell_size,
        min_z=cell.cz * cell_size,
        max_z=(cell.cz + 1) * cell_size,
    )


def cell_center(cell: Cell, cell_size: float) -> Point:
    return Point((cell.cx + 0.5) * cell_size, (cell.cz + 0.5) * cell_size)


def cell_for_position(x: float, z: float, cell_size: float) -> Cell:
    """Cell containing a world-space position."""
    return Cell(math.floor(x / cell_size), math.floor(z / cell_size))


def make_region_id(shard_id: str, cell: Cell) -> str:
    """
    Canonical region id for a shard cell.

    Format is ``<shard>:<cx>,<cz>``, e.g. ``prime_shard:-2,5``.
    """
    return f"{shard_id}:{cell.cx},{cell.cz}"


def parse_region_id(region_id: str) -> Optional[Tuple[str, Cell]]:
    """
    Parse a region id built by make_region_id.

    Returns:
        (shard_id, cell), or None if the id is malformed
    """
    shard_id, sep, coords = region_id.rpartition(":")
    if not sep or not shard_id:
        return None

    parts = coords.split(",")
    if len(parts) != 2:
        return None

    try:
        cx, cz = int(parts[0]), int(parts[1])
    except ValueError:
        return None

    return shard_id, Cell(cx, cz)


def _parse_range(text: str) -> Tuple[int, int]:
    lo_text, sep, hi_text = text.strip().partition("..")
    lo = int(lo_text.strip())
    hi = int(hi_text.strip()) if sep else lo
    return min(lo, hi), max(lo, hi)


def parse_bounds(text: str) -> Bounds:
    """
    Parse operator bounds of the form ``"-8..8,-4..4"``.

    Inverted ranges are reordered and a bare number means a single cell.

    Raises:
        ValueError: if the text is not two comma separated ranges
    """
    parts = text.split(",")
    if len(parts) != 2:
        raise ValueError(f"Invalid bounds {text!r}, expected 'minCx..maxCx,minCz..maxCz'")

    try:
        min_cx, max_cx = _parse_range(parts[0])
        min_cz, max_cz = _parse_range(parts[1])
    except ValueError as e:
        raise ValueError(f"Invalid bounds {text!r}: {e}") from e

    return Bounds(min_cx, max_cx, min_cz, max_cz)


def format_bounds(bounds: Bounds) -> str:
    return f"{bounds.min_cx}..{bounds.max_cx},{bounds.min_cz}..{bounds.max_cz}"
