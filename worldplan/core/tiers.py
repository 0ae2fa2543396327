"""
Danger/value tier bucketing by distance from a world centre.

Distance 0 (the capital) maps to the highest tier and the farthest corner
of the planned bounds maps to the lowest.
"""

import math

from .sim_grid import Bounds, Cell, cell_center


def _normalize_tier_range(min_tier: float, max_tier: float):
    lo = math.floor(min_tier)
    hi = max(lo, math.floor(max_tier))
    return lo, hi


def tier_from_normalized_distance(norm: float, min_tier: float, max_tier: float) -> int:
    """
    Map a normalized distance in [0, 1] to a tier in [min_tier, max_tier].

    The unit interval is split into (max_tier - min_tier + 1) equal buckets;
    bucket 0 is max_tier. norm == 1 lands in the last bucket.

    Args:
        norm: Distance divided by the maximum distance; clamped to [0, 1]
        min_tier: Lowest tier (floored)
        max_tier: Highest tier (floored, forced >= min_tier)

    Returns:
        Integer tier
    """
    lo, hi = _normalize_tier_range(min_tier, max_tier)

    if not math.isfinite(norm):
        norm = 0.0
    norm = min(1.0, max(0.0, norm))

    buckets = hi - lo + 1
    index = min(buckets - 1, math.floor(norm * buckets))

    return min(hi, max(lo, hi - index))


def max_distance_in_bounds(
    bounds: Bounds, cell_size: float, center_x: float, center_z: float
) -> float:
    """Largest distance from the centre to a world-space corner of bounds."""
    min_x = bounds.min_cx * cell_size
    max_x = (bounds.max_cx + 1) * cell_size
    min_z = bounds.min_cz * cell_size
    max_z = (bounds.max_cz + 1) * cell_size

    corners = ((min_x, min_z), (min_x, max_z), (max_x, min_z), (max_x, max_z))
    return max(math.hypot(x - center_x, z - center_z) for x, z in corners)


def tier_for_point_distance_mode(
    x: float,
    z: float,
    bounds: Bounds,
    cell_size: float,
    center_x: float,
    center_z: float,
    min_tier: float,
    max_tier: float,
) -> int:
    """Tier for a world-space point, normalizing its distance by the bounds."""
    max_dist = max_distance_in_bounds(bounds, cell_size, center_x, center_z)
    dist = math.hypot(x - center_x, z - center_z)
    norm = dist / max_dist if max_dist > 0 else 0.0
    return tier_from_normalized_distance(norm, min_tier, max_tier)


def tier_for_cell(
    cell: Cell,
    bounds: Bounds,
    cell_size: float,
    center_x: float,
    center_z: float,
    min_tier: float,
    max_tier: float,
) -> int:
    """Tier of a cell, evaluated at its world centre."""
    center = cell_center(cell, cell_size)
    return tier_for_point_distance_mode(
        center.x, center.z, bounds, cell_size, center_x, center_z, min_tier, max_tier
    )
