"""
Core world planning functionality.
"""

from .sim_rng import SimRng, hash32, EmptyInputError
from .sim_grid import Bounds, Cell, CellBounds, Point, cell_bounds, cell_center, make_region_id, parse_region_id
from .tiers import tier_from_normalized_distance, max_distance_in_bounds, tier_for_point_distance_mode
from .actions import SpawnDescriptor, PlaceSpawnAction, SimWorld, ApplyResult, apply_actions, UnknownActionKindError
from .settlement_planner import FactionSeedSpec, SettlementPlanConfig, plan_initial_outposts
from .resource_baseline import (
    RegionSnapshot, RegionSpawnSnapshot, SettlementSnapshot,
    ResourcePrototypeConfig, ResourceBaselineConfig,
    WorldBaselinePlan, RegionBaselinePlan,
    plan_resource_baseline_for_region, plan_resource_baselines_for_world,
    build_default_resource_config,
)
from .snapshots import SpawnRow, SETTLEMENT_TYPES, build_region_snapshots

__all__ = ['SimRng', 'hash32', 'EmptyInputError',
           'Bounds', 'Cell', 'CellBounds', 'Point', 'cell_bounds', 'cell_center',
           'make_region_id', 'parse_region_id',
           'tier_from_normalized_distance', 'max_distance_in_bounds', 'tier_for_point_distance_mode',
           'SpawnDescriptor', 'PlaceSpawnAction', 'SimWorld', 'ApplyResult', 'apply_actions',
           'UnknownActionKindError',
           'FactionSeedSpec', 'SettlementPlanConfig', 'plan_initial_outposts',
           'RegionSnapshot', 'RegionSpawnSnapshot', 'SettlementSnapshot',
           'ResourcePrototypeConfig', 'ResourceBaselineConfig',
           'WorldBaselinePlan', 'RegionBaselinePlan',
           'plan_resource_baseline_for_region', 'plan_resource_baselines_for_world',
           'build_default_resource_config',
           'SpawnRow', 'SETTLEMENT_TYPES', 'build_region_snapshots']
