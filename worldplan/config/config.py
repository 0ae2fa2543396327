from typing import List, Optional, Union

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.resource_baseline import (
    ResourceBaselineConfig,
    ResourcePrototypeConfig,
    build_default_resource_config,
)
from ..core.settlement_planner import SettlementPlanConfig
from ..core.sim_grid import Bounds, format_bounds, parse_bounds


class PlannerSettings(BaseSettings):
    """Planner settings pulled from WORLDPLAN_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WORLDPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # World Geometry
    shard_id: str = Field(default="prime_shard", description="Shard to plan")
    bounds: str = Field(default="-4..4,-4..4", description="Cell bounds, e.g. '-8..8,-8..8'")
    cell_size: float = Field(default=64, description="Cell size in world units")

    # Settlement Planning
    seed: str = Field(default="worldplan", description="Settlement planning seed")
    base_y: float = Field(default=0, description="Y coordinate for placed outposts")
    border_margin: float = Field(default=16, description="Keep-away from cell edges")
    min_cell_distance: float = Field(
        default=3, description="Minimum cell distance between outposts"
    )
    settlement_spawn_type: str = Field(default="outpost", description="Outpost spawn type")
    settlement_proto_id: str = Field(default="outpost", description="Outpost prototype id")
    settlement_archetype: str = Field(default="outpost", description="Outpost archetype")

    # Resource Planning
    resource_seed: Optional[str] = Field(
        default=None, description="Resource planning seed (defaults to a seed per shard and bounds)"
    )

    def parsed_bounds(self) -> Bounds:
        return parse_bounds(self.bounds)

    def settlement_plan_config(
        self,
        seed: Optional[Union[int, str]] = None,
        bounds: Optional[Bounds] = None,
    ) -> SettlementPlanConfig:
        """Settlement planner config from settings, with optional overrides."""
        return SettlementPlanConfig(
            seed=self.seed if seed is None else seed,
            shard_id=self.shard_id,
            bounds=bounds or self.parsed_bounds(),
            cell_size=self.cell_size,
            base_y=self.base_y,
            border_margin=self.border_margin,
            min_cell_distance=self.min_cell_distance,
            spawn_type=self.settlement_spawn_type,
            proto_id=self.settlement_proto_id,
            archetype=self.settlement_archetype,
        )

    def resource_baseline_config(
        self,
        seed: Optional[Union[int, str]] = None,
        resources: Optional[List[ResourcePrototypeConfig]] = None,
    ) -> ResourceBaselineConfig:
        """
        Resource planner config from settings.

        Without an explicit seed or WORLDPLAN_RESOURCE_SEED the seed is
        derived from shard and bounds, so the same area always plans the
        same way.
        """
        if seed is None:
            seed = self.resource_seed or (
                f"resource_baseline:{self.shard_id}:{format_bounds(self.parsed_bounds())}"
            )

        config = build_default_resource_config(seed)
        config.cell_size = self.cell_size
        if resources is not None:
            config.resources = list(resources)
        return config


# Instantiate singleton settings object
settings = PlannerSettings()
