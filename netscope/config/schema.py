"""Configuration schema using Pydantic."""

from typing import Literal, Optional, Tuple
from pydantic import BaseModel, Field, model_validator


class CanvasConfig(BaseModel):
    """Drawing area the layout must fit into."""
    width: float = Field(default=900.0, gt=0, description="Canvas width")
    height: float = Field(default=900.0, gt=0, description="Canvas height")
    node_radius: float = Field(default=10.0, ge=0, description="Node circle radius")
    header_offset: float = Field(default=100.0, ge=0, description="Space reserved above the graph")

    @model_validator(mode="after")
    def _check_margins(self) -> "CanvasConfig":
        min_x, min_y = self.margin
        max_x, max_y = self.extent
        if min_x >= max_x or min_y >= max_y:
            raise ValueError(
                f"Canvas {self.width}x{self.height} is too small for margin ({min_x}, {min_y})"
            )
        return self

    @property
    def inset(self) -> float:
        return self.node_radius + 15.0

    @property
    def margin(self) -> Tuple[float, float]:
        """Lowest allowed (x, y) for a node center."""
        return (self.inset, self.header_offset + self.inset)

    @property
    def extent(self) -> Tuple[float, float]:
        """Highest allowed (x, y) for a node center."""
        return (self.width - self.inset, self.height - self.inset)


class LayoutConfig(BaseModel):
    """Graph layout configuration."""
    algorithm: Literal["fruchterman-reingold", "circular"] = Field(
        default="fruchterman-reingold", description="Layout algorithm"
    )
    iterations: int = Field(default=500, ge=0, description="Simulation rounds")
    repulsion: float = Field(default=100.0, gt=0, description="Repulsion constant k")
    attraction: float = Field(default=0.05, ge=0, description="Attraction multiplier")
    temperature: float = Field(default=4.0, gt=0, description="Initial temperature")
    cooling: float = Field(default=0.99, gt=0, le=1, description="Temperature decay per round")
    seed: Optional[int] = Field(default=None, description="Random seed for initial placement")


class AnimationConfig(BaseModel):
    """Traffic marker configuration."""
    enabled: bool = Field(default=True, description="Show packet activity")
    decay_ms: float = Field(default=250.0, ge=0, description="Marker lifetime in milliseconds")


class BackendConfig(BaseModel):
    """Simulation backend connection."""
    host: str = Field(default="localhost", description="Backend host")
    port: int = Field(default=5555, ge=1, le=65535, description="Backend port")
    connect_timeout: float = Field(default=5.0, gt=0, description="Connect timeout in seconds")


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Log level"
    )


class MonitorConfig(BaseModel):
    """Main configuration object."""
    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    animation: AnimationConfig = Field(default_factory=AnimationConfig)
    backend: BackendConfig = Field(default_factory=BackendConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"extra": "forbid"}  # Raise error on unknown fields
