"""Data models for GTFS input, simulation results and exported buffers."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Color:
    """RGB route colour."""

    r: int
    g: int
    b: int

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Parse a GTFS hex colour such as ``FF0000``."""
        value = value.strip().lstrip("#")
        if len(value) != 6:
            raise ValueError(f"Invalid colour: {value!r}")
        return cls(int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))

    def to_bytes(self) -> bytes:
        return bytes((self.r, self.g, self.b))


@dataclass(frozen=True)
class Stop:
    """GTFS stop, without coordinates for generic nodes and boarding areas."""

    stop_id: str
    name: str
    lat: float | None
    lon: float | None


@dataclass(frozen=True)
class Route:
    """GTFS route with display colour."""

    route_id: str
    route_short_name: str
    route_long_name: str
    route_type: int
    color: Color = Color(255, 255, 255)


@dataclass(frozen=True)
class Trip:
    """GTFS trip."""

    trip_id: str
    route_id: str
    service_id: str
    shape_id: str | None = None


@dataclass(frozen=True)
class ShapePoint:
    """Single row of shapes.txt."""

    shape_id: str
    lat: float
    lon: float
    sequence: int


@dataclass(frozen=True)
class AgentTransfer:
    """A simulated passenger movement between two stops."""

    start_idx: int
    end_idx: int
    timestamp: int  # seconds since midnight
    arrival_time: int  # seconds since midnight


@dataclass
class ShapeBuffers:
    """Flat buffers for the shapes container."""

    points: list[float] = field(default_factory=list)  # lon, lat, height per point
    start_indices: list[int] = field(default_factory=list)  # in points, not floats
    colors: bytearray = field(default_factory=bytearray)  # r, g, b per point
    heights: dict[Color, float] = field(default_factory=dict)


@dataclass
class TransferBuffers:
    """Flat buffers for the agent transfers container."""

    points: list[float] = field(default_factory=list)
    start_indices: list[int] = field(default_factory=list)
    timestamps: list[float] = field(default_factory=list)
    colors: bytearray = field(default_factory=bytearray)


@dataclass
class Manifest:
    """Export manifest with metadata and checksums."""

    format_version: int
    tool_version: str
    created_at_iso: str
    inputs: dict[str, Any]
    outputs: dict[str, str]  # filename -> sha256
    stats: dict[str, int]
    build: dict[str, str]


@dataclass
class ValidationReport:
    """Report from validation process."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)


@dataclass
class ExportConfig:
    """Configuration for an export run."""

    gtfs_path: str
    output_path: str
    transfers_path: str | None = None
    compression: bool = False
    debug_json: bool = False
    shapes: bool = True
