"""Route shape export with per-colour height separation."""

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from ute_export.errors import NotFoundError
from ute_export.gtfs.models import Color, ShapeBuffers
from ute_export.output.container import pack_float32, pack_uint32, write_container

logger = logging.getLogger(__name__)

HEIGHT_STEP = 10.0


class ColourHeightMap:
    """Assigns each distinct colour its own height, in order of first use."""

    def __init__(self, step: float = HEIGHT_STEP) -> None:
        self.step = step
        self.heights: dict[Color, float] = {}
        self.last_height = 0.0

    def height_for(self, color: Color) -> float:
        """Return the height for a colour, allocating a new one if unseen."""
        height = self.heights.get(color)
        if height is None:
            self.last_height += self.step
            height = self.last_height
            self.heights[color] = height
        return height


def build_shape_buffers(
    shapes: Mapping[str, Sequence[tuple[float, float]]],
    shape_trips: Mapping[str, str],
    trip_colours: Mapping[str, Color],
) -> ShapeBuffers:
    """
    Flatten shapes into point, start index and colour buffers.

    Shapes are visited in shape id order so height assignment is
    reproducible.

    Args:
        shapes: shape id -> ordered (lon, lat) points
        shape_trips: shape id -> a trip that uses the shape
        trip_colours: trip id -> colour of the trip's route

    Returns:
        ShapeBuffers with one colour triplet per point
    """
    buffers = ShapeBuffers()
    heights = ColourHeightMap()

    for shape_id in sorted(shapes):
        trip_id = shape_trips.get(shape_id)
        if trip_id is None:
            raise NotFoundError("trip", shape_id)
        colour = trip_colours.get(trip_id)
        if colour is None:
            raise NotFoundError("route", trip_id)

        height = heights.height_for(colour)

        # Indices are based on points, not coordinates
        buffers.start_indices.append(len(buffers.points) // 3)

        colour_bytes = colour.to_bytes()
        for lon, lat in shapes[shape_id]:
            buffers.points.extend((lon, lat, height))
            buffers.colors += colour_bytes

    buffers.heights = heights.heights
    return buffers


def shape_chunks(buffers: ShapeBuffers) -> list[bytes]:
    """Chunks in container order: points, start indices, colours."""
    return [
        pack_float32(buffers.points),
        pack_uint32(buffers.start_indices),
        bytes(buffers.colors),
    ]


def export_shapes(
    path: str | Path,
    shapes: Mapping[str, Sequence[tuple[float, float]]],
    shape_trips: Mapping[str, str],
    trip_colours: Mapping[str, Color],
    compress: bool = False,
) -> ShapeBuffers:
    """Build shape buffers and write them as a container."""
    logger.info(f"Exporting {len(shapes)} shapes")

    buffers = build_shape_buffers(shapes, shape_trips, trip_colours)
    write_container(path, shape_chunks(buffers), compress=compress)

    logger.info(
        f"Exported {len(buffers.start_indices)} shapes, {len(buffers.points) // 3} points, "
        f"{len(buffers.heights)} colours"
    )
    return buffers
