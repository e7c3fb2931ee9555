"""Agent transfer export as straight two-point segments."""

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from ute_export.errors import NotFoundError
from ute_export.gtfs.models import AgentTransfer, Color, TransferBuffers
from ute_export.output.container import pack_float32, pack_uint32, write_container
from ute_export.simulation.transfers import StopNetwork

logger = logging.getLogger(__name__)

TRANSFER_HEIGHT = 100.0
TRANSFER_COLOR = Color(0xA0, 0x20, 0xF0)


def build_stop_points(
    network: StopNetwork, stop_locations: Mapping[str, tuple[float, float]]
) -> list[tuple[float, float]]:
    """Resolve every network stop index to (lon, lat) once."""
    stop_points = []
    for stop_idx in range(network.num_stops()):
        stop_id = network.get_stop_id(stop_idx)
        location = stop_locations.get(stop_id)
        if location is None:
            raise NotFoundError("stop", stop_id)
        stop_points.append(location)
    return stop_points


def _stop_point(stop_points: Sequence[tuple[float, float]], stop_idx: int) -> tuple[float, float]:
    if not 0 <= stop_idx < len(stop_points):
        raise NotFoundError("stop", stop_idx)
    return stop_points[stop_idx]


def build_transfer_buffers(
    stop_points: Sequence[tuple[float, float]], transfers: Sequence[AgentTransfer]
) -> TransferBuffers:
    """Flatten transfers into point, start index, timestamp and colour buffers."""
    buffers = TransferBuffers()
    colour_bytes = TRANSFER_COLOR.to_bytes()

    for transfer in transfers:
        buffers.start_indices.append(len(buffers.points) // 3)

        start_lon, start_lat = _stop_point(stop_points, transfer.start_idx)
        end_lon, end_lat = _stop_point(stop_points, transfer.end_idx)
        buffers.points.extend((start_lon, start_lat, TRANSFER_HEIGHT))
        buffers.points.extend((end_lon, end_lat, TRANSFER_HEIGHT))

        buffers.timestamps.append(float(transfer.timestamp))
        buffers.timestamps.append(float(transfer.arrival_time))

        buffers.colors += colour_bytes * 2

    return buffers


def transfer_chunks(buffers: TransferBuffers) -> list[bytes]:
    """Chunks in container order: points, start indices, timestamps, colours."""
    return [
        pack_float32(buffers.points),
        pack_uint32(buffers.start_indices),
        pack_float32(buffers.timestamps),
        bytes(buffers.colors),
    ]


def export_transfers(
    path: str | Path,
    stop_points: Sequence[tuple[float, float]],
    transfers: Sequence[AgentTransfer],
    compress: bool = False,
) -> TransferBuffers:
    """Build transfer buffers and write them as a container."""
    logger.info(f"Exporting {len(transfers)} agent transfers")

    buffers = build_transfer_buffers(stop_points, transfers)
    write_container(path, transfer_chunks(buffers), compress=compress)

    logger.info(f"Exported {len(buffers.start_indices)} transfer segments")
    return buffers
