"""JSON debug output."""

import json
import logging
from pathlib import Path

from ute_export.gtfs.models import ShapeBuffers, TransferBuffers

logger = logging.getLogger(__name__)


def _triplets(values: bytes | list[float]) -> list[list]:
    return [list(values[i : i + 3]) for i in range(0, len(values), 3)]


def write_json_files(
    output_path: Path,
    shapes: ShapeBuffers | None = None,
    transfers: TransferBuffers | None = None,
) -> dict[str, str]:
    """Write debug JSON files for the exported buffers."""
    logger.info(f"Writing debug JSON files to {output_path}")

    output_path.mkdir(parents=True, exist_ok=True)

    files_written = {}

    if shapes is not None:
        shapes_data = {
            "points": _triplets(shapes.points),
            "start_indices": shapes.start_indices,
            "colors": _triplets(bytes(shapes.colors)),
            "heights": [
                {"color": [c.r, c.g, c.b], "height": height}
                for c, height in shapes.heights.items()
            ],
        }

        shapes_path = output_path / "shapes.json"
        with open(shapes_path, "w", encoding="utf-8") as f:
            json.dump(shapes_data, f, indent=2, sort_keys=True)
        files_written["shapes.json"] = str(shapes_path)
        logger.info(f"Wrote {shapes_path}")

    if transfers is not None:
        transfers_data = {
            "points": _triplets(transfers.points),
            "start_indices": transfers.start_indices,
            "timestamps": transfers.timestamps,
            "colors": _triplets(bytes(transfers.colors)),
        }

        transfers_path = output_path / "transfers.json"
        with open(transfers_path, "w", encoding="utf-8") as f:
            json.dump(transfers_data, f, indent=2, sort_keys=True)
        files_written["transfers.json"] = str(transfers_path)
        logger.info(f"Wrote {transfers_path}")

    return files_written
