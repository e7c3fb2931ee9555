"""Simulation results: stop index space and agent transfer records."""

import csv
import logging
from collections.abc import Sequence
from pathlib import Path

from ute_export.gtfs.models import AgentTransfer

logger = logging.getLogger(__name__)


class StopNetwork:
    """Stop index space shared by the simulation and the exporters."""

    def __init__(self, stop_ids: Sequence[str]) -> None:
        """Initialize network with stop ids ordered by stop index."""
        self.stop_ids = list(stop_ids)

    def num_stops(self) -> int:
        return len(self.stop_ids)

    def get_stop_id(self, stop_idx: int) -> str:
        """Get GTFS stop ID from stop index."""
        return self.stop_ids[stop_idx]


def load_agent_transfers(csv_path: str | Path) -> list[AgentTransfer]:
    """Read agent transfers from a CSV file, preserving row order."""
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Agent transfers file not found: {csv_path}")

    transfers: list[AgentTransfer] = []
    with open(csv_path, encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        for line, row in enumerate(reader, start=2):
            try:
                transfer = AgentTransfer(
                    start_idx=int(row["start_idx"]),
                    end_idx=int(row["end_idx"]),
                    timestamp=int(row["timestamp"]),
                    arrival_time=int(row["arrival_time"]),
                )
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid agent transfer at {csv_path}:{line}: {e}") from e
            transfers.append(transfer)

    logger.info(f"Loaded {len(transfers)} agent transfers from {csv_path}")
    return transfers
