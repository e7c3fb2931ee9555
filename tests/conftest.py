"""Pytest configuration and fixtures."""

import shutil
from pathlib import Path

import pytest


@pytest.fixture
def gtfs_shapes() -> Path:
    """Path to GTFS fixture with coloured routes and shapes."""
    return Path(__file__).parent / "fixtures" / "gtfs_shapes"


@pytest.fixture
def gtfs_noshapes() -> Path:
    """Path to GTFS fixture without shapes.txt."""
    return Path(__file__).parent / "fixtures" / "gtfs_noshapes"


@pytest.fixture
def gtfs_edgecases() -> Path:
    """Path to edge cases GTFS fixture."""
    return Path(__file__).parent / "fixtures" / "gtfs_edgecases"


@pytest.fixture
def agent_transfers_csv() -> Path:
    """Path to agent transfers for the gtfs_shapes stops."""
    return Path(__file__).parent / "fixtures" / "agent_transfers.csv"


@pytest.fixture
def tmp_output(tmp_path: Path) -> Path:
    """Temporary output directory."""
    output_dir = tmp_path / "ute_export"
    output_dir.mkdir()
    yield output_dir
    # Cleanup
    if output_dir.exists():
        shutil.rmtree(output_dir)
