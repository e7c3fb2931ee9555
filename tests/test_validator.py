"""Tests for GTFS validator."""

import shutil
from pathlib import Path

from ute_export.gtfs.reader import GTFSReader
from ute_export.gtfs.validator import GTFSValidator


def test_validator_valid_data(gtfs_shapes: Path) -> None:
    """Test validator passes on valid data."""
    reader = GTFSReader(str(gtfs_shapes))
    reader.read_all()

    report = GTFSValidator(reader).validate()

    assert report.valid
    assert report.errors == []
    assert report.stats["stops"] == 3
    assert report.stats["shapes"] == 3


def test_validator_invalid_coordinates(gtfs_edgecases: Path) -> None:
    """Test validator catches invalid coordinates."""
    reader = GTFSReader(str(gtfs_edgecases))
    reader.read_all()

    report = GTFSValidator(reader).validate()

    assert not report.valid
    assert any("latitude" in err.lower() for err in report.errors)
    assert any("longitude" in err.lower() for err in report.errors)


def test_validator_orphan_trip(gtfs_edgecases: Path) -> None:
    """Test validator catches trips referencing nonexistent routes."""
    reader = GTFSReader(str(gtfs_edgecases))
    reader.read_all()

    report = GTFSValidator(reader).validate()

    assert any("non-existent route" in err.lower() for err in report.errors)


def test_validator_unused_shape(gtfs_edgecases: Path) -> None:
    """Test shapes that no trip uses are errors."""
    reader = GTFSReader(str(gtfs_edgecases))
    reader.read_all()

    report = GTFSValidator(reader).validate()

    assert "Shape S2 is not used by any trip" in report.errors


def test_validator_warnings(gtfs_edgecases: Path) -> None:
    """Test validator warns about short shapes and unknown shape references."""
    reader = GTFSReader(str(gtfs_edgecases))
    reader.read_all()

    report = GTFSValidator(reader).validate()

    assert "Shape S2 has fewer than 2 points" in report.warnings
    assert any("non-existent shape S9" in w for w in report.warnings)


def test_validator_stop_without_coordinates(gtfs_shapes: Path, tmp_path: Path) -> None:
    """Test a stop with blank coordinates is a warning, not a range error."""
    feed = tmp_path / "feed"
    shutil.copytree(gtfs_shapes, feed)
    with open(feed / "stops.txt", "a", encoding="utf-8") as f:
        f.write("NODE,,,\n")

    reader = GTFSReader(str(feed))
    reader.read_all()
    report = GTFSValidator(reader).validate()

    assert report.valid
    assert "Stop NODE has no coordinates" in report.warnings
