"""Tests for the shape exporter."""

from pathlib import Path

import pytest

from ute_export.errors import NotFoundError
from ute_export.export.shapes import ColourHeightMap, build_shape_buffers, export_shapes
from ute_export.gtfs.models import Color
from ute_export.output.container import read_container, unpack_float32, unpack_uint32

RED = Color(255, 0, 0)
GREEN = Color(0, 255, 0)
BLUE = Color(0, 0, 255)


def test_single_shape_export(tmp_path: Path) -> None:
    """Test one red shape with two points."""
    path = tmp_path / "shapes.bin"
    export_shapes(
        path,
        {"S1": [(144.5, -37.75), (145.0, -37.5)]},
        {"S1": "T1"},
        {"T1": RED},
    )

    points, start_indices, colors = read_container(path)
    assert unpack_float32(points) == [144.5, -37.75, 10.0, 145.0, -37.5, 10.0]
    assert unpack_uint32(start_indices) == [0]
    assert list(colors) == [255, 0, 0, 255, 0, 0]


def test_colour_height_map() -> None:
    """Test heights are allocated in steps of 10 by first use."""
    heights = ColourHeightMap()

    assert heights.height_for(GREEN) == 10.0
    assert heights.height_for(RED) == 20.0
    assert heights.height_for(GREEN) == 10.0
    assert heights.height_for(BLUE) == 30.0
    assert heights.heights == {GREEN: 10.0, RED: 20.0, BLUE: 30.0}


def test_shared_colour_shares_height() -> None:
    """Test shapes on routes with the same colour get the same height."""
    shapes = {
        "A": [(0.0, 0.0), (1.0, 1.0)],
        "B": [(2.0, 2.0)],
        "C": [(3.0, 3.0), (4.0, 4.0), (5.0, 5.0)],
    }
    buffers = build_shape_buffers(
        shapes,
        {"A": "TA", "B": "TB", "C": "TC"},
        {"TA": RED, "TB": GREEN, "TC": RED},
    )

    heights = buffers.points[2::3]
    assert heights == [10.0, 10.0, 20.0, 10.0, 10.0, 10.0]
    assert buffers.heights == {RED: 10.0, GREEN: 20.0}


def test_start_indices_are_cumulative_point_counts() -> None:
    """Test start indices count points before each shape."""
    shapes = {
        "S1": [(0.0, 0.0)] * 4,
        "S2": [(1.0, 1.0)] * 2,
        "S3": [(2.0, 2.0)] * 5,
    }
    buffers = build_shape_buffers(
        shapes, {s: "T" for s in shapes}, {"T": BLUE}
    )

    assert buffers.start_indices == [0, 4, 6]
    assert len(buffers.points) == 11 * 3
    assert bytes(buffers.colors) == bytes((0, 0, 255)) * 11


def test_shapes_visited_in_id_order() -> None:
    """Test height assignment does not depend on mapping insertion order."""
    shape_trips = {"a": "T1", "b": "T2"}
    trip_colours = {"T1": RED, "T2": GREEN}

    forward = build_shape_buffers({"a": [(0.0, 0.0)], "b": [(1.0, 1.0)]}, shape_trips, trip_colours)
    backward = build_shape_buffers({"b": [(1.0, 1.0)], "a": [(0.0, 0.0)]}, shape_trips, trip_colours)

    assert forward.points == backward.points
    assert forward.heights == backward.heights == {RED: 10.0, GREEN: 20.0}


def test_shape_without_trip_raises() -> None:
    """Test a shape that no trip uses is a lookup failure."""
    with pytest.raises(NotFoundError) as exc_info:
        build_shape_buffers({"S1": [(0.0, 0.0)]}, {}, {})

    assert exc_info.value.kind == "trip"
    assert exc_info.value.id == "S1"


def test_trip_without_route_colour_raises() -> None:
    """Test a representative trip with no route colour is a lookup failure."""
    with pytest.raises(NotFoundError) as exc_info:
        build_shape_buffers({"S1": [(0.0, 0.0)]}, {"S1": "T1"}, {})

    assert exc_info.value.kind == "route"
    assert exc_info.value.id == "T1"


def test_missing_lookup_writes_nothing(tmp_path: Path) -> None:
    """Test a failed export leaves no output file."""
    path = tmp_path / "shapes.bin"
    with pytest.raises(NotFoundError):
        export_shapes(path, {"S1": [(0.0, 0.0)]}, {}, {})

    assert not path.exists()


def test_no_shapes(tmp_path: Path) -> None:
    """Test exporting no shapes writes three empty chunks."""
    path = tmp_path / "shapes.bin"
    export_shapes(path, {}, {}, {})

    assert read_container(path) == [b"", b"", b""]
    assert path.stat().st_size == 24
