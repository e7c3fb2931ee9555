"""Benchmark tests."""

import pytest

from ute_export.export.shapes import build_shape_buffers
from ute_export.export.transfers import build_transfer_buffers
from ute_export.gtfs.models import AgentTransfer, Color


@pytest.mark.benchmark
def test_bench_shape_buffers(benchmark: object) -> None:
    """Benchmark flattening many shapes."""
    shapes = {f"S{i:04d}": [(float(j), float(i)) for j in range(200)] for i in range(500)}
    shape_trips = {shape_id: f"T{shape_id}" for shape_id in shapes}
    trip_colours = {f"T{shape_id}": Color(i % 7, 0, 0) for i, shape_id in enumerate(shapes)}

    buffers = benchmark(build_shape_buffers, shapes, shape_trips, trip_colours)
    assert len(buffers.heights) == 7


@pytest.mark.benchmark
def test_bench_transfer_buffers(benchmark: object) -> None:
    """Benchmark flattening many agent transfers."""
    stop_points = [(float(i), float(i)) for i in range(100)]
    transfers = [AgentTransfer(i % 100, (i * 7) % 100, i, i + 60) for i in range(50_000)]

    buffers = benchmark(build_transfer_buffers, stop_points, transfers)
    assert len(buffers.start_indices) == 50_000
