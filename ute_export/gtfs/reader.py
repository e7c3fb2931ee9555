"""GTFS reader for the geometry needed by the exporters."""

import csv
import logging
from pathlib import Path

from ute_export.gtfs.models import Color, Route, ShapePoint, Stop, Trip
from ute_export.simulation.transfers import StopNetwork

logger = logging.getLogger(__name__)

DEFAULT_ROUTE_COLOR = "FFFFFF"


def _optional_float(value: str | None) -> float | None:
    """Parse a float column that GTFS allows to be blank."""
    if value is None or not value.strip():
        return None
    return float(value)


class GTFSReader:
    """Read stops, routes, trips and shapes from a GTFS directory."""

    def __init__(self, gtfs_path: str) -> None:
        """Initialize reader with GTFS directory path."""
        self.gtfs_path = Path(gtfs_path)
        if not self.gtfs_path.is_dir():
            raise ValueError(f"GTFS path not found or not a directory: {gtfs_path}")

        self.stops: list[Stop] = []
        self.routes: list[Route] = []
        self.trips: list[Trip] = []
        self.shapes: dict[str, list[tuple[float, float]]] = {}

    @property
    def has_shapes(self) -> bool:
        return bool(self.shapes)

    def read_all(self) -> None:
        """Read all GTFS files."""
        logger.info(f"Reading GTFS data from {self.gtfs_path}")
        self.read_stops()
        self.read_routes()
        self.read_trips()
        self.read_shapes()
        logger.info(
            f"Loaded {len(self.stops)} stops, {len(self.routes)} routes, "
            f"{len(self.trips)} trips, {len(self.shapes)} shapes"
        )

    def read_stops(self) -> None:
        """Read stops.txt sorted by stop_id, which defines the stop index."""
        file_path = self.gtfs_path / "stops.txt"
        if not file_path.exists():
            raise FileNotFoundError(f"Required file not found: {file_path}")

        stops_raw: list[Stop] = []
        with open(file_path, encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            for row in reader:
                stop = Stop(
                    stop_id=row["stop_id"],
                    name=row.get("stop_name", ""),
                    lat=_optional_float(row.get("stop_lat")),
                    lon=_optional_float(row.get("stop_lon")),
                )
                stops_raw.append(stop)

        stops_raw.sort(key=lambda s: s.stop_id)
        self.stops = stops_raw

    def read_routes(self) -> None:
        """Read routes.txt including route_color."""
        file_path = self.gtfs_path / "routes.txt"
        if not file_path.exists():
            raise FileNotFoundError(f"Required file not found: {file_path}")

        with open(file_path, encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            for row in reader:
                color_hex = (row.get("route_color") or "").strip()
                if not color_hex:
                    logger.warning(f"Route {row['route_id']} has no colour, using white")
                    color_hex = DEFAULT_ROUTE_COLOR

                route = Route(
                    route_id=row["route_id"],
                    route_short_name=row.get("route_short_name", ""),
                    route_long_name=row.get("route_long_name", ""),
                    route_type=int(row["route_type"]),
                    color=Color.from_hex(color_hex),
                )
                self.routes.append(route)

        self.routes.sort(key=lambda r: r.route_id)

    def read_trips(self) -> None:
        """Read trips.txt."""
        file_path = self.gtfs_path / "trips.txt"
        if not file_path.exists():
            raise FileNotFoundError(f"Required file not found: {file_path}")

        with open(file_path, encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            for row in reader:
                trip = Trip(
                    trip_id=row["trip_id"],
                    route_id=row["route_id"],
                    service_id=row["service_id"],
                    shape_id=row.get("shape_id") or None,
                )
                self.trips.append(trip)

        # Sort by trip_id so the representative trip of a shape is stable
        self.trips.sort(key=lambda t: t.trip_id)

    def read_shapes(self) -> None:
        """Read shapes.txt if present."""
        file_path = self.gtfs_path / "shapes.txt"
        if not file_path.exists():
            logger.warning("shapes.txt not found, no shapes loaded")
            return

        points: list[ShapePoint] = []
        with open(file_path, encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            for row in reader:
                point = ShapePoint(
                    shape_id=row["shape_id"],
                    lat=float(row["shape_pt_lat"]),
                    lon=float(row["shape_pt_lon"]),
                    sequence=int(row["shape_pt_sequence"]),
                )
                points.append(point)

        points.sort(key=lambda p: (p.shape_id, p.sequence))
        for point in points:
            self.shapes.setdefault(point.shape_id, []).append((point.lon, point.lat))

    def shape_trip_map(self) -> dict[str, str]:
        """Map each shape to the first trip (by trip_id) that uses it."""
        shape_trips: dict[str, str] = {}
        for trip in self.trips:
            if trip.shape_id is not None and trip.shape_id not in shape_trips:
                shape_trips[trip.shape_id] = trip.trip_id
        return shape_trips

    def trip_colour_map(self) -> dict[str, Color]:
        """Map each trip to its route's colour, skipping unknown routes."""
        route_colours = {route.route_id: route.color for route in self.routes}
        return {
            trip.trip_id: route_colours[trip.route_id]
            for trip in self.trips
            if trip.route_id in route_colours
        }

    def stop_locations(self) -> dict[str, tuple[float, float]]:
        """Map stop_id to (lon, lat) for stops that have coordinates."""
        return {
            stop.stop_id: (stop.lon, stop.lat)
            for stop in self.stops
            if stop.lon is not None and stop.lat is not None
        }

    def stop_network(self) -> StopNetwork:
        """Stop index space in sorted stop_id order."""
        return StopNetwork([stop.stop_id for stop in self.stops])
