"""GTFS checks for the data the exporters depend on."""

import logging

from ute_export.gtfs.models import ValidationReport
from ute_export.gtfs.reader import GTFSReader

logger = logging.getLogger(__name__)


class GTFSValidator:
    """Validate that a GTFS feed can be exported."""

    def __init__(self, reader: GTFSReader) -> None:
        """Initialize validator with GTFS reader."""
        self.reader = reader
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def validate(self) -> ValidationReport:
        """Run all validation checks."""
        logger.info("Validating GTFS data")

        self._validate_stops()
        self._validate_routes()
        self._validate_trips()
        self._validate_shapes()

        valid = len(self.errors) == 0

        stats = {
            "stops": len(self.reader.stops),
            "routes": len(self.reader.routes),
            "trips": len(self.reader.trips),
            "shapes": len(self.reader.shapes),
        }

        report = ValidationReport(
            valid=valid,
            errors=self.errors.copy(),
            warnings=self.warnings.copy(),
            stats=stats,
        )

        if not valid:
            logger.error(f"Validation failed with {len(self.errors)} errors")
        elif self.warnings:
            logger.warning(f"Validation passed with {len(self.warnings)} warnings")
        else:
            logger.info("Validation passed")

        return report

    def _validate_stops(self) -> None:
        """Validate stops have valid coordinates."""
        for stop in self.reader.stops:
            if stop.lat is None or stop.lon is None:
                self.warnings.append(f"Stop {stop.stop_id} has no coordinates")
                continue
            if not (-90 <= stop.lat <= 90):
                self.errors.append(f"Stop {stop.stop_id} has invalid latitude: {stop.lat}")
            if not (-180 <= stop.lon <= 180):
                self.errors.append(f"Stop {stop.stop_id} has invalid longitude: {stop.lon}")

    def _validate_routes(self) -> None:
        if not self.reader.routes:
            self.errors.append("No routes found in GTFS data")

    def _validate_trips(self) -> None:
        """Validate trips reference valid routes and shapes."""
        route_ids = {route.route_id for route in self.reader.routes}

        for trip in self.reader.trips:
            if trip.route_id not in route_ids:
                self.errors.append(
                    f"Trip {trip.trip_id} references non-existent route {trip.route_id}"
                )
            if trip.shape_id is not None and trip.shape_id not in self.reader.shapes:
                self.warnings.append(
                    f"Trip {trip.trip_id} references non-existent shape {trip.shape_id}"
                )

    def _validate_shapes(self) -> None:
        """Validate every shape has a coloured trip and sane points."""
        shape_trips = self.reader.shape_trip_map()
        trip_colours = self.reader.trip_colour_map()

        for shape_id, points in sorted(self.reader.shapes.items()):
            trip_id = shape_trips.get(shape_id)
            if trip_id is None:
                self.errors.append(f"Shape {shape_id} is not used by any trip")
            elif trip_id not in trip_colours:
                self.errors.append(f"Shape {shape_id} has no route colour via trip {trip_id}")

            if len(points) < 2:
                self.warnings.append(f"Shape {shape_id} has fewer than 2 points")

            for lon, lat in points:
                if not (-90 <= lat <= 90) or not (-180 <= lon <= 180):
                    self.errors.append(f"Shape {shape_id} has invalid point: ({lon}, {lat})")
                    break
