"""Public API for ute-export."""

import hashlib
import json
import logging
import platform
from datetime import UTC, datetime
from pathlib import Path

from ute_export.export.shapes import export_shapes
from ute_export.export.transfers import build_stop_points, export_transfers
from ute_export.gtfs.models import (
    ExportConfig,
    Manifest,
    ShapeBuffers,
    TransferBuffers,
    ValidationReport,
)
from ute_export.gtfs.reader import GTFSReader
from ute_export.gtfs.validator import GTFSValidator
from ute_export.output.container import validate_container
from ute_export.output.json import write_json_files
from ute_export.simulation.transfers import load_agent_transfers
from ute_export.version import FORMAT_VERSION, VERSION

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"


def _container_name(stem: str, compression: bool) -> str:
    return f"{stem}.bin.zip" if compression else f"{stem}.bin"


def export(
    gtfs_path: str,
    output_path: str,
    config: ExportConfig | None = None,
) -> Manifest:
    """
    Export route shapes and agent transfers to visualisation containers.

    Args:
        gtfs_path: Path to GTFS directory
        output_path: Path to output directory
        config: Optional export configuration

    Returns:
        Manifest with build metadata
    """
    if config is None:
        config = ExportConfig(gtfs_path=gtfs_path, output_path=output_path)

    logger.info(f"Starting export: {gtfs_path} -> {output_path}")
    start_time = datetime.now(UTC)

    # Read GTFS
    reader = GTFSReader(gtfs_path)
    reader.read_all()

    # Validate
    validator = GTFSValidator(reader)
    validation_report = validator.validate()
    if not validation_report.valid:
        raise ValueError(f"GTFS validation failed with {len(validation_report.errors)} errors")

    output_dir = Path(output_path)
    output_dir.mkdir(parents=True, exist_ok=True)
    files_written: dict[str, str] = {}
    stats = {"stops": len(reader.stops)}

    shape_buffers: ShapeBuffers | None = None
    if config.shapes:
        if reader.has_shapes:
            shapes_path = output_dir / _container_name("shapes", config.compression)
            shape_buffers = export_shapes(
                shapes_path,
                reader.shapes,
                reader.shape_trip_map(),
                reader.trip_colour_map(),
                compress=config.compression,
            )
            files_written[shapes_path.name] = str(shapes_path)
            stats["shapes"] = len(shape_buffers.start_indices)
            stats["shape_points"] = len(shape_buffers.points) // 3
            stats["colours"] = len(shape_buffers.heights)
        else:
            logger.warning("GTFS shapes not loaded, no shape export")

    transfer_buffers: TransferBuffers | None = None
    if config.transfers_path:
        transfers = load_agent_transfers(config.transfers_path)
        stop_points = build_stop_points(reader.stop_network(), reader.stop_locations())
        transfers_path = output_dir / _container_name("transfers", config.compression)
        transfer_buffers = export_transfers(
            transfers_path, stop_points, transfers, compress=config.compression
        )
        files_written[transfers_path.name] = str(transfers_path)
        stats["transfers"] = len(transfers)

    if config.debug_json:
        json_files = write_json_files(output_dir, shape_buffers, transfer_buffers)
        files_written.update(json_files)

    # Compute checksums
    checksums = {}
    for filename, filepath in files_written.items():
        with open(filepath, "rb") as f:
            checksums[filename] = hashlib.sha256(f.read()).hexdigest()

    inputs = {"gtfs_path": gtfs_path}
    if config.transfers_path:
        inputs["transfers_path"] = config.transfers_path

    manifest = Manifest(
        format_version=FORMAT_VERSION,
        tool_version=VERSION,
        created_at_iso=start_time.isoformat(),
        inputs=inputs,
        outputs=checksums,
        stats=stats,
        build={
            "python": platform.python_version(),
            "platform": platform.platform(),
        },
    )

    manifest_path = output_dir / MANIFEST_NAME
    with open(manifest_path, "w", encoding="utf-8") as f:
        json.dump(
            {
                "format_version": manifest.format_version,
                "tool_version": manifest.tool_version,
                "created_at": manifest.created_at_iso,
                "inputs": manifest.inputs,
                "outputs": manifest.outputs,
                "stats": manifest.stats,
                "build": manifest.build,
            },
            f,
            indent=2,
            sort_keys=True,
        )

    logger.info(f"Wrote manifest to {manifest_path}")

    elapsed = (datetime.now(UTC) - start_time).total_seconds()
    logger.info(f"Export completed in {elapsed:.2f}s")

    return manifest


def validate(output_path: str) -> ValidationReport:
    """
    Validate exported containers against their manifest.

    Args:
        output_path: Path to output directory containing the manifest

    Returns:
        ValidationReport with results
    """
    logger.info(f"Validating output: {output_path}")

    output_dir = Path(output_path)
    errors: list[str] = []
    warnings: list[str] = []
    stats: dict[str, int] = {}

    manifest_path = output_dir / MANIFEST_NAME
    if not manifest_path.exists():
        errors.append(f"Required file missing: {MANIFEST_NAME}")
        return ValidationReport(valid=False, errors=errors, warnings=warnings)

    try:
        with open(manifest_path, encoding="utf-8") as f:
            manifest_data = json.load(f)
    except (OSError, ValueError) as e:
        errors.append(f"Manifest validation failed: {e}")
        return ValidationReport(valid=False, errors=errors, warnings=warnings)

    required_manifest_fields = [
        "format_version",
        "tool_version",
        "created_at",
        "outputs",
        "stats",
    ]
    for field in required_manifest_fields:
        if field not in manifest_data:
            warnings.append(f"Manifest missing field: {field}")

    for filename, expected_hash in manifest_data.get("outputs", {}).items():
        filepath = output_dir / filename
        if not filepath.exists():
            errors.append(f"Output file missing: {filename}")
            continue

        with open(filepath, "rb") as f:
            actual_hash = hashlib.sha256(f.read()).hexdigest()
        if actual_hash != expected_hash:
            errors.append(
                f"Checksum mismatch for {filename}: expected {expected_hash}, got {actual_hash}"
            )

        if filename.endswith((".bin", ".bin.zip")):
            try:
                container_stats = validate_container(filepath)
            except ValueError as e:
                errors.append(f"Container validation failed for {filename}: {e}")
                continue
            stats[filename] = container_stats["chunks"]

    valid = len(errors) == 0

    if valid:
        logger.info("Validation passed")
    else:
        logger.error(f"Validation failed with {len(errors)} errors")

    return ValidationReport(valid=valid, errors=errors, warnings=warnings, stats=stats)
