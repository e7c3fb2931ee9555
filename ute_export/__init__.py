"""UTE Export - Write transit shapes and agent transfers to aligned binary containers."""

from ute_export.api import export, validate
from ute_export.export.shapes import export_shapes
from ute_export.export.transfers import export_transfers
from ute_export.output.container import read_container, write_container
from ute_export.version import FORMAT_VERSION, VERSION

__version__ = VERSION
__all__ = [
    "FORMAT_VERSION",
    "VERSION",
    "export",
    "export_shapes",
    "export_transfers",
    "read_container",
    "validate",
    "write_container",
]
