"""Florist catalog services."""

from .discovery import discover_florists, write_florists_file
from .service import (
    append_note,
    compute_florist_stats,
    create_florist,
    delete_florist,
    import_florists,
    list_florists,
    set_location,
    update_florist,
    update_notes,
)

__all__ = [
    "append_note",
    "compute_florist_stats",
    "create_florist",
    "delete_florist",
    "discover_florists",
    "import_florists",
    "list_florists",
    "set_location",
    "update_florist",
    "update_notes",
    "write_florists_file",
]
