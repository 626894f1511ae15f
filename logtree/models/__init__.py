"""logtree data models — levels, records and sink configuration (Pydantic v2, frozen)."""

from logtree.models.levels import Level, LevelFilter
from logtree.models.records import (
    TARGET_SEPARATOR,
    Location,
    Metadata,
    Record,
    module_target,
)
from logtree.models.rotation import RotatingFileConfig

__all__ = [
    # levels
    "Level",
    "LevelFilter",
    # records
    "TARGET_SEPARATOR",
    "Location",
    "Metadata",
    "Record",
    "module_target",
    # sink configuration
    "RotatingFileConfig",
]
