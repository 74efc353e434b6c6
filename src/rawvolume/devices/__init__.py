"""
Disk partition device paths.

Naming families for raw partition nodes, lexical path cleaning and the
validator combining both.
"""

from rawvolume.devices.families import (
    PARTITION_FAMILIES,
    DeviceFamily,
    FamilyKind,
    NumberRange,
    get_family,
    index_to_letters,
    letters_to_index,
    match_families,
)
from rawvolume.devices.paths import DEVICE_DIR, clean_path, kernel_name
from rawvolume.devices.validator import (
    DevicePathValidator,
    ValidationResult,
    validate_device_path,
)

__all__ = [
    # Families
    "PARTITION_FAMILIES",
    "DeviceFamily",
    "FamilyKind",
    "NumberRange",
    "get_family",
    "index_to_letters",
    "letters_to_index",
    "match_families",
    # Paths
    "DEVICE_DIR",
    "clean_path",
    "kernel_name",
    # Validator
    "DevicePathValidator",
    "ValidationResult",
    "validate_device_path",
]
