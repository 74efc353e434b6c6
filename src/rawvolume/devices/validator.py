"""
Device path validator.

Decides whether a claimed path string names a raw disk partition node.
"""

from __future__ import annotations

from dataclasses import dataclass

from rawvolume.devices.families import PARTITION_FAMILIES, DeviceFamily
from rawvolume.devices.paths import DEVICE_DIR, clean_path


@dataclass
class ValidationResult:
    """
    Verdict for a single candidate path.

    A path is accepted only when exactly one family matches it.
    """

    path: str
    canonical_path: str
    family: DeviceFamily | None = None
    reason: str | None = None

    @property
    def is_valid(self) -> bool:
        """Check if the path was accepted."""
        return self.family is not None and self.reason is None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "path": self.path,
            "canonical_path": self.canonical_path,
            "is_valid": self.is_valid,
            "family": self.family.name if self.family else None,
            "reason": self.reason,
        }


class DevicePathValidator:
    """
    Validates candidate device paths against the partition families.
    """

    def __init__(self, families: tuple[DeviceFamily, ...] = PARTITION_FAMILIES) -> None:
        self.families = families

    def validate(self, path: str) -> ValidationResult:
        """
        Validate a candidate device path.

        Args:
            path: Path as declared, before canonicalization

        Returns:
            ValidationResult carrying the matched family or the reason
            for rejection
        """
        canonical = clean_path(path)
        result = ValidationResult(path=path, canonical_path=canonical)

        if not canonical.startswith(DEVICE_DIR):
            result.reason = f"{canonical} is not under {DEVICE_DIR}"
            return result

        matched = [family for family in self.families if family.match(canonical)]
        if len(matched) == 1:
            result.family = matched[0]
        elif matched:
            names = ", ".join(family.name for family in matched)
            result.reason = f"{canonical} is ambiguous between {names}"
        else:
            result.reason = self._explain(canonical)

        return result

    def is_partition(self, path: str) -> bool:
        """Check if a path names a raw partition node."""
        return self.validate(path).is_valid

    def _explain(self, path: str) -> str:
        """Describe the rejection using the family whose template fits."""
        for family in self.families:
            if family.pattern.fullmatch(path):
                return f"{path}: {family.bound_violation(path)}"
        return f"{path} is not a supported disk partition"


def validate_device_path(path: str) -> ValidationResult:
    """
    Validate a device path.

    Convenience function for quick validation.

    Args:
        path: Candidate device path

    Returns:
        ValidationResult for the path
    """
    return DevicePathValidator().validate(path)
