"""
Disk partition naming families.

Each family describes one kernel naming scheme for disk partition nodes
(see the kernel's admin-guide/devices.txt) together with the numeric
limits the kernel actually assigns. A path is a raw partition node only
if it follows a family's template AND every number in it is within that
family's bounds.

Deliberately not covered: Acorn MFM (mfma-mfmb), ACSI (ada-adp),
parallel port IDE/ATAPI (pda-pdd, pf0-3) and USB block devices (uba-ubz).
Loop, RAM, CD-ROM, generic SCSI, network, tape and RAID nodes are never
partitions and have no family.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator
from enum import Enum

from rawvolume.devices.paths import DEVICE_DIR


class FamilyKind(Enum):
    """Supported partition naming families."""

    IDE = "ide"
    SCSI = "scsi"
    I2O = "i2o"
    MMC = "mmc"
    NVME = "nvme"
    VIRTIO = "virtio"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class NumberRange:
    """Inclusive numeric range."""

    low: int
    high: int

    def contains(self, value: int) -> bool:
        """Check if value lies within the range."""
        return self.low <= value <= self.high

    def __str__(self) -> str:
        return f"{self.low}-{self.high}"


# Decimal number without leading zeros. Length is capped so absurd inputs
# fail the template instead of reaching int().
_NUMBER = r"0|[1-9][0-9]{0,5}"

# One or two disk letters; the per-family bound decides how far they go.
_LETTERS = r"[a-z]{1,2}"


def letters_to_index(letters: str) -> int:
    """
    Convert kernel disk letters to a zero-based disk index.

    The kernel counts in bijective base 26: ``a`` is 0, ``z`` is 25,
    ``aa`` is 26 and ``iv`` is 255.
    """
    if not letters or not letters.isascii() or not letters.islower() or not letters.isalpha():
        raise ValueError(f"Invalid disk letters: {letters!r}")
    index = 0
    for char in letters:
        index = index * 26 + (ord(char) - ord("a") + 1)
    return index - 1


def index_to_letters(index: int) -> str:
    """Convert a zero-based disk index back to kernel disk letters."""
    if index < 0:
        raise ValueError(f"Disk index must be non-negative: {index}")
    letters = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("a") + remainder) + letters
    return letters


@dataclass(frozen=True)
class DeviceFamily(ABC):
    """
    A partition naming family.

    Subclasses decide how the disk identifier is read (letters or a
    number) and add any extra numbered segment. All checks run on the
    full path, anchored at both ends.
    """

    kind: FamilyKind
    description: str
    template: str
    pattern: re.Pattern
    disks: NumberRange
    partitions: NumberRange

    @property
    def name(self) -> str:
        return self.kind.value

    def disk_index(self, disk: str) -> int:
        """Read the disk identifier segment as a number."""
        return int(disk)

    def disk_label(self, index: int) -> str:
        """Render a disk index the way the kernel names it."""
        return str(index)

    def bound_violation(self, path: str) -> str | None:
        """
        Explain why a path is not a partition of this family.

        Args:
            path: Canonical device path

        Returns:
            Description of the failed constraint, or None if the path
            is a valid partition node of this family.
        """
        match = self.pattern.fullmatch(path)
        if match is None:
            return f"does not follow {self.template}"

        disk = self.disk_index(match.group("disk"))
        if not self.disks.contains(disk):
            return f"disk {match.group('disk')} is outside {self._disk_bounds()}"

        partition = int(match.group("part"))
        if partition == 0:
            return "partition 0 refers to the whole disk"
        if not self.partitions.contains(partition):
            return f"partition {partition} is outside {self.partitions}"

        return self._extra_violation(match)

    def match(self, path: str) -> bool:
        """Check if a canonical path is a partition node of this family."""
        return self.bound_violation(path) is None

    def device_path(self, disk: int, partition: int) -> str:
        """Build the device path for a disk index and partition number."""
        return self.template_prefix() + f"{self.disk_label(disk)}{partition}"

    def device_paths(self) -> Iterator[str]:
        """Yield every partition path this family accepts."""
        for disk in range(self.disks.low, self.disks.high + 1):
            for partition in range(self.partitions.low, self.partitions.high + 1):
                yield self.device_path(disk, partition)

    @abstractmethod
    def template_prefix(self) -> str:
        """Fixed text preceding the disk identifier."""

    def _disk_bounds(self) -> str:
        return str(self.disks)

    def _extra_violation(self, match: re.Match) -> str | None:
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "template": self.template,
            "disks": self._disk_bounds(),
            "partitions": str(self.partitions),
        }


@dataclass(frozen=True)
class LetterDiskFamily(DeviceFamily):
    """Family whose disks are named by letters (sda, hdb, vdc...)."""

    prefix: str = ""

    def disk_index(self, disk: str) -> int:
        return letters_to_index(disk)

    def disk_label(self, index: int) -> str:
        return index_to_letters(index)

    def template_prefix(self) -> str:
        return DEVICE_DIR + self.prefix

    def _disk_bounds(self) -> str:
        return f"{index_to_letters(self.disks.low)}-{index_to_letters(self.disks.high)}"


@dataclass(frozen=True)
class NumberedDiskFamily(DeviceFamily):
    """Family with numbered controllers and a ``p`` partition separator."""

    prefix: str = ""

    def device_path(self, disk: int, partition: int) -> str:
        return f"{self.template_prefix()}{disk}p{partition}"

    def template_prefix(self) -> str:
        return DEVICE_DIR + self.prefix


@dataclass(frozen=True)
class NvmeFamily(NumberedDiskFamily):
    """NVMe controllers with an optional namespace segment."""

    namespaces: NumberRange = NumberRange(1, 63)

    def device_path(self, disk: int, partition: int, namespace: int | None = None) -> str:
        if namespace is None:
            return super().device_path(disk, partition)
        return f"{self.template_prefix()}{disk}n{namespace}p{partition}"

    def device_paths(self) -> Iterator[str]:
        yield from super().device_paths()
        for disk in range(self.disks.low, self.disks.high + 1):
            for namespace in range(self.namespaces.low, self.namespaces.high + 1):
                for partition in range(self.partitions.low, self.partitions.high + 1):
                    yield self.device_path(disk, partition, namespace)

    def _extra_violation(self, match: re.Match) -> str | None:
        namespace = match.group("namespace")
        if namespace is not None and not self.namespaces.contains(int(namespace)):
            return f"namespace {namespace} is outside {self.namespaces}"
        return None

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["namespaces"] = str(self.namespaces)
        return data


def _compile(body: str) -> re.Pattern:
    return re.compile(re.escape(DEVICE_DIR) + body)


# IDE, MFM, RLL hda-hdt, 1-63 partitions
IDE = LetterDiskFamily(
    kind=FamilyKind.IDE,
    description="IDE, MFM and RLL disks",
    template="/dev/hd<a-t><1-63>",
    pattern=_compile(rf"hd(?P<disk>{_LETTERS})(?P<part>{_NUMBER})"),
    disks=NumberRange(0, letters_to_index("t")),
    partitions=NumberRange(1, 63),
    prefix="hd",
)

# SCSI sda-sdiv, 1-15 partitions
SCSI = LetterDiskFamily(
    kind=FamilyKind.SCSI,
    description="SCSI disks",
    template="/dev/sd<a-iv><1-15>",
    pattern=_compile(rf"sd(?P<disk>{_LETTERS})(?P<part>{_NUMBER})"),
    disks=NumberRange(0, letters_to_index("iv")),
    partitions=NumberRange(1, 15),
    prefix="sd",
)

# I2O i2o/hda-hddx, 1-15 partitions
I2O = LetterDiskFamily(
    kind=FamilyKind.I2O,
    description="I2O block devices",
    template="/dev/i2o/hd<a-dx><1-15>",
    pattern=_compile(rf"i2o/hd(?P<disk>{_LETTERS})(?P<part>{_NUMBER})"),
    disks=NumberRange(0, letters_to_index("dx")),
    partitions=NumberRange(1, 15),
    prefix="i2o/hd",
)

# MMC mmcblk0-999, 1-63 partitions. The partition count is a kernel
# command line setting; Ubuntu uses 32.
MMC = NumberedDiskFamily(
    kind=FamilyKind.MMC,
    description="MMC/SD cards and eMMC",
    template="/dev/mmcblk<0-999>p<1-63>",
    pattern=_compile(rf"mmcblk(?P<disk>{_NUMBER})p(?P<part>{_NUMBER})"),
    disks=NumberRange(0, 999),
    partitions=NumberRange(1, 63),
    prefix="mmcblk",
)

# NVMe nvme0-99, optional namespace 1-63, 1-63 partitions
NVME = NvmeFamily(
    kind=FamilyKind.NVME,
    description="NVMe namespaces",
    template="/dev/nvme<0-99>[n<1-63>]p<1-63>",
    pattern=_compile(
        rf"nvme(?P<disk>{_NUMBER})(?:n(?P<namespace>{_NUMBER}))?p(?P<part>{_NUMBER})"
    ),
    disks=NumberRange(0, 99),
    partitions=NumberRange(1, 63),
    prefix="nvme",
    namespaces=NumberRange(1, 63),
)

# virtio vda-vdz, 1-63 partitions
VIRTIO = LetterDiskFamily(
    kind=FamilyKind.VIRTIO,
    description="virtio block devices",
    template="/dev/vd<a-z><1-63>",
    pattern=_compile(rf"vd(?P<disk>{_LETTERS})(?P<part>{_NUMBER})"),
    disks=NumberRange(0, letters_to_index("z")),
    partitions=NumberRange(1, 63),
    prefix="vd",
)

PARTITION_FAMILIES: tuple[DeviceFamily, ...] = (IDE, SCSI, I2O, MMC, NVME, VIRTIO)


def get_family(kind: FamilyKind | str) -> DeviceFamily:
    """Look up a family by kind or name."""
    kind = FamilyKind(kind)
    for family in PARTITION_FAMILIES:
        if family.kind is kind:
            return family
    raise KeyError(kind)


def match_families(path: str) -> list[DeviceFamily]:
    """Get every family that accepts a canonical path."""
    return [family for family in PARTITION_FAMILIES if family.match(path)]
