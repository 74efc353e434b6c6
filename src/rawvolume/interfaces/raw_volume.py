"""
raw-volume interface.

Allows read/write access to a single disk partition. The slot names the
partition node in its ``path`` attribute; only disk partitions are
accepted, never whole disks, loop, RAM, CD-ROM, generic SCSI, network,
tape or RAID devices.
"""

from __future__ import annotations

import logging

from rawvolume.devices.paths import clean_path, kernel_name
from rawvolume.devices.validator import DevicePathValidator
from rawvolume.interfaces.base import (
    AttributeNotFoundError,
    ConnectedPlug,
    ConnectedSlot,
    Interface,
    InvalidDevicePathError,
    MissingAttributeError,
    PlugInfo,
    SlotInfo,
    StaticInfo,
)
from rawvolume.interfaces.specs import AppArmorSpecification, UDevSpecification


logger = logging.getLogger(__name__)


RAW_VOLUME_SUMMARY = "allows read/write access to specific disk partition"

RAW_VOLUME_BASE_DECLARATION_PLUGS = """
  raw-volume:
    allow-installation: false
    deny-auto-connection: true
"""

RAW_VOLUME_BASE_DECLARATION_SLOTS = """
  raw-volume:
    allow-installation:
      slot-snap-type:
        - core
        - gadget
    deny-auto-connection: true
"""

RAW_VOLUME_CONNECTED_PLUG_APPARMOR = """
# Description: can access disk partition read/write
{path} rw,

# needed for write access
capability sys_admin,

# allow read access to sysfs and udev for block devices
@{{PROC}}/devices r,
/run/udev/data/b[0-9]*:[0-9]* r,
/sys/block/ r,
/sys/devices/**/block/** r,
"""

PATH_ATTR = "path"


def apparmor_snippet(path: str) -> str:
    """Render the AppArmor rules granting access to a partition node."""
    return RAW_VOLUME_CONNECTED_PLUG_APPARMOR.format(path=clean_path(path))


def udev_kernel_rule(path: str) -> str:
    """Render the udev match expression for a partition node."""
    return f'KERNEL=="{kernel_name(clean_path(path))}"'


class RawVolumeInterface(Interface):
    """
    Interface granting raw access to one disk partition.
    """

    name = "raw-volume"

    def __init__(self, validator: DevicePathValidator | None = None) -> None:
        self.validator = validator or DevicePathValidator()

    def static_info(self) -> StaticInfo:
        return StaticInfo(
            summary=RAW_VOLUME_SUMMARY,
            base_declaration_plugs=RAW_VOLUME_BASE_DECLARATION_PLUGS,
            base_declaration_slots=RAW_VOLUME_BASE_DECLARATION_SLOTS,
        )

    def before_prepare_slot(self, slot: SlotInfo) -> None:
        """
        Check validity of the declared slot.

        Raises:
            MissingAttributeError: If the path attribute is absent, empty
                or not a string
            InvalidDevicePathError: If the path is not a disk partition
        """
        path = slot.attrs.get(PATH_ATTR)
        if not isinstance(path, str) or not path:
            raise MissingAttributeError(
                self.name, f"{self.name} slot must have a path attribute"
            )

        result = self.validator.validate(path)
        if not result.is_valid:
            logger.debug("Rejected slot %s: %s", slot, result.reason)
            raise InvalidDevicePathError(
                self.name, f"{self.name} path attribute must be a valid device node"
            )

    def apparmor_connected_plug(
        self,
        spec: AppArmorSpecification,
        plug: ConnectedPlug,
        slot: ConnectedSlot,
    ) -> None:
        path = self._slot_path(slot)
        if path is None:
            return
        spec.add_snippet(apparmor_snippet(path))

    def udev_connected_plug(
        self,
        spec: UDevSpecification,
        plug: ConnectedPlug,
        slot: ConnectedSlot,
    ) -> None:
        path = self._slot_path(slot)
        if path is None:
            return
        spec.tag_device(udev_kernel_rule(path))

    def auto_connect(self, plug: PlugInfo, slot: SlotInfo) -> bool:
        # Allow what is allowed in the declarations
        return True

    def _slot_path(self, slot: ConnectedSlot) -> str | None:
        """Read the slot path, or None if it is missing or not a partition."""
        try:
            path = slot.attr(PATH_ATTR)
        except AttributeNotFoundError:
            path = None
        if not path:
            logger.debug("Slot %s has no usable path, contributing nothing", slot)
            return None
        result = self.validator.validate(path)
        if not result.is_valid:
            logger.debug("Slot %s path rejected, contributing nothing: %s", slot, result.reason)
            return None
        return result.canonical_path
