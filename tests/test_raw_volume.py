"""
Tests for the raw-volume interface.
"""

from __future__ import annotations

import logging

import pytest

from rawvolume.devices.families import PARTITION_FAMILIES
from rawvolume.interfaces.base import (
    ConnectedPlug,
    ConnectedSlot,
    InterfaceError,
    InvalidDevicePathError,
    MissingAttributeError,
    PlugInfo,
    SlotInfo,
)
from rawvolume.interfaces.raw_volume import (
    RawVolumeInterface,
    apparmor_snippet,
    udev_kernel_rule,
)
from rawvolume.interfaces.specs import AppArmorSpecification, UDevSpecification


EXPECTED_SDA1_APPARMOR = """
# Description: can access disk partition read/write
/dev/sda1 rw,

# needed for write access
capability sys_admin,

# allow read access to sysfs and udev for block devices
@{PROC}/devices r,
/run/udev/data/b[0-9]*:[0-9]* r,
/sys/block/ r,
/sys/devices/**/block/** r,
"""


def make_slot(path: object = "/dev/sda1", **attrs: object) -> SlotInfo:
    """Build a raw-volume slot with the given path attribute."""
    if path is not None:
        attrs["path"] = path
    return SlotInfo(
        snap="pc-gadget",
        name="partition",
        interface="raw-volume",
        attrs=attrs,
        snap_type="gadget",
    )


# =============================================================================
# Test static info
# =============================================================================


class TestStaticInfo:
    """Tests for interface metadata."""

    def test_name(self, iface: RawVolumeInterface) -> None:
        """Test interface name."""
        assert iface.name == "raw-volume"
        assert str(iface) == "raw-volume"

    def test_summary(self, iface: RawVolumeInterface) -> None:
        """Test summary and declarations."""
        info = iface.static_info()
        assert info.summary == "allows read/write access to specific disk partition"
        assert "deny-auto-connection: true" in info.base_declaration_plugs
        assert "- gadget" in info.base_declaration_slots

    def test_auto_connect(self, iface: RawVolumeInterface, consumer_plug: PlugInfo) -> None:
        """Test oracle defers to declarations."""
        assert iface.auto_connect(consumer_plug, make_slot()) is True


# =============================================================================
# Test slot preparation
# =============================================================================


class TestBeforePrepareSlot:
    """Tests for slot validation."""

    @pytest.mark.parametrize(
        "path",
        ["/dev/hda1", "/dev/hdt63", "/dev/sda1", "/dev/sdiv15", "/dev/i2o/hddx15",
         "/dev/mmcblk0p1", "/dev/mmcblk999p63", "/dev/nvme0p1", "/dev/nvme99n63p63",
         "/dev/vdz63", "/dev/./sda1"],
    )
    def test_valid_paths(self, iface: RawVolumeInterface, path: str) -> None:
        """Test valid partitions pass."""
        slot = make_slot(path)
        iface.before_prepare_slot(slot)
        assert slot.attrs["path"] == path

    @pytest.mark.parametrize("path", [None, "", 42, ["/dev/sda1"]])
    def test_missing_path(self, iface: RawVolumeInterface, path: object) -> None:
        """Test absent, empty or non-string path."""
        with pytest.raises(MissingAttributeError) as exc_info:
            iface.before_prepare_slot(make_slot(path))
        assert str(exc_info.value) == "raw-volume slot must have a path attribute"
        assert exc_info.value.interface == "raw-volume"

    @pytest.mark.parametrize(
        "path",
        ["/etc/passwd", "/dev/loop0", "/dev/sr0", "/dev/sg0", "/dev/sda",
         "/dev/hda", "/dev/sda0", "/dev/hda0", "/dev/nvme0n1p0", "/dev/sda16",
         "/dev/hda64", "/dev/sdiw1", "/dev/nvme0n1"],
    )
    def test_invalid_paths(self, iface: RawVolumeInterface, path: str) -> None:
        """Test paths outside the grammar."""
        with pytest.raises(InvalidDevicePathError) as exc_info:
            iface.before_prepare_slot(make_slot(path))
        assert str(exc_info.value) == "raw-volume path attribute must be a valid device node"

    def test_error_categories(self) -> None:
        """Test both errors share a base class but differ by type."""
        assert issubclass(MissingAttributeError, InterfaceError)
        assert issubclass(InvalidDevicePathError, InterfaceError)
        assert not issubclass(MissingAttributeError, InvalidDevicePathError)


# =============================================================================
# Test snippet rendering
# =============================================================================


class TestSnippets:
    """Tests for the rendered rules."""

    def test_apparmor_exact(self) -> None:
        """Test the exact AppArmor text."""
        assert apparmor_snippet("/dev/sda1") == EXPECTED_SDA1_APPARMOR

    def test_apparmor_canonical(self) -> None:
        """Test the snippet uses the cleaned path."""
        assert apparmor_snippet("/dev/./sda1") == EXPECTED_SDA1_APPARMOR

    def test_udev_rule(self) -> None:
        """Test the udev match expression."""
        assert udev_kernel_rule("/dev/mmcblk0p1") == 'KERNEL=="mmcblk0p1"'
        assert udev_kernel_rule("/dev//i2o/./hda1") == 'KERNEL=="i2o/hda1"'

    def test_deterministic(self) -> None:
        """Test repeated rendering is byte-identical."""
        assert apparmor_snippet("/dev/nvme0n1p1") == apparmor_snippet("/dev/nvme0n1p1")
        assert udev_kernel_rule("/dev/vda1") == udev_kernel_rule("/dev/vda1")

    def test_every_family_in_snippet(self) -> None:
        """Test every in-range path is granted rw."""
        for family in PARTITION_FAMILIES:
            for path in family.device_paths():
                assert f"\n{path} rw,\n" in apparmor_snippet(path), path


# =============================================================================
# Test connected plug hooks
# =============================================================================


class TestConnectedPlug:
    """Tests for the connection-time hooks."""

    @pytest.fixture
    def plug(self, consumer_plug: PlugInfo) -> ConnectedPlug:
        return ConnectedPlug(consumer_plug)

    def test_apparmor(self, iface: RawVolumeInterface, plug: ConnectedPlug) -> None:
        """Test AppArmor snippet is added."""
        spec = AppArmorSpecification()
        iface.apparmor_connected_plug(spec, plug, ConnectedSlot(make_slot("/dev/./sda1")))
        assert spec.snippets == [EXPECTED_SDA1_APPARMOR]

    def test_udev(self, iface: RawVolumeInterface, plug: ConnectedPlug) -> None:
        """Test device is tagged by kernel name."""
        spec = UDevSpecification(security_tags=["snap_disk_tool_app"], interface="raw-volume")
        iface.udev_connected_plug(spec, plug, ConnectedSlot(make_slot("/dev/mmcblk0p1")))
        assert spec.tagged_devices == ['KERNEL=="mmcblk0p1"']
        assert spec.snippets() == [
            '# raw-volume\nKERNEL=="mmcblk0p1", TAG+="snap_disk_tool_app"'
        ]

    def test_dynamic_attr_valid_path(self, iface: RawVolumeInterface, plug: ConnectedPlug) -> None:
        """Test a valid dynamic path overrides the declared one."""
        spec = UDevSpecification()
        slot = ConnectedSlot(make_slot("/dev/sda1"), {"path": "/dev/./sdb2"})
        iface.udev_connected_plug(spec, plug, slot)
        assert spec.tagged_devices == ['KERNEL=="sdb2"']

    @pytest.mark.parametrize("path", ["/etc/shadow", '/dev/sda", RUN+="/bin/sh', "/dev/sda"])
    def test_dynamic_attr_invalid_path(
        self,
        iface: RawVolumeInterface,
        plug: ConnectedPlug,
        path: str,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test an invalid dynamic path contributes nothing."""
        caplog.set_level(logging.DEBUG, logger="rawvolume.interfaces.raw_volume")
        slot = ConnectedSlot(make_slot("/dev/sda1"), {"path": path})

        apparmor = AppArmorSpecification()
        udev = UDevSpecification(security_tags=["snap_disk_tool_app"])
        iface.apparmor_connected_plug(apparmor, plug, slot)
        iface.udev_connected_plug(udev, plug, slot)

        assert apparmor.snippets == []
        assert udev.tagged_devices == []
        assert "path rejected" in caplog.text

    @pytest.mark.parametrize("path", [None, 7, ""])
    def test_missing_path_contributes_nothing(
        self,
        iface: RawVolumeInterface,
        plug: ConnectedPlug,
        path: object,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test unreadable path is skipped without error."""
        caplog.set_level(logging.DEBUG, logger="rawvolume.interfaces.raw_volume")
        slot = ConnectedSlot(make_slot(path))

        apparmor = AppArmorSpecification()
        udev = UDevSpecification(security_tags=["snap_disk_tool_app"])
        iface.apparmor_connected_plug(apparmor, plug, slot)
        iface.udev_connected_plug(udev, plug, slot)

        assert apparmor.snippets == []
        assert udev.tagged_devices == []
        assert "contributing nothing" in caplog.text
