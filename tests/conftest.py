"""
Pytest configuration and shared fixtures for raw-volume tests.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
import yaml

from rawvolume.interfaces.base import PlugInfo, SlotInfo
from rawvolume.interfaces.raw_volume import RawVolumeInterface
from rawvolume.interfaces.registry import InterfaceRepository


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample configuration file."""
    config_path = temp_dir / "raw-volume.yaml"
    config_data = {
        "logging": {
            "level": "debug",
        },
        "udev": {
            "security_tags": ["snap_consumer_app"],
        },
    }
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def iface() -> RawVolumeInterface:
    """Create a raw-volume interface."""
    return RawVolumeInterface()


@pytest.fixture
def repository(iface: RawVolumeInterface) -> InterfaceRepository:
    """Create a repository serving the raw-volume interface."""
    return InterfaceRepository([iface])


@pytest.fixture
def partition_slot() -> SlotInfo:
    """Gadget slot exposing a SCSI partition."""
    return SlotInfo(
        snap="pc-gadget",
        name="data-partition",
        interface="raw-volume",
        attrs={"path": "/dev/sda1"},
        snap_type="gadget",
    )


@pytest.fixture
def consumer_plug() -> PlugInfo:
    """Plug of an application wanting raw partition access."""
    return PlugInfo(
        snap="disk-tool",
        name="raw-volume",
        interface="raw-volume",
        apps=["app"],
    )
