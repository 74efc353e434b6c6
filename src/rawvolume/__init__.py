"""
Raw volume guard - disk partition access for confined applications.

Validates that a requested device path names a real disk partition node
and renders the AppArmor and udev rules granting access to it.
"""

__version__ = "0.1.0"
__author__ = "Raw Volume Guard Contributors"

from rawvolume.config import RawVolumeConfig, load_config

__all__ = ["RawVolumeConfig", "load_config", "__version__"]
