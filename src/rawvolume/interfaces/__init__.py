"""
Interfaces.

Slot/plug connection model, the raw-volume interface, the security
specifications it contributes to and the repository assembling them.
"""

from rawvolume.interfaces.base import (
    AttributeNotFoundError,
    ConnectedPlug,
    ConnectedSlot,
    Interface,
    InterfaceError,
    InvalidDevicePathError,
    MissingAttributeError,
    PlugInfo,
    SlotInfo,
    StaticInfo,
)
from rawvolume.interfaces.declarations import (
    DeclarationParseError,
    DeclarationRule,
    parse_base_declaration,
)
from rawvolume.interfaces.raw_volume import (
    RawVolumeInterface,
    apparmor_snippet,
    udev_kernel_rule,
)
from rawvolume.interfaces.registry import (
    BUILTIN_INTERFACES,
    ConnectionArtifacts,
    InterfaceRepository,
    UnknownInterfaceError,
    builtin_interfaces,
)
from rawvolume.interfaces.specs import AppArmorSpecification, UDevSpecification

__all__ = [
    # Model
    "AttributeNotFoundError",
    "ConnectedPlug",
    "ConnectedSlot",
    "Interface",
    "InterfaceError",
    "InvalidDevicePathError",
    "MissingAttributeError",
    "PlugInfo",
    "SlotInfo",
    "StaticInfo",
    # Declarations
    "DeclarationParseError",
    "DeclarationRule",
    "parse_base_declaration",
    # raw-volume
    "RawVolumeInterface",
    "apparmor_snippet",
    "udev_kernel_rule",
    # Repository
    "BUILTIN_INTERFACES",
    "ConnectionArtifacts",
    "InterfaceRepository",
    "UnknownInterfaceError",
    "builtin_interfaces",
    # Specifications
    "AppArmorSpecification",
    "UDevSpecification",
]
