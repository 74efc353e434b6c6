"""
Interface connection model.

Slots offer a capability, plugs consume it, and a connection pairs one
of each. Interfaces validate slots when they are prepared and contribute
security rules for every connection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from rawvolume.interfaces.specs import AppArmorSpecification, UDevSpecification


class InterfaceError(Exception):
    """Error raised by an interface."""

    def __init__(self, interface: str, message: str) -> None:
        super().__init__(message)
        self.interface = interface


class MissingAttributeError(InterfaceError):
    """Slot lacks a required attribute."""

    pass


class InvalidDevicePathError(InterfaceError):
    """Slot path attribute is not an allowed device node."""

    pass


class AttributeNotFoundError(KeyError):
    """Connected slot or plug has no usable value for an attribute."""

    pass


@dataclass
class StaticInfo:
    """Static description of an interface."""

    summary: str
    base_declaration_plugs: str = ""
    base_declaration_slots: str = ""


@dataclass
class SlotInfo:
    """Slot as declared by a snap."""

    snap: str
    name: str
    interface: str
    attrs: dict[str, Any] = field(default_factory=dict)
    snap_type: str = "app"

    def __str__(self) -> str:
        return f"{self.snap}:{self.name}"


@dataclass
class PlugInfo:
    """Plug as declared by a snap."""

    snap: str
    name: str
    interface: str
    attrs: dict[str, Any] = field(default_factory=dict)
    apps: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.snap}:{self.name}"

    @property
    def security_tags(self) -> list[str]:
        """Security tags of the apps bound to this plug."""
        return [f"snap_{self.snap}_{app}".replace("-", "_") for app in self.apps]


class _ConnectedEnd:
    """Attribute access shared by both ends of a connection."""

    def __init__(
        self,
        static_attrs: dict[str, Any],
        dynamic_attrs: dict[str, Any] | None = None,
    ) -> None:
        self._static_attrs = dict(static_attrs)
        self._dynamic_attrs = dict(dynamic_attrs or {})

    def attr(self, key: str, expected_type: type = str) -> Any:
        """
        Get an attribute value.

        Dynamic attributes set at connection time take precedence over
        the static ones from the snap declaration.

        Raises:
            AttributeNotFoundError: If the attribute is absent or does
                not have the expected type
        """
        if key in self._dynamic_attrs:
            value = self._dynamic_attrs[key]
        elif key in self._static_attrs:
            value = self._static_attrs[key]
        else:
            raise AttributeNotFoundError(f"{self} has no attribute {key!r}")

        if not isinstance(value, expected_type):
            raise AttributeNotFoundError(
                f"{self} attribute {key!r} is {type(value).__name__}, "
                f"expected {expected_type.__name__}"
            )
        return value


class ConnectedSlot(_ConnectedEnd):
    """Slot side of a connection."""

    def __init__(
        self,
        info: SlotInfo,
        dynamic_attrs: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(info.attrs, dynamic_attrs)
        self.info = info

    def __str__(self) -> str:
        return str(self.info)


class ConnectedPlug(_ConnectedEnd):
    """Plug side of a connection."""

    def __init__(
        self,
        info: PlugInfo,
        dynamic_attrs: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(info.attrs, dynamic_attrs)
        self.info = info

    def __str__(self) -> str:
        return str(self.info)


class Interface:
    """
    Base class for interfaces.

    Subclasses override the hooks they need; the defaults accept every
    slot and contribute nothing.
    """

    name: str = ""

    def __str__(self) -> str:
        return self.name

    def static_info(self) -> StaticInfo:
        return StaticInfo(summary="")

    def before_prepare_slot(self, slot: SlotInfo) -> None:
        """Validate a slot before it is installed."""
        return None

    def apparmor_connected_plug(
        self,
        spec: AppArmorSpecification,
        plug: ConnectedPlug,
        slot: ConnectedSlot,
    ) -> None:
        return None

    def udev_connected_plug(
        self,
        spec: UDevSpecification,
        plug: ConnectedPlug,
        slot: ConnectedSlot,
    ) -> None:
        return None

    def auto_connect(self, plug: PlugInfo, slot: SlotInfo) -> bool:
        return True
