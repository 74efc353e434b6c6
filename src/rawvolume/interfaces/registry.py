"""
Interface repository.

Built-in interfaces are listed once in ``BUILTIN_INTERFACES``; the host
process constructs a repository from that table (or its own list) and
routes slot preparation and connections through it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from rawvolume.interfaces.base import (
    ConnectedPlug,
    ConnectedSlot,
    Interface,
    InterfaceError,
    PlugInfo,
    SlotInfo,
)
from rawvolume.interfaces.declarations import (
    PLUGS,
    SLOTS,
    DeclarationRule,
    parse_base_declaration,
)
from rawvolume.interfaces.raw_volume import RawVolumeInterface
from rawvolume.interfaces.specs import AppArmorSpecification, UDevSpecification


logger = logging.getLogger(__name__)


BUILTIN_INTERFACES: tuple[type[Interface], ...] = (
    RawVolumeInterface,
)


class UnknownInterfaceError(InterfaceError):
    """No interface with the requested name is registered."""

    pass


def builtin_interfaces() -> list[Interface]:
    """Instantiate every built-in interface."""
    return [cls() for cls in BUILTIN_INTERFACES]


@dataclass
class ConnectionArtifacts:
    """Security rules produced for one connection."""

    plug: PlugInfo
    slot: SlotInfo
    apparmor: AppArmorSpecification
    udev: UDevSpecification
    auto_connect: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "plug": str(self.plug),
            "slot": str(self.slot),
            "apparmor": self.apparmor.snippets,
            "udev": self.udev.tagged_devices,
            "auto_connect": self.auto_connect,
        }


@dataclass
class _Entry:
    interface: Interface
    declarations: dict[str, DeclarationRule] = field(default_factory=dict)


class InterfaceRepository:
    """
    Holds interfaces and the slots prepared against them.
    """

    def __init__(self, interfaces: list[Interface] | None = None) -> None:
        """
        Initialize the repository.

        Args:
            interfaces: Interfaces to serve; defaults to the built-ins
        """
        self._entries: dict[str, _Entry] = {}
        self._slots: dict[str, SlotInfo] = {}

        for iface in builtin_interfaces() if interfaces is None else interfaces:
            self._add_interface(iface)

    def _add_interface(self, iface: Interface) -> None:
        if not iface.name:
            raise ValueError("Interface has no name")
        if iface.name in self._entries:
            raise ValueError(f"Interface {iface.name} is already registered")

        info = iface.static_info()
        declarations = {}
        for side, text in (
            (PLUGS, info.base_declaration_plugs),
            (SLOTS, info.base_declaration_slots),
        ):
            rule = parse_base_declaration(text, side).get(iface.name)
            if rule is not None:
                declarations[side] = rule

        self._entries[iface.name] = _Entry(interface=iface, declarations=declarations)

    def interface(self, name: str) -> Interface:
        """
        Get an interface by name.

        Raises:
            UnknownInterfaceError: If no such interface exists
        """
        entry = self._entries.get(name)
        if entry is None:
            raise UnknownInterfaceError(name, f"unknown interface {name!r}")
        return entry.interface

    @property
    def interfaces(self) -> list[Interface]:
        return [entry.interface for entry in self._entries.values()]

    def declaration(self, name: str, side: str) -> DeclarationRule:
        """Get the base declaration of an interface side."""
        self.interface(name)
        rule = self._entries[name].declarations.get(side)
        return rule or DeclarationRule(interface=name, side=side)

    def add_slot(self, slot: SlotInfo) -> None:
        """
        Prepare and install a slot.

        Raises:
            InterfaceError: If the interface rejects the slot or the base
                declaration does not allow installing it
        """
        iface = self.interface(slot.interface)
        iface.before_prepare_slot(slot)

        if not self.declaration(iface.name, SLOTS).allows_installation(slot.snap_type):
            raise InterfaceError(
                iface.name,
                f"installation of {iface.name} slot not allowed for {slot.snap_type} snaps",
            )

        self._slots[str(slot)] = slot
        logger.info("Installed %s slot %s", iface.name, slot)

    def slot(self, ref: str) -> SlotInfo | None:
        return self._slots.get(ref)

    def connect(
        self,
        plug: PlugInfo,
        slot: SlotInfo,
        dynamic_attrs: dict[str, Any] | None = None,
    ) -> ConnectionArtifacts:
        """
        Connect a plug to an installed slot.

        Plug installation policy is not applied here. A plug side
        declared with ``allow-installation: false`` still needs a
        per-snap grant, which the host checks before installing the
        plug snap.

        Args:
            plug: Consuming plug
            slot: Slot previously installed with add_slot
            dynamic_attrs: Slot attributes set at connection time. They
                override the declared ones and are checked the same way.

        Returns:
            ConnectionArtifacts with the AppArmor and udev rules

        Raises:
            InterfaceError: If the pair cannot be connected or the
                dynamic attributes fail slot validation
        """
        if plug.interface != slot.interface:
            raise InterfaceError(
                plug.interface,
                f"cannot connect {plug} ({plug.interface}) to {slot} ({slot.interface})",
            )
        if self._slots.get(str(slot)) is not slot:
            raise InterfaceError(slot.interface, f"slot {slot} is not installed")

        iface = self.interface(slot.interface)
        if dynamic_attrs:
            iface.before_prepare_slot(replace(slot, attrs={**slot.attrs, **dynamic_attrs}))

        connected_plug = ConnectedPlug(plug)
        connected_slot = ConnectedSlot(slot, dynamic_attrs)

        apparmor = AppArmorSpecification(security_tags=plug.security_tags)
        iface.apparmor_connected_plug(apparmor, connected_plug, connected_slot)

        udev = UDevSpecification(security_tags=plug.security_tags, interface=iface.name)
        iface.udev_connected_plug(udev, connected_plug, connected_slot)

        logger.info("Connected %s to %s", plug, slot)
        return ConnectionArtifacts(
            plug=plug,
            slot=slot,
            apparmor=apparmor,
            udev=udev,
            auto_connect=self.should_auto_connect(plug, slot),
        )

    def should_auto_connect(self, plug: PlugInfo, slot: SlotInfo) -> bool:
        """
        Check if a plug/slot pair connects without user action.

        The interface oracle is consulted first, then both base
        declarations.
        """
        iface = self.interface(slot.interface)
        if not iface.auto_connect(plug, slot):
            return False
        return all(
            self.declaration(iface.name, side).allows_auto_connection()
            for side in (PLUGS, SLOTS)
        )
