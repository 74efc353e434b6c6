"""
Base declaration parser.

Interfaces ship YAML fragments stating whether snaps may carry their
plugs or slots at all and whether connections happen automatically.
The installation and connection policy itself is enforced elsewhere;
this module only reads the fragments into rule objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import yaml


class DeclarationParseError(Exception):
    """Error parsing a base declaration."""

    pass


PLUGS = "plugs"
SLOTS = "slots"


@dataclass
class DeclarationRule:
    """
    Base declaration for one side of one interface.

    ``allow_installation`` is True, False, or constrained to the snap
    types in ``installation_snap_types``.
    """

    interface: str
    side: str
    allow_installation: bool = True
    installation_snap_types: list[str] = field(default_factory=list)
    deny_auto_connection: bool = False

    def allows_installation(self, snap_type: str) -> bool:
        """Check if a snap of the given type may declare this side."""
        if not self.allow_installation:
            return False
        if self.installation_snap_types:
            return snap_type in self.installation_snap_types
        return True

    def allows_auto_connection(self) -> bool:
        return not self.deny_auto_connection

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        installation: Any = self.allow_installation
        if self.allow_installation and self.installation_snap_types:
            installation = {f"{self.side[:-1]}-snap-type": list(self.installation_snap_types)}
        return {
            "allow-installation": installation,
            "deny-auto-connection": self.deny_auto_connection,
        }


def parse_base_declaration(text: str, side: str) -> dict[str, DeclarationRule]:
    """
    Parse a base declaration fragment.

    Args:
        text: YAML mapping of interface name to declaration
        side: ``plugs`` or ``slots``

    Returns:
        Rules keyed by interface name

    Raises:
        DeclarationParseError: If the fragment is malformed
    """
    if side not in (PLUGS, SLOTS):
        raise DeclarationParseError(f"Unknown declaration side: {side}")

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DeclarationParseError(f"Invalid declaration YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DeclarationParseError("Declaration must be a dictionary")

    rules = {}
    for interface, rule_data in data.items():
        try:
            rules[interface] = parse_rule(interface, side, rule_data)
        except DeclarationParseError as e:
            raise DeclarationParseError(f"Error parsing {side} of {interface}: {e}") from e
    return rules


def parse_rule(interface: str, side: str, data: Any) -> DeclarationRule:
    """
    Parse the declaration of a single interface side.

    Args:
        interface: Interface name
        side: ``plugs`` or ``slots``
        data: Declaration body

    Returns:
        DeclarationRule object
    """
    if data is None:
        return DeclarationRule(interface=interface, side=side)
    if not isinstance(data, dict):
        raise DeclarationParseError("Declaration body must be a dictionary")

    rule = DeclarationRule(interface=interface, side=side)

    installation = data.get("allow-installation", True)
    if isinstance(installation, bool):
        rule.allow_installation = installation
    elif isinstance(installation, dict):
        snap_types = installation.get(f"{side[:-1]}-snap-type", [])
        if isinstance(snap_types, str):
            snap_types = [snap_types]
        if not isinstance(snap_types, list):
            raise DeclarationParseError("snap-type constraint must be a list")
        rule.installation_snap_types = [str(t) for t in snap_types]
    else:
        raise DeclarationParseError(
            f"Invalid allow-installation value: {installation!r}"
        )

    deny = data.get("deny-auto-connection", False)
    if not isinstance(deny, bool):
        raise DeclarationParseError(f"Invalid deny-auto-connection value: {deny!r}")
    rule.deny_auto_connection = deny

    return rule
