"""
Security specifications collected per connection.

These are the containers enforcement backends read from: AppArmor
profile snippets and udev device tags.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class AppArmorSpecification:
    """AppArmor rules contributed to a plug's profile."""

    security_tags: list[str] = field(default_factory=list)
    _snippets: list[str] = field(default_factory=list, repr=False)

    def add_snippet(self, snippet: str) -> None:
        """Add a block of AppArmor rules."""
        self._snippets.append(snippet)

    @property
    def snippets(self) -> list[str]:
        return list(self._snippets)

    def render(self) -> str:
        """Join all snippets into a single profile fragment."""
        return "".join(self._snippets)


@dataclass
class UDevSpecification:
    """udev rules tagging devices for a plug's apps."""

    security_tags: list[str] = field(default_factory=list)
    interface: str = ""
    _devices: list[str] = field(default_factory=list, repr=False)

    def tag_device(self, rule: str) -> None:
        """
        Tag devices matching a udev match expression.

        Args:
            rule: udev match expression, e.g. ``KERNEL=="sda1"``
        """
        self._devices.append(rule)

    @property
    def tagged_devices(self) -> list[str]:
        return list(self._devices)

    def snippets(self) -> list[str]:
        """Render one udev rule per tagged device and security tag."""
        rules = []
        for device in self._devices:
            for tag in self.security_tags:
                rules.append(f'# {self.interface}\n{device}, TAG+="{tag}"')
        return rules
