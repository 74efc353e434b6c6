"""
raw-volume Command Line Interface.

Operator diagnostics around the raw-volume interface:
- check: Validate candidate partition paths
- snippets: Show the AppArmor and udev rules for a path
- families: List supported partition naming families
- declarations: Show the interface base declarations
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from rawvolume import __version__
from rawvolume.config import load_config, setup_logging, validate_config
from rawvolume.devices.families import PARTITION_FAMILIES
from rawvolume.devices.validator import DevicePathValidator
from rawvolume.interfaces.base import PlugInfo, SlotInfo
from rawvolume.interfaces.declarations import PLUGS, SLOTS
from rawvolume.interfaces.raw_volume import RawVolumeInterface
from rawvolume.interfaces.registry import InterfaceRepository
from rawvolume.interfaces.specs import UDevSpecification


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="raw-volume",
        description="Disk partition access rules for confined applications",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-c", "--config",
        metavar="FILE",
        help="Path to configuration file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check command
    check_parser = subparsers.add_parser("check", help="Validate partition paths")
    check_parser.add_argument("paths", nargs="+", metavar="PATH", help="Device path")
    check_parser.set_defaults(func=cmd_check)

    # snippets command
    snippets_parser = subparsers.add_parser(
        "snippets", help="Show the security rules for a partition path"
    )
    snippets_parser.add_argument("path", help="Device path")
    snippets_parser.add_argument(
        "-t", "--tag",
        action="append",
        dest="tags",
        help="udev security tag (repeatable, overrides config)",
    )
    snippets_parser.set_defaults(func=cmd_snippets)

    # families command
    families_parser = subparsers.add_parser(
        "families", help="List supported partition naming families"
    )
    families_parser.set_defaults(func=cmd_families)

    # declarations command
    declarations_parser = subparsers.add_parser(
        "declarations", help="Show interface base declarations"
    )
    declarations_parser.set_defaults(func=cmd_declarations)

    # Parse arguments
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 1

    errors = validate_config(config)
    if errors:
        for error in errors:
            print(f"Config error: {error}", file=sys.stderr)
        return 1

    setup_logging(config)
    args.settings = config

    # Execute command
    return args.func(args)


def output(data: Any, args: argparse.Namespace) -> None:
    """Output data in requested format."""
    if getattr(args, "json", False):
        print(json.dumps(data, indent=2, default=str))
    elif isinstance(data, dict):
        for key, value in data.items():
            print(f"{key}: {value}")
    elif isinstance(data, list):
        for item in data:
            if isinstance(item, dict):
                for key, value in item.items():
                    print(f"  {key}: {value}")
                print()
            else:
                print(f"  {item}")
    else:
        print(data)


def cmd_check(args: argparse.Namespace) -> int:
    """Validate candidate device paths."""
    validator = DevicePathValidator()
    results = [validator.validate(path) for path in args.paths]

    if getattr(args, "json", False):
        output([result.to_dict() for result in results], args)
    else:
        for result in results:
            if result.is_valid:
                print(f"OK       {result.canonical_path} ({result.family.name})")
            else:
                print(f"INVALID  {result.path}: {result.reason}")

    return 0 if all(result.is_valid for result in results) else 1


def cmd_snippets(args: argparse.Namespace) -> int:
    """Show the AppArmor and udev rules for a device path."""
    validator = DevicePathValidator()
    result = validator.validate(args.path)
    if not result.is_valid:
        print(f"Invalid device path: {result.reason}", file=sys.stderr)
        return 1

    iface = RawVolumeInterface(validator)
    repository = InterfaceRepository([iface])
    tags = args.tags or args.settings.udev.security_tags

    slot = SlotInfo(
        snap="system",
        name="partition",
        interface=iface.name,
        attrs={"path": args.path},
        snap_type="gadget",
    )
    plug = PlugInfo(snap="consumer", name="partition", interface=iface.name)
    repository.add_slot(slot)
    artifacts = repository.connect(plug, slot)

    udev = UDevSpecification(security_tags=tags, interface=iface.name)
    for device in artifacts.udev.tagged_devices:
        udev.tag_device(device)

    if getattr(args, "json", False):
        output({
            "path": result.canonical_path,
            "family": result.family.name,
            "apparmor": artifacts.apparmor.render(),
            "udev": udev.snippets() or artifacts.udev.tagged_devices,
        }, args)
    else:
        print("# AppArmor")
        print(artifacts.apparmor.render())
        print("# udev")
        for rule in udev.snippets() or artifacts.udev.tagged_devices:
            print(rule)

    return 0


def cmd_families(args: argparse.Namespace) -> int:
    """List supported partition naming families."""
    families = [family.to_dict() for family in PARTITION_FAMILIES]

    if getattr(args, "json", False):
        output(families, args)
    else:
        print(f"{'Family':<8} {'Template':<34} Description")
        print("-" * 70)
        for family in PARTITION_FAMILIES:
            print(f"{family.name:<8} {family.template:<34} {family.description}")

    return 0


def cmd_declarations(args: argparse.Namespace) -> int:
    """Show interface base declarations."""
    repository = InterfaceRepository()
    data = {
        iface.name: {
            "summary": iface.static_info().summary,
            PLUGS: repository.declaration(iface.name, PLUGS).to_dict(),
            SLOTS: repository.declaration(iface.name, SLOTS).to_dict(),
        }
        for iface in repository.interfaces
    }

    if getattr(args, "json", False):
        output(data, args)
    else:
        for name, info in data.items():
            print(f"{name}: {info['summary']}")
            for side in (PLUGS, SLOTS):
                print(f"  {side}: {info[side]}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
