"""Command-line interface for pwmnode.

Loads a node config, then either lists its devices or applies one action to
a device and prints the value the PWM driver would program.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from uuid import UUID

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pwmnode.core.config import (
    NodeConfig,
    configure_logging,
    load_node_config,
    load_node_devices,
    resolve_state_path,
)
from pwmnode.core.devices import (
    Action,
    Device,
    DeviceCollection,
    DeviceError,
    canonical_name,
    group_name,
    resolve_by_id,
    resolve_by_name,
    save_devices,
)
from pwmnode.core.utils.logging import get_logger

console = Console()


def parse_action(text: str, value: int | None) -> Action:
    """Resolve an action given either as a registered name or as its UUID."""
    try:
        identifier = UUID(text)
    except ValueError:
        return resolve_by_name(text, value)
    return resolve_by_id(identifier, value)


def _load(config_path: Path) -> tuple[NodeConfig, DeviceCollection] | None:
    try:
        config = load_node_config(config_path)
        configure_logging(config)
        devices = load_node_devices(config_path, config)
    except (FileNotFoundError, ValidationError, ValueError, DeviceError) as e:
        console.print(f"[red]ERROR: Could not load config: {escape(str(e))}[/red]")
        return None
    return config, devices


def _device_row(device: Device) -> list[str]:
    duty_cycle = device.duty_cycles[device.target]
    return [
        device.name,
        str(device.id),
        group_name(device.group) if device.group else "-",
        f"{device.target}/{device.max_active_index}",
        f"{duty_cycle}%",
        "yes" if device.reversed else "no",
        "yes" if device.needs_sync() else "no",
        ", ".join(canonical_name(action) for action in device.available_actions),
    ]


def show_devices(args: argparse.Namespace) -> int:
    """Print a table of the node's devices."""
    loaded = _load(Path(args.config))
    if loaded is None:
        return 1
    config, devices = loaded

    table = Table(title=f"{config.node_name} devices")
    for column in ("Name", "Id", "Group", "Target", "Duty", "Reversed", "Sync", "Actions"):
        table.add_column(column)
    for device in devices.snapshot():
        table.add_row(*_device_row(device))

    console.print(table)
    return 0


def act_on_device(args: argparse.Namespace) -> int:
    """Apply one action to a device and report the resulting output value."""
    config_path = Path(args.config)
    loaded = _load(config_path)
    if loaded is None:
        return 1
    config, devices = loaded
    scale = args.scale if args.scale is not None else config.duty_cycle_scale
    if scale < 0:
        console.print(f"[red]ERROR: Scale must be non-negative, got {scale}[/red]")
        return 1

    try:
        action = parse_action(args.action, args.value)
        with devices.locked() as device_list:
            device = next((d for d in device_list if d.name == args.device), None)
            if device is None:
                console.print(f"[red]ERROR: No device named {escape(repr(args.device))}[/red]")
                return 1
            device.take_action(action)
            output = device.read_and_acknowledge(scale)
    except DeviceError as e:
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        return 1

    get_logger(__name__, device=device.name).info(
        "Took action %s: target %d, output %d", canonical_name(action), device.target, output
    )
    console.print(
        f"[green]{escape(device.name)}[/green]: {canonical_name(action)} -> "
        f"target {device.target}, output {output}/{scale}"
    )
    if args.json:
        console.print_json(device.to_json())

    if config.state_file:
        state_path = resolve_state_path(config_path, config.state_file)
        save_devices(state_path, devices.snapshot())
        console.print(f"[green]State saved to:[/green] {state_path}")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="pwmnode",
        description="pwmnode - PWM device state for home-automation nodes",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    show = sub.add_parser("show", help="List configured devices")
    show.add_argument("--config", default="node.yaml", help="Node config (default: node.yaml)")

    act = sub.add_parser("act", help="Apply an action to a device")
    act.add_argument("--config", default="node.yaml", help="Node config (default: node.yaml)")
    act.add_argument("device", help="Device name")
    act.add_argument("action", help="Action name (on, off, up, down, ...) or action UUID")
    act.add_argument("value", nargs="?", type=int, default=None, help="Step size or target index")
    act.add_argument(
        "--scale",
        type=int,
        default=None,
        help="Hardware value for 100%% duty cycle (default: from config)",
    )
    act.add_argument("--json", action="store_true", help="Print the resulting device as JSON")

    return p


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    if args.cmd == "show":
        return show_devices(args)
    if args.cmd == "act":
        return act_on_device(args)
    return 1


if __name__ == "__main__":
    sys.exit(main())
