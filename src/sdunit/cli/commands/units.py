"""Unit convergence and inspection commands."""

from __future__ import annotations

import argparse

from sdunit.cli.commands import load_config
from sdunit.cli.formatters import (
    print_error,
    print_info,
    print_json,
    print_status,
    print_table,
)
from sdunit.core.converge import Converger
from sdunit.errors import SdunitError
from sdunit.service.factory import get_unit_manager
from sdunit.service.reconciler import ActionResult
from sdunit.units.document import assemble
from sdunit.units.spec import Action


def _print_result(result: ActionResult) -> None:
    if result.changed:
        print_status(result.unit, "changed", f"{result.action} {result.message}".strip())
    else:
        print_status(result.unit, "skipped", f"{result.action} ({result.message})")


def cmd_apply(args: argparse.Namespace) -> int:
    """Converge declared units."""
    try:
        config = load_config(args)
        declarations = config.find_units(args.unit) if args.unit else config.data.units
        if args.unit and not declarations:
            print_error(f"No unit declared with name '{args.unit}'")
            return 1
        if not declarations:
            print_info(f"No units declared in {config.path}")
            return 0

        converger = Converger(get_unit_manager(config.data.systemd))

        if args.dry_run:
            for declaration in declarations:
                for action, step in converger.plan(declaration):
                    print(f"{declaration.key}: {action}: {step}")
            return 0

        report = converger.converge(declarations)
    except (SdunitError, NotImplementedError) as e:
        print_error(str(e))
        return 1

    for unit in report.units:
        for result in unit.results:
            _print_result(result)
        if unit.error:
            print_status(unit.unit, "failed", unit.error)

    print_info(report.summary())
    return 0 if report.ok else 1


def cmd_render(args: argparse.Namespace) -> int:
    """Print the unit file for a declared unit."""
    try:
        config = load_config(args)
        declaration = config.get_unit(args.name)
    except SdunitError as e:
        print_error(str(e))
        return 1

    document = assemble(declaration.spec)
    if args.json:
        print_json(document.to_dict())
    else:
        print(document.to_ini(), end="")
    return 0


def cmd_action(args: argparse.Namespace) -> int:
    """Run a single action against a declared unit."""
    try:
        config = load_config(args)
        declaration = config.get_unit(args.name)
        manager = get_unit_manager(config.data.systemd)
        result = manager.apply(declaration.spec, args.action)
    except (SdunitError, NotImplementedError) as e:
        print_error(str(e))
        return 1

    _print_result(result)
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Show live state of declared units."""
    try:
        config = load_config(args)
        declarations = [config.get_unit(args.name)] if args.name else config.data.units
        manager = get_unit_manager(config.data.systemd)

        rows = []
        for declaration in declarations:
            state = manager.status(declaration.spec)
            rows.append({
                "UNIT": declaration.key,
                "FILE": "present" if manager.is_installed(declaration.spec) else "absent",
                "ENABLED": state.enablement.value,
                "ACTIVE": state.activity.value,
            })
    except (SdunitError, NotImplementedError) as e:
        print_error(str(e))
        return 1

    if args.json:
        print_json(rows)
    else:
        print_table(["UNIT", "FILE", "ENABLED", "ACTIVE"], rows)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List declared units."""
    try:
        config = load_config(args)
    except SdunitError as e:
        print_error(str(e))
        return 1

    if args.json:
        print_json([u.to_dict() for u in config.data.units])
        return 0

    rows = [
        {
            "UNIT": u.key,
            "MODE": u.spec.mode.value,
            "DROP-IN": u.spec.override if u.spec.drop_in else "-",
            "ACTIONS": ",".join(a.value for a in u.actions),
        }
        for u in config.data.units
    ]
    print_table(["UNIT", "MODE", "DROP-IN", "ACTIONS"], rows)
    return 0


def register_commands(subparsers: argparse._SubParsersAction) -> None:
    """Register unit commands."""
    apply_parser = subparsers.add_parser("apply", help="Converge declared units")
    apply_parser.add_argument("--unit", help="Only converge this unit")
    apply_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would run without changing anything",
    )
    apply_parser.set_defaults(func=cmd_apply)

    render_parser = subparsers.add_parser("render", help="Print the unit file for a unit")
    render_parser.add_argument("name", help="Unit name (e.g. web or web.service)")
    render_parser.add_argument("--json", action="store_true", help="Output sections as JSON")
    render_parser.set_defaults(func=cmd_render)

    action_parser = subparsers.add_parser("action", help="Run one action against a unit")
    action_parser.add_argument("name", help="Unit name (e.g. web or web.service)")
    action_parser.add_argument("action", choices=[a.value for a in Action])
    action_parser.set_defaults(func=cmd_action)

    status_parser = subparsers.add_parser("status", help="Show live state of declared units")
    status_parser.add_argument("name", nargs="?", help="Only show this unit")
    status_parser.add_argument("--json", action="store_true", help="Output as JSON")
    status_parser.set_defaults(func=cmd_status)

    list_parser = subparsers.add_parser("list", help="List declared units")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")
    list_parser.set_defaults(func=cmd_list)
