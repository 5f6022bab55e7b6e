"""Command-line interface for Ambiance channel routing.

Detects multi-channel routing conflicts in a project file, shows the
proposed re-routing, and can write the accepted routing back.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from ambiance.core.channels import (
    ChannelLayoutCatalog,
    ConflictReport,
    Resolution,
    apply_resolutions,
    detect_conflicts,
    find_intelligent_routing,
)
from ambiance.core.config import (
    AppConfig,
    load_app_config,
    load_channel_catalog,
    load_project,
    save_project,
)
from ambiance.core.host import NullRegenerator, NullTrackGraph
from ambiance.core.project import ProjectConfig, ProjectContainerStore
from ambiance.core.utils.logging import configure_logging

console = Console()
logger = logging.getLogger(__name__)


def _load_inputs(
    args: argparse.Namespace, app_config: AppConfig
) -> tuple[ProjectConfig, ChannelLayoutCatalog]:
    catalog_path = args.catalog or app_config.routing.catalog_path
    catalog = load_channel_catalog(catalog_path)
    project = load_project(Path(args.project))
    return project, catalog


def _fallback(args: argparse.Namespace, app_config: AppConfig) -> Any:
    return args.fallback or app_config.routing.subordinate_fallback


def render_report(report: ConflictReport) -> None:
    """Print the conflict table."""
    table = Table(title="Channel Routing Conflicts")
    table.add_column("Container 1")
    table.add_column("Group 1")
    table.add_column("Label 1", justify="center")
    table.add_column("Ch.", justify="right")
    table.add_column("Label 2", justify="center")
    table.add_column("Container 2")
    table.add_column("Group 2")

    for pair in report.conflict_pairs.values():
        for conflict in pair.conflicting_channels:
            table.add_row(
                pair.container1.container_name,
                pair.container1.group_name,
                conflict.label1,
                str(conflict.channel),
                conflict.label2,
                pair.container2.container_name,
                pair.container2.group_name,
            )
    console.print(table)


def render_resolutions(resolutions: list[Resolution]) -> None:
    """Print proposed per-channel changes."""
    if not resolutions:
        console.print("[yellow]No automatic resolution available; resolve manually.[/yellow]")
        return

    for resolution in resolutions:
        table = Table(title=f"{resolution.container} (aligned with {resolution.affected_by})")
        table.add_column("Label", justify="center")
        table.add_column("Old", justify="right")
        table.add_column("New", justify="right")
        table.add_column("Reason")
        for change in resolution.changes:
            new = f"[green]{change.new_channel}[/green]" if change.changed else str(change.new_channel)
            table.add_row(change.label, str(change.old_channel), new, change.reason)
        console.print(table)


def report_to_dict(report: ConflictReport, resolutions: list[Resolution]) -> dict[str, Any]:
    """JSON-friendly view of a report and its proposed resolutions."""
    return {
        "conflicts": [
            {
                "container1": {
                    "group": pair.container1.group_name,
                    "container": pair.container1.container_name,
                },
                "container2": {
                    "group": pair.container2.group_name,
                    "container": pair.container2.container_name,
                },
                "channels": [
                    {"channel": c.channel, "label1": c.label1, "label2": c.label2}
                    for c in pair.conflicting_channels
                ],
            }
            for pair in report.conflict_pairs.values()
        ],
        "channel_usage": {
            str(channel): [
                {
                    "label": usage.label,
                    "group": usage.container.group_name,
                    "container": usage.container.container_name,
                }
                for usage in usages
            ]
            for channel, usages in sorted(report.channel_usage.items())
        },
        "resolutions": [
            {
                "group": r.container.group_name,
                "container": r.container.container_name,
                "affected_by": {
                    "group": r.affected_by.group_name,
                    "container": r.affected_by.container_name,
                },
                "original_routing": list(r.original_routing),
                "new_routing": list(r.new_routing),
                "changes": [
                    {
                        "label": c.label,
                        "old_channel": c.old_channel,
                        "new_channel": c.new_channel,
                        "reason": c.reason,
                    }
                    for c in r.changes
                ],
            }
            for r in resolutions
        ],
    }


def run_layouts(args: argparse.Namespace, app_config: AppConfig) -> int:
    """List channel layouts."""
    catalog = load_channel_catalog(args.catalog or app_config.routing.catalog_path)

    table = Table(title="Channel Layouts")
    table.add_column("Id", justify="right")
    table.add_column("Name")
    table.add_column("Channels", justify="right")
    table.add_column("Variant")
    table.add_column("Labels")
    table.add_column("Routing")

    for layout in catalog.list_layouts():
        if not layout.has_variants:
            table.add_row(
                str(layout.layout_id),
                layout.name,
                str(layout.channel_count),
                "-",
                " ".join(layout.labels),
                " ".join(map(str, layout.routing)),
            )
            continue
        for variant_id, variant in sorted(layout.variants.items()):
            table.add_row(
                str(layout.layout_id),
                layout.name,
                str(layout.channel_count),
                f"{variant_id}: {variant.name}",
                " ".join(variant.labels),
                " ".join(map(str, variant.routing)),
            )

    console.print(table)
    return 0


def run_check(args: argparse.Namespace, app_config: AppConfig) -> int:
    """Report conflicts and proposed resolutions. Exit 1 if any conflict exists."""
    project, catalog = _load_inputs(args, app_config)
    store = ProjectContainerStore(project)

    report = detect_conflicts(store.iter_containers(), catalog)
    if report is None:
        if args.json:
            print(json.dumps({"conflicts": [], "channel_usage": {}, "resolutions": []}))
        else:
            console.print("[green]✅ No channel routing conflicts[/green]")
        return 0

    resolutions = find_intelligent_routing(report, fallback=_fallback(args, app_config))

    if args.json:
        print(json.dumps(report_to_dict(report, resolutions), indent=2))
    else:
        render_report(report)
        render_resolutions(resolutions)
        console.print(
            f"\n{report.pair_count} conflicting pair(s), "
            f"{len(resolutions)} automatic resolution(s) proposed"
        )
    return 1


def run_resolve(args: argparse.Namespace, app_config: AppConfig) -> int:
    """Apply proposed resolutions to the project file."""
    project, catalog = _load_inputs(args, app_config)
    store = ProjectContainerStore(project)

    report = detect_conflicts(store.iter_containers(), catalog)
    if report is None:
        console.print("[green]✅ No channel routing conflicts; nothing to do[/green]")
        return 0

    resolutions = find_intelligent_routing(report, fallback=_fallback(args, app_config))
    if not resolutions:
        render_report(report)
        console.print("[yellow]No automatic resolution available; project unchanged.[/yellow]")
        return 1

    outcome = apply_resolutions(
        resolutions,
        store=store,
        tracks=NullTrackGraph(),
        regenerator=NullRegenerator(),
    )

    output = Path(args.output or args.project)
    save_project(project, output)

    render_resolutions(resolutions)
    console.print(
        f"\n[green]Stored routing for {outcome.resolved_count} of {len(resolutions)} "
        f"container(s)[/green]; {len(outcome.needs_regeneration)} flagged for regeneration"
    )
    console.print(f"[green]📁 Project written to:[/green] {output}")

    remaining = detect_conflicts(store.iter_containers(), catalog)
    return 0 if remaining is None else 1


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="ambiance-routing",
        description="Ambiance - multi-channel routing conflict checker",
    )
    p.add_argument("--config", default=None, help="Path to app config (.json/.yaml)")
    p.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override the configured log level",
    )
    p.add_argument(
        "--structured-logs", action="store_true", help="Emit JSON log lines on stderr"
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    layouts = sub.add_parser("layouts", help="List channel layouts")
    layouts.add_argument("--catalog", default=None, help="Channel layout catalog file")

    for name, help_text in (
        ("check", "Detect conflicts and show proposed routing"),
        ("resolve", "Apply proposed routing to the project file"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("project", help="Project file (.json/.yaml)")
        cmd.add_argument("--catalog", default=None, help="Channel layout catalog file")
        cmd.add_argument(
            "--fallback",
            choices=["skip", "shift"],
            default=None,
            help="Handling of conflicts between stereo/quad containers only",
        )
        if name == "check":
            cmd.add_argument("--json", action="store_true", help="Print the report as JSON")
        else:
            cmd.add_argument("--output", default=None, help="Write to this path instead")

    return p


_COMMANDS = {
    "layouts": run_layouts,
    "check": run_check,
    "resolve": run_resolve,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    args = build_arg_parser().parse_args(argv)

    try:
        app_config = load_app_config(args.config)
    except (ValueError, ValidationError) as e:
        console.print(f"[red]ERROR: Could not load config: {e}[/red]")
        return 2

    configure_logging(
        level=args.log_level or app_config.logging.level,
        format_string=app_config.logging.format,
        structured=args.structured_logs or app_config.logging.structured,
    )

    try:
        return _COMMANDS[args.cmd](args, app_config)
    except FileNotFoundError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return 2
    except (ValueError, ValidationError) as e:
        console.print(f"[red]ERROR: Invalid input: {e}[/red]")
        return 2


if __name__ == "__main__":
    sys.exit(main())
