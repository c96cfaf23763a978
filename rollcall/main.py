"""Rollcall CLI entry point.

Usage:
    rollcall evaluate group.json                 # Use the configured group rule
    rollcall evaluate group.json --method 3      # Leader with Help
    rollcall evaluate group.json --dc 12         # Override the document's DC

The input document looks like:
    {"category": "skill", "key": "ste", "dc": 15,
     "actors": [{"id": "a", "name": "Aria", "skills": {"ste": {"total": 5}}}, ...],
     "results": [{"actorId": "a", "total": 14}, ...]}
"""

import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import Config
from .core.actors import ActorRecord
from .core.group_consensus import evaluate, resolve_method
from .core.models import GroupConsensusOutcome
from .logging_config import setup_logging
from .settings import get_settings_store

console = Console()

EXIT_OK = 0
EXIT_BAD_INPUT = 1
EXIT_INCOMPLETE = 2


def print_outcome(outcome: GroupConsensusOutcome, method_label: str):
    """Print a group verdict as a panel plus a details table."""
    if not outcome.complete:
        console.print(Panel(
            Text("Waiting on rolls - no verdict yet", style="yellow"),
            title=f"[dim]{method_label}[/dim]",
            border_style="yellow",
        ))
        return

    if "error" in outcome.details:
        verdict = Text(f"Could not resolve: {outcome.details['error']}", style="bold red")
        border = "red"
    elif outcome.success:
        verdict = Text(f"SUCCESS  (result {outcome.result})", style="bold green")
        border = "green"
    else:
        verdict = Text(f"FAILURE  (result {outcome.result})", style="bold red")
        border = "red"

    console.print(Panel(verdict, title=f"[dim]{method_label}[/dim]", border_style=border))

    table = Table(show_header=True, header_style="dim")
    table.add_column("Key")
    table.add_column("Value")
    for key, value in outcome.details.items():
        if key == "summary":
            continue
        table.add_row(key, str(value))
    console.print(table)

    summary = outcome.details.get("summary")
    if summary:
        console.print(f"[dim]{summary}[/dim]")


def cmd_evaluate(args) -> int:
    """Evaluate a group roll document."""
    try:
        with open(args.file, "r", encoding="utf-8") as f:
            doc = json.load(f)
        actors = [ActorRecord.model_validate(a) for a in doc.get("actors", [])]
    except (OSError, json.JSONDecodeError, ValidationError, AttributeError) as e:
        console.print(f"[red]Could not read {args.file}: {e}[/red]")
        return EXIT_BAD_INPUT

    dc = args.dc if args.dc is not None else doc.get("dc")
    if dc is None:
        console.print("[red]No DC given (use --dc or a 'dc' field)[/red]")
        return EXIT_BAD_INPUT

    if args.method is not None:
        method = args.method
    else:
        settings_path = Path(args.settings) if args.settings else None
        method = get_settings_store(settings_path).load().group_roll_result_mode

    resolved, _ = resolve_method(method)
    outcome = evaluate(
        doc.get("results", []),
        dc,
        actors,
        doc.get("category"),
        doc.get("key"),
        method,
    )
    print_outcome(outcome, resolved.label)
    if not outcome.complete:
        return EXIT_INCOMPLETE
    if "error" in outcome.details:
        return EXIT_BAD_INPUT
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rollcall", description="Group roll resolution")
    sub = parser.add_subparsers(dest="command", required=True)

    ev = sub.add_parser("evaluate", help="Resolve a group roll from a JSON document")
    ev.add_argument("file", help="Path to the group roll JSON document")
    ev.add_argument("--method", type=int, default=None, help="Group rule 1-4 (default: settings)")
    ev.add_argument("--dc", type=int, default=None, help="Override the document's DC")
    ev.add_argument("--settings", default=None, help="Settings JSON (default: ROLLCALL_SETTINGS_PATH)")
    ev.set_defaults(func=cmd_evaluate)

    return parser


def main(argv=None):
    """Entry point for the CLI."""
    setup_logging(Config.get_log_level())

    issues = Config.validate()
    if issues:
        console.print("[red]Configuration issues:[/red]")
        for issue in issues:
            console.print(f"  [red]• {issue}[/red]")

    args = build_parser().parse_args(argv)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
