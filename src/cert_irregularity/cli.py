"""Command-line interface for the certification irregularity engine.

This CLI works on JSON exports of the certification and catalog tables and
never writes to the store:

1. `certscan scan`: Classify records and types into finding groups
   - Filter by severity
   - Print a table or save a Markdown report

2. `certscan standardize`: Preview the standardization of one group
3. `certscan consolidate`: Preview the consolidation of a duplicate-type group
4. `certscan merge`: Preview the merge of an exact-duplicate group
"""

import argparse
import json
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .config import DetectionConfig
from .detection import ParseResult, classify, filter_by_severity, parse_records, parse_types
from .exceptions import IrregularityError
from .models import (
    CertificationRecord,
    CertificationType,
    DuplicateExclusion,
    FindingGroup,
    Severity,
)
from .planning import (
    count_matching_records,
    plan_group_consolidation,
    plan_merge,
    plan_standardization,
    recommend_survivor,
)
from .reporting import build_report

console = Console()

SEVERITY_STYLES: dict[Severity, str] = {
    Severity.DUPLICATE_TYPE: "bold red",
    Severity.EXACT: "red",
    Severity.SIMILAR: "yellow",
    Severity.FUNCTION_MISMATCH: "cyan",
}


def _read_json_list(path: Path) -> list[Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        msg = f"{path} must contain a JSON array"
        raise IrregularityError(msg)
    return data


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-r",
        "--records",
        type=Path,
        required=True,
        help="JSON array of certification records",
    )
    parser.add_argument(
        "-t",
        "--types",
        type=Path,
        required=True,
        help="JSON array of certification catalog types",
    )
    parser.add_argument(
        "-x",
        "--exclusions",
        type=Path,
        help="JSON array of pairs marked as not duplicates",
    )


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="certscan",
        description="Detect duplicated and inconsistent certification records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  certscan scan -r certs.json -t types.json
  certscan scan -r certs.json -t types.json --severity similar -o report.md
  certscan standardize -r certs.json -t types.json --group 3
  certscan consolidate -r certs.json -t types.json --group 1 --survivor t-42
  certscan merge -r certs.json -t types.json --group 2

Optional environment variables:
  CERTSCAN_SIMILARITY_THRESHOLD    - Similarity bound for "similar" names (0.8)
  CERTSCAN_MAX_TYPE_NAME_DISTANCE  - Edit distance for duplicate types (3)
  CERTSCAN_DEFAULT_FUNCTION        - Function written when a type has none
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    scan_parser = subparsers.add_parser("scan", help="Classify records into finding groups")
    _add_input_arguments(scan_parser)
    scan_parser.add_argument(
        "-s",
        "--severity",
        default="all",
        choices=["all", *(s.value for s in Severity)],
        help="Only show groups of this severity (default: all)",
    )
    scan_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Save the report to this file (markdown format)",
    )

    standardize_parser = subparsers.add_parser(
        "standardize", help="Preview the standardization of one group"
    )
    _add_input_arguments(standardize_parser)
    standardize_parser.add_argument("-g", "--group", type=int, required=True, help="Group number")
    standardize_parser.add_argument(
        "--type-id",
        help="Target catalog type (default: the group's suggested type)",
    )

    consolidate_parser = subparsers.add_parser(
        "consolidate", help="Preview the consolidation of a duplicate-type group"
    )
    _add_input_arguments(consolidate_parser)
    consolidate_parser.add_argument("-g", "--group", type=int, required=True, help="Group number")
    consolidate_parser.add_argument(
        "--survivor",
        help="Type to keep (default: the type with the most matching records)",
    )

    merge_parser = subparsers.add_parser("merge", help="Preview the merge of an exact group")
    _add_input_arguments(merge_parser)
    merge_parser.add_argument("-g", "--group", type=int, required=True, help="Group number")

    return parser


def _load_and_classify(
    args: argparse.Namespace,
) -> tuple[
    list[FindingGroup], ParseResult[CertificationRecord], ParseResult[CertificationType]
]:
    records = parse_records(_read_json_list(args.records))
    types = parse_types(_read_json_list(args.types))
    exclusions = []
    if args.exclusions:
        exclusions = [DuplicateExclusion.model_validate(e) for e in _read_json_list(args.exclusions)]

    for error in records.errors + types.errors:
        console.print(f"[yellow]Warning: {error}[/]")

    groups = classify(
        records.items,
        types.items,
        exclusions=exclusions,
        config=DetectionConfig.from_env(),
    )
    return groups, records, types


def _find_group(groups: list[FindingGroup], index: int) -> FindingGroup:
    for group in groups:
        if group.index == index:
            return group
    msg = f"No group {index} (found {len(groups)} groups)"
    raise IrregularityError(msg)


def _render_groups(groups: list[FindingGroup]) -> Table:
    table = Table(title="Certification irregularities")
    table.add_column("#", justify="right")
    table.add_column("Severity")
    table.add_column("Names")
    table.add_column("Members", justify="right")
    table.add_column("Suggested type")

    for group in groups:
        members = len(group.records) if group.records else len(group.types)
        suggestion = group.suggested_type.full_name if group.suggested_type else "-"
        table.add_row(
            str(group.index),
            f"[{SEVERITY_STYLES[group.severity]}]{group.severity.value}[/]",
            "\n".join(group.names),
            str(members),
            suggestion,
        )
    return table


def _run_scan_command(args: argparse.Namespace) -> None:
    groups, records, types = _load_and_classify(args)
    shown = filter_by_severity(groups, args.severity)

    console.print("[bold cyan]Certification Irregularity Scan[/]")
    console.print(f"Records: {len(records.items)}  Types: {len(types.items)}")
    console.print()

    if not shown:
        console.print("[green]No irregularities found[/]")
    else:
        console.print(_render_groups(shown))

    if args.output:
        report = build_report(shown, len(records.items), records.errors + types.errors)
        report.save(args.output)
        console.print()
        console.print(f"[green]Report saved to: {args.output}[/]")


def _run_standardize_command(args: argparse.Namespace) -> None:
    groups, _records, types = _load_and_classify(args)
    group = _find_group(groups, args.group)

    target = group.suggested_type
    if args.type_id:
        target = next((t for t in types.items if t.id == args.type_id), None)
        if target is None:
            msg = f"Unknown type {args.type_id}"
            raise IrregularityError(msg)

    plan = plan_standardization(group, target, config=DetectionConfig.from_env())

    console.print(f"[bold]Standardization preview - Group {group.index}[/]")
    console.print(f"Names found: {', '.join(group.names)}")
    console.print(f"New name: [green]{plan.new_name}[/]")
    console.print(f"New function: [green]{plan.new_function}[/]")
    console.print(f"Records to update ({len(plan.record_ids)}): {', '.join(plan.record_ids)}")


def _run_consolidate_command(args: argparse.Namespace) -> None:
    groups, records, _types = _load_and_classify(args)
    group = _find_group(groups, args.group)

    if group.severity is not Severity.DUPLICATE_TYPE:
        msg = f"Group {group.index}: only duplicate_type findings can be consolidated"
        raise IrregularityError(msg)

    counts = count_matching_records(group.types, records.items)
    survivor_id = args.survivor or recommend_survivor(group.types, records.items)

    table = Table(title=f"Duplicate types - Group {group.index}")
    table.add_column("Type")
    table.add_column("Label")
    table.add_column("Certifications", justify="right")
    for cert_type in group.types:
        marker = " [green](keep)[/]" if cert_type.id == survivor_id else ""
        table.add_row(f"{cert_type.id}{marker}", cert_type.label, str(counts[cert_type.id]))
    console.print(table)

    if survivor_id is None:
        console.print("[yellow]Counts are tied; choose a survivor with --survivor[/]")
        return

    plan = plan_group_consolidation(group, survivor_id)
    for repoint in plan.records_to_repoint:
        console.print(f"  {repoint.old_name} → {repoint.new_name}")
    console.print(f"Types to deactivate: {', '.join(plan.types_to_deactivate)}")


def _run_merge_command(args: argparse.Namespace) -> None:
    groups, _records, _types = _load_and_classify(args)
    plan = plan_merge(_find_group(groups, args.group))

    console.print(f"[bold]Merge preview - Group {plan.group_index}[/]")
    console.print(f"Keep (most recent): [green]{plan.keep_id}[/]")
    console.print(f"Remove: [red]{', '.join(plan.remove_ids)}[/]")


COMMANDS = {
    "scan": _run_scan_command,
    "standardize": _run_standardize_command,
    "consolidate": _run_consolidate_command,
    "merge": _run_merge_command,
}


def main(argv: list[str] | None = None) -> None:
    """Run the certscan CLI.

    Args:
        argv: Arguments to parse instead of ``sys.argv``.
    """
    # Load .env file for CERTSCAN_* overrides
    load_dotenv()

    args = _create_parser().parse_args(argv)

    try:
        COMMANDS[args.command](args)
    except (IrregularityError, OSError, json.JSONDecodeError, ValueError) as e:
        console.print(f"\n[red]Error: {e}[/]")
        raise SystemExit(1) from None


if __name__ == "__main__":
    main()
