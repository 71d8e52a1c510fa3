"""
CLI (Command Line Interface).

Quick terminal commands for trying the search engine against live endpoints:

    coursefinder search --query intro --grade 1 --day 월 --time 1
    coursefinder majors
    coursefinder slots

Note:
- Output is rendered with rich; catalog text is always printed literally
- Exit codes: 0 ok, 1 catalog could not be loaded, 2 usage error
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from coursefinder.catalog import CatalogLoader
from coursefinder.config import (
    CREDIT_OPTIONS,
    DAY_LABELS,
    GRADES,
    LIBERAL_ARTS_URL,
    MAJORS_URL,
    PAGE_SIZE,
    REQUEST_TIMEOUT,
    TIME_SLOTS,
)
from coursefinder.filtering import FilterEngine
from coursefinder.model import Catalog, CourseRecord, SearchCriteria, major_display, major_label
from coursefinder.pagination import PaginationController

console = Console()


def _load_catalog(args: argparse.Namespace) -> Catalog | None:
    """
    Load the merged catalog. Returns None (after printing why) on failure.
    """
    loader = CatalogLoader(urls=(args.majors_url, args.liberal_arts_url), timeout=args.timeout)
    catalog = asyncio.run(loader.load())
    if loader.last_error is not None:
        console.print(Text(f"Could not load the catalog: {loader.last_error}", style="red"))
        return None
    return catalog


def _criteria_from_args(args: argparse.Namespace) -> SearchCriteria:
    criteria = SearchCriteria()
    criteria = criteria.replace("query", args.query)
    criteria = criteria.replace("grades", args.grade or [])
    criteria = criteria.replace("days", args.day or [])
    criteria = criteria.replace("times", args.time or [])
    criteria = criteria.replace("majors", args.major or [])
    return criteria.replace("credits", args.credits)


def _results_table(courses: Sequence[CourseRecord]) -> Table:
    table = Table(show_lines=False)
    table.add_column("Code")
    table.add_column("Grade", justify="right")
    table.add_column("Title")
    table.add_column("Credits", justify="right")
    table.add_column("Major")
    table.add_column("Schedule")

    # Text() keeps catalog strings literal (no rich markup interpretation)
    for c in courses:
        table.add_row(
            Text(c.id),
            str(c.grade),
            Text(c.title),
            Text(c.credits),
            Text(c.major_display),
            Text(c.schedule),
        )
    return table


def _cmd_search(args: argparse.Namespace) -> int:
    """
    Filter the catalog and print the first --pages pages of results.
    """
    if args.pages < 1:
        console.print("--pages must be at least 1.")
        return 2

    catalog = _load_catalog(args)
    if catalog is None:
        return 1

    view = FilterEngine().filter(catalog, _criteria_from_args(args))
    pagination = PaginationController(page_size=args.page_size)

    window = pagination.current_window(view)
    for _ in range(args.pages - 1):
        if not pagination.advance():
            break
        window = pagination.current_window(view)

    if not view:
        console.print("No results.")
        return 0

    console.print(_results_table(window))
    console.print(
        f"Results: {len(view)} | showing {len(window)} (page {pagination.page}/{pagination.last_page})"
    )
    return 0


def _cmd_majors(args: argparse.Namespace) -> int:
    """
    List every distinct major in the merged catalog.
    """
    catalog = _load_catalog(args)
    if catalog is None:
        return 1

    majors = catalog.majors()
    table = Table()
    table.add_column("Label")
    table.add_column("Major")
    for major in majors:
        table.add_row(Text(major_label(major)), Text(major_display(major)))
    console.print(table)
    console.print(f"{len(majors)} majors")
    return 0


def _cmd_slots(args: argparse.Namespace) -> int:
    """
    Print the time-slot table used by --time.
    """
    table = Table(title="Time slots")
    table.add_column("Slot", justify="right")
    table.add_column("Period")
    for slot_id, label in TIME_SLOTS.items():
        table.add_row(str(slot_id), label)
    console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="coursefinder", description="Course catalog search")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    endpoints = argparse.ArgumentParser(add_help=False)
    endpoints.add_argument("--majors-url", default=MAJORS_URL, help="Majors catalog JSON URL")
    endpoints.add_argument("--liberal-arts-url", default=LIBERAL_ARTS_URL, help="Liberal arts catalog JSON URL")
    endpoints.add_argument("--timeout", type=float, default=REQUEST_TIMEOUT, help="Request timeout in seconds")

    p_search = sub.add_parser("search", parents=[endpoints], help="Search for courses")
    p_search.add_argument("--query", "-q", default="", help="Text to match in course code or title")
    p_search.add_argument("--grade", type=int, action="append", choices=GRADES, help="Grade (repeatable)")
    p_search.add_argument("--day", action="append", choices=DAY_LABELS, help="Weekday (repeatable)")
    p_search.add_argument("--time", type=int, action="append", choices=list(TIME_SLOTS), help="Slot id (repeatable)")
    p_search.add_argument("--major", action="append", help="Major exactly as in the catalog (repeatable)")
    p_search.add_argument("--credits", type=int, choices=CREDIT_OPTIONS, help="Credit count")
    p_search.add_argument("--pages", type=int, default=1, help="Number of pages to show")
    p_search.add_argument("--page-size", type=int, default=PAGE_SIZE, help=argparse.SUPPRESS)

    sub.add_parser("majors", parents=[endpoints], help="List majors in the catalog")
    sub.add_parser("slots", help="Show the time-slot table")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s  %(message)s",
    )

    if args.command == "search":
        raise SystemExit(_cmd_search(args))
    if args.command == "majors":
        raise SystemExit(_cmd_majors(args))
    if args.command == "slots":
        raise SystemExit(_cmd_slots(args))

    raise SystemExit(2)
