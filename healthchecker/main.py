"""Entry point for the health checker: API server, one-off runs and exports."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from healthchecker.config import settings
from healthchecker.health.errors import UnknownCategoryError, UnknownSlugError
from healthchecker.health.filters import STATUS_ALL, STATUS_ISSUES
from healthchecker.health.models import HealthCheckResult, HealthStatus
from healthchecker.reports.markdown import strip_html
from healthchecker.service import HealthService, build_service

console = Console()

STATUS_STYLES = {
    HealthStatus.CRITICAL: "bold red",
    HealthStatus.WARNING: "yellow",
    HealthStatus.GOOD: "green",
}

FORMAT_ALIASES = {"md": "md", "markdown": "md", "html": "html", "json": "json"}


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )


def run_server() -> None:
    """Start the FastAPI server."""
    console.print(Panel("Starting Health Checker API Server", style="bold green"))
    uvicorn.run(
        "healthchecker.api.server:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )


def print_results(service: HealthService, results: list[HealthCheckResult]) -> None:
    runner = service.runner
    table = Table(title=f"Health Report - {service.site_name}")
    table.add_column("Status")
    table.add_column("Category")
    table.add_column("Check")
    table.add_column("Description", overflow="fold")

    for category, group in runner.aggregate(results).by_category.items():
        label = runner.categories.label(category)
        for r in group:
            style = STATUS_STYLES[r.health_status]
            table.add_row(
                f"[{style}]{r.health_status.value.upper()}[/{style}]",
                label,
                r.title,
                strip_html(r.description),
            )
    console.print(table)

    counts = runner.aggregate(results).counts
    console.print(
        f"\n[bold red]{counts.critical} critical[/bold red] | "
        f"[yellow]{counts.warning} warning[/yellow] | "
        f"[green]{counts.good} good[/green] | {counts.total} total"
    )


def run_checks(category: str | None, check: str | None) -> int:
    service = build_service(settings)
    try:
        if check:
            results = [service.runner.run_single_check(check)]
        elif category:
            results = service.runner.run_category(category)
        else:
            results = service.runner.run_all()
    except (UnknownSlugError, UnknownCategoryError) as e:
        console.print(f"[bold red]{e}[/bold red]")
        return 2
    finally:
        service.close()

    print_results(service, results)
    return 1 if any(r.health_status is HealthStatus.CRITICAL for r in results) else 0


def run_export(
    fmt: str,
    output: str | None,
    issues_only: bool,
    categories: list[str],
    checks: list[str],
) -> int:
    service = build_service(settings)
    try:
        exported = service.export(
            FORMAT_ALIASES[fmt],
            STATUS_ISSUES if issues_only else STATUS_ALL,
            categories,
            checks,
        )
    finally:
        service.close()

    if output == "-":
        sys.stdout.write(exported.content)
        return 0

    path = Path(output or exported.filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(exported.content, encoding="utf-8")
    console.print(f"[green]Report written to[/green] {path}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Health Checker")
    sub = parser.add_subparsers(dest="command")

    # Server mode
    sub.add_parser("serve", help="Start the API server")

    # One-off run
    run_parser = sub.add_parser("run", help="Run checks and print the results")
    target = run_parser.add_mutually_exclusive_group()
    target.add_argument("--category", help="Only run this category")
    target.add_argument("--check", help="Only run this check slug")

    # Export
    export_parser = sub.add_parser("export", help="Run all checks and write a report")
    export_parser.add_argument("--format", choices=sorted(FORMAT_ALIASES), default="html")
    export_parser.add_argument("-o", "--output", help="Output file ('-' for stdout)")
    export_parser.add_argument("--issues", action="store_true", help="Only critical and warning results")
    export_parser.add_argument("--category", action="append", default=[], help="Repeatable")
    export_parser.add_argument("--check", action="append", default=[], help="Repeatable")

    args = parser.parse_args()
    configure_logging()

    if args.command == "serve":
        run_server()
    elif args.command == "run":
        sys.exit(run_checks(args.category, args.check))
    elif args.command == "export":
        sys.exit(run_export(args.format, args.output, args.issues, args.category, args.check))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
