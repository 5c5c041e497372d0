"""CottonTrace CLI.

Commands:
- batches: List batches with filters, sorting and paging
- compliance: List compliance batches, or approve/hold one
- isotopes: List isotope verification results
- summary: Show dashboard metrics and open alerts
- export: Write batches, compliance or isotope results to a file
- serve: Run the HTTP API
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from cottontrace.config import get_config
from cottontrace.context import ServiceContext
from cottontrace.exceptions import CottonTraceError
from cottontrace.models import ActionStatus, ReportFormat
from cottontrace.pipeline.filters import (
    BatchFilter,
    ComplianceFilter,
    IsotopeFilter,
    filter_batches,
    filter_compliance,
    filter_isotopes,
)
from cottontrace.pipeline.pagination import ListView, page_window
from cottontrace.pipeline.sorting import (
    BatchSortField,
    ComplianceSortField,
    IsotopeSortField,
    SortDirection,
    SortState,
    sort_records,
)
from cottontrace.reporting.dashboard_metrics import compute_dashboard_metrics
from cottontrace.reporting.export_utils import format_score
from cottontrace.reporting.reports import export_filename, render_export

app = typer.Typer(
    name="cottontrace",
    help="CottonTrace - cotton supply-chain traceability and compliance",
    no_args_is_help=True,
)

console = Console()


class Dataset(str, Enum):
    BATCHES = "batches"
    COMPLIANCE = "compliance"
    ISOTOPES = "isotopes"


def _run(coro):
    """Run ``coro`` and turn domain errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except CottonTraceError as e:
        console.print(f"[bold red]✗[/bold red] {e}")
        raise typer.Exit(code=1) from e


def _print_pager(page) -> None:
    window = page_window(page.page, page.total_pages, get_config().pagination.window)
    console.print(
        f"Showing {page.showing_from}-{page.showing_to} of {page.total} "
        f"(page {page.page}/{page.total_pages}; pages {window[0]}-{window[-1]})",
        style="dim",
    )


def _status_style(status: str) -> str:
    return {
        "verified": "green",
        "approved": "green",
        "pending": "yellow",
        "hold": "yellow",
        "failed": "red",
    }.get(status, "white")


@app.command()
def batches(
    search: str | None = typer.Option(None, "--search", "-s", help="Search id, farm or region"),
    region: str | None = typer.Option(None, "--region", help="Exact growing region"),
    status: str | None = typer.Option(None, "--status", help="Labour verification status"),
    min_score: float | None = typer.Option(None, "--min-score", help="Minimum sustainability score"),
    grade: str | None = typer.Option(None, "--grade", help="Quality grade"),
    sort: BatchSortField = typer.Option(BatchSortField.HARVEST_DATE, "--sort"),
    direction: SortDirection = typer.Option(SortDirection.DESC, "--direction"),
    page: int = typer.Option(1, "--page", min=1),
):
    """List batches."""
    config = get_config()
    criteria = BatchFilter(
        search=search,
        region=region,
        compliance_status=status,
        sustainability_score_min=min_score,
        quality_grade=grade,
    )

    async def _batches():
        ctx = ServiceContext.from_config(config)
        try:
            rows = await ctx.batches.ensure_loaded()
        finally:
            await ctx.aclose()
        view = ListView(
            criteria=criteria,
            sort=SortState(sort, direction),
            page_size=config.pagination.page_size,
        )
        view.go_to(page, rows)
        return view.current_page(rows)

    current = _run(_batches())
    if not current.total:
        console.print("[yellow]No batches match the filters[/yellow]")
        return

    table = Table(title="Batches")
    table.add_column("Batch", style="cyan")
    table.add_column("Farm")
    table.add_column("Region")
    table.add_column("Harvested")
    table.add_column("Grade", justify="center")
    table.add_column("Labour", justify="center")
    table.add_column("Score", justify="right")

    for batch in current.items:
        labor = batch.compliance_status.forced_labor_verification.status
        table.add_row(
            batch.id,
            batch.farm_name,
            batch.location.region,
            batch.harvest_date.strftime("%Y-%m-%d"),
            batch.quality.grade,
            f"[{_status_style(labor)}]{labor}[/]",
            str(batch.sustainability_score),
        )

    console.print(table)
    _print_pager(current)


@app.command()
def compliance(
    search: str | None = typer.Option(None, "--search", "-s", help="Search batch, origin or notes"),
    action: ActionStatus | None = typer.Option(None, "--action", help="Filter by approve/hold"),
    approve: str | None = typer.Option(None, "--approve", help="Approve this batch id"),
    hold: str | None = typer.Option(None, "--hold", help="Put this batch id on hold"),
    note: str | None = typer.Option(None, "--note", help="Note for the status change"),
    by: str | None = typer.Option(None, "--by", help="Reviewer recorded in the history"),
    page: int = typer.Option(1, "--page", min=1),
):
    """List compliance batches, or approve/hold one."""
    config = get_config()
    if approve and hold:
        raise typer.BadParameter("Use either --approve or --hold, not both")

    async def _compliance():
        ctx = ServiceContext.from_config(config)
        try:
            rows = await ctx.compliance.ensure_loaded()
            if approve or hold:
                updated = await ctx.compliance.update_action_status(
                    approve or hold,
                    ActionStatus.APPROVED if approve else ActionStatus.HOLD,
                    updated_by=by or config.default_user,
                    note=note,
                )
                return updated, None
        finally:
            await ctx.aclose()
        view = ListView(
            criteria=ComplianceFilter(search=search, action_status=action),
            sort=SortState(ComplianceSortField.PROCESSING_DATE, SortDirection.DESC),
            page_size=config.pagination.page_size,
        )
        view.go_to(page, rows)
        return None, view.current_page(rows)

    updated, current = _run(_compliance())
    if updated is not None:
        console.print(
            f"[bold green]✓[/bold green] {updated.batch_id} set to "
            f"[{_status_style(updated.action_status.value)}]{updated.action_status.value}[/] "
            f"by {updated.updated_by}"
        )
        return

    table = Table(title="Compliance")
    table.add_column("Batch", style="cyan")
    table.add_column("Origin")
    table.add_column("Processed")
    table.add_column("Certification", justify="center")
    table.add_column("Action", justify="center")
    table.add_column("Issues", style="yellow")

    for record in current.items:
        table.add_row(
            record.batch_id,
            f"{record.origin.location}, {record.origin.country}",
            record.processing_date.strftime("%Y-%m-%d"),
            f"[{_status_style(record.certification_status)}]{record.certification_status}[/]",
            f"[{_status_style(record.action_status.value)}]{record.action_status.value}[/]",
            ", ".join(record.pending_issues or []) or "-",
        )

    console.print(table)
    _print_pager(current)


@app.command()
def isotopes(
    search: str | None = typer.Option(None, "--search", "-s", help="Search batch, farm or region"),
    status: str | None = typer.Option(None, "--status", help="Verification status"),
    min_confidence: float | None = typer.Option(None, "--min-confidence"),
    sort: IsotopeSortField = typer.Option(IsotopeSortField.TEST_DATE, "--sort"),
    direction: SortDirection = typer.Option(SortDirection.DESC, "--direction"),
    page: int = typer.Option(1, "--page", min=1),
):
    """List isotope verification results."""
    config = get_config()
    criteria = IsotopeFilter(
        search=search, verification_status=status, confidence_min=min_confidence
    )

    async def _isotopes():
        ctx = ServiceContext.from_config(config)
        try:
            rows = await ctx.isotopes.ensure_loaded()
        finally:
            await ctx.aclose()
        view = ListView(
            criteria=criteria,
            sort=SortState(sort, direction),
            page_size=config.pagination.page_size,
        )
        view.go_to(page, rows)
        return view.current_page(rows)

    current = _run(_isotopes())

    table = Table(title="Isotope Analysis")
    table.add_column("Batch", style="cyan")
    table.add_column("Farm")
    table.add_column("Region")
    table.add_column("δ13C", justify="right")
    table.add_column("δ15N", justify="right")
    table.add_column("δ18O", justify="right")
    table.add_column("δ2H", justify="right")
    table.add_column("Confidence", justify="right")
    table.add_column("Status", justify="center")

    for record in current.items:
        table.add_row(
            record.batch_id,
            record.farm_name,
            record.location.region,
            f"{record.isotopes.carbon:.2f}",
            f"{record.isotopes.nitrogen:.2f}",
            f"{record.isotopes.oxygen:.2f}",
            f"{record.isotopes.hydrogen:.2f}",
            f"{record.confidence_score:.1f}%",
            f"[{_status_style(record.verification_status)}]{record.verification_status}[/]",
        )

    console.print(table)
    _print_pager(current)


@app.command()
def summary():
    """Show dashboard metrics and open alerts."""
    config = get_config()

    async def _summary():
        ctx = ServiceContext.from_config(config)
        try:
            rows = await ctx.batches.ensure_loaded()
        finally:
            await ctx.aclose()
        return compute_dashboard_metrics(
            rows,
            top_supplier_count=config.analytics.top_supplier_count,
            cert_expiry_warning_days=config.analytics.cert_expiry_warning_days,
        )

    metrics = _run(_summary())

    console.print("\n[bold]Compliance Overview:[/bold]")
    console.print(f"  Total batches: {metrics.total_batches}")
    console.print(f"  Compliant: [green]{metrics.compliant_batches}[/green]")
    console.print(f"  Pending verification: [yellow]{metrics.pending_verification}[/yellow]")
    console.print(f"  Non-compliant: [red]{metrics.non_compliant_batches}[/red]")
    console.print(
        f"  Average sustainability score: {format_score(metrics.average_sustainability_score)}"
    )

    if metrics.top_suppliers:
        table = Table(title="Top Suppliers")
        table.add_column("Farm", style="cyan")
        table.add_column("Score", justify="right")
        table.add_column("Batches", justify="right")
        for supplier in metrics.top_suppliers:
            table.add_row(supplier["name"], f"{supplier['score']:.1f}", str(supplier["batches"]))
        console.print(table)

    if metrics.recent_alerts:
        console.print("\n[bold]Alerts:[/bold]")
        colours = {"high": "red", "medium": "yellow", "low": "blue"}
        for alert in metrics.recent_alerts:
            colour = colours[alert.severity]
            console.print(f"  [{colour}]⚠[/{colour}] {alert.message}")


@app.command()
def export(
    dataset: Dataset = typer.Argument(Dataset.BATCHES, help="What to export"),
    format: ReportFormat = typer.Option(ReportFormat.CSV, "--format", "-f"),
    output: Path | None = typer.Option(None, "--out", "-o", help="Output file"),
    search: str | None = typer.Option(None, "--search", "-s", help="Search filter"),
    region: str | None = typer.Option(None, "--region", help="Region filter"),
):
    """Export every record matching the filters (not just one page)."""
    config = get_config()

    async def _export():
        ctx = ServiceContext.from_config(config)
        try:
            if dataset is Dataset.BATCHES:
                criteria = BatchFilter(search=search, region=region)
                rows = sort_records(
                    filter_batches(await ctx.batches.ensure_loaded(), criteria),
                    BatchSortField.HARVEST_DATE,
                    SortDirection.DESC,
                )
                return rows, criteria, "Batch Traceability Report"
            if dataset is Dataset.COMPLIANCE:
                criteria = ComplianceFilter(search=search, origin=region)
                rows = sort_records(
                    filter_compliance(await ctx.compliance.ensure_loaded(), criteria),
                    ComplianceSortField.PROCESSING_DATE,
                    SortDirection.DESC,
                )
                return rows, criteria, "Compliance Report"
            criteria = IsotopeFilter(search=search, region=region)
            rows = sort_records(
                filter_isotopes(await ctx.isotopes.ensure_loaded(), criteria),
                IsotopeSortField.TEST_DATE,
                SortDirection.DESC,
            )
            return rows, criteria, "Isotope Analysis Report"
        finally:
            await ctx.aclose()

    rows, criteria, title = _run(_export())
    try:
        content = render_export(rows, format, title, criteria)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    if output is None:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output = config.export_root / export_filename(f"{dataset.value}_{stamp}", format)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(content)
    console.print(f"[bold green]✓[/bold green] Exported {len(rows)} records to: {output}")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Host to bind"),
    port: int = typer.Option(8000, help="Port to bind"),
    reload: bool = typer.Option(False, help="Enable autoreload (dev only)"),
):
    """Run the HTTP API."""
    import uvicorn

    typer.echo(f"Starting CottonTrace API on http://{host}:{port}")
    uvicorn.run(
        "cottontrace.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=1,
    )


if __name__ == "__main__":
    app()
