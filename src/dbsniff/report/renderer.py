from typing import Optional
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from ..domain.models import CheckStatus, GroupReport, SchemaPreview, SniffReport

SEPARATOR = "=" * 80

STATUS_STYLES = {
    CheckStatus.OK: "green",
    CheckStatus.NORMAL: "green",
    CheckStatus.GOOD: "green",
    CheckStatus.PASSED: "green",
    CheckStatus.WARNING: "yellow",
    CheckStatus.BAD: "red",
    CheckStatus.FAILED: "red",
}

def _separator(console: Console) -> None:
    console.print(SEPARATOR, style="blue")

def render_schema(preview: SchemaPreview, console: Console) -> None:
    console.print("\nTables in the database:")
    for table_schema in preview.tables:
        table = Table(title=escape(table_schema.table_name), title_justify="left")
        for header in ("Column", "Type", "Null", "Key", "Default", "Extra"):
            table.add_column(header)
        for col in table_schema.columns:
            table.add_row(
                escape(col.name),
                escape(col.data_type),
                "YES" if col.is_nullable else "NO",
                col.key,
                escape(col.default) if col.default is not None else "",
                escape(col.extra),
            )
        console.print(table)
        total = table_schema.total_columns
        if total is not None and total > len(table_schema.columns):
            console.print(f"Showing {len(table_schema.columns)} of {total} columns.", markup=False)

    if preview.hidden_tables:
        console.print(
            f"\nDisplayed {len(preview.tables)} of {preview.total_tables} tables. "
            "For more details, check the database directly."
        )

def render_group(group: GroupReport, console: Console) -> None:
    console.print(f"\nRunning {group.name} checks...", style="cyan")
    if group.rows:
        table = Table()
        for header in ("Check", "Value", "Status", "Remarks"):
            table.add_column(header)
        for row in group.rows:
            table.add_row(
                escape(row.check),
                escape(row.value),
                f"[{STATUS_STYLES[row.status]}]{row.status.value}[/]",
                escape(row.remark),
            )
        console.print(table)
    if group.error:
        console.print(f"{group.title} checks failed: {group.error}", markup=False, highlight=False)

def render_report(report: SniffReport, console: Optional[Console] = None) -> None:
    console = console or Console()

    if report.schema_preview is not None:
        render_schema(report.schema_preview, console)
    elif report.schema_error:
        console.print(report.schema_error, markup=False, highlight=False)

    for group in report.groups:
        _separator(console)
        render_group(group, console)

    if report.has_errors:
        console.print("\nSome checks could not be completed, see the errors above.", style="bold yellow")
    else:
        console.print(
            "\nAll checks completed successfully but for more details please check their "
            "respective tables, this is where you will find the nuggets.",
            style="bold bright_yellow",
        )
