# ABOUTME: Rich table utilities for the interactive CLI
# ABOUTME: Pre-configured tables for logging status, rank scans and flattened world status

from collections.abc import Sequence
from typing import Any

from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table


def create_key_value_table(
    title: str,
    data: dict[str, str],
    title_style: str = "bold cyan",
    key_style: str = "bold blue",
    value_style: str = "green",
    box_style=ROUNDED,
) -> Table:
    """Create a two-column key/value table.

    Args:
        title: Table title
        data: Dictionary of key-value pairs to display
        title_style: Style for the table title
        key_style: Style for the key column
        value_style: Style for the value column
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style="bold magenta",
        border_style="cyan",
        title_justify="left",
        expand=False,
    )

    table.add_column("Field", style=key_style, width=None, no_wrap=False)
    table.add_column("Value", style=value_style, width=None, no_wrap=False)

    for key, value in data.items():
        table.add_row(key, str(value))

    return table


def create_multi_column_table(
    title: str,
    columns: list[tuple[str, str]],
    rows: list[list[str]],
    title_style: str = "bold cyan",
    header_style: str = "bold magenta",
    alternate_row_styles: list[str] | None = None,
    box_style=ROUNDED,
) -> Table:
    """Create a multi-column table with zebra striping.

    Args:
        title: Table title
        columns: List of (column_name, column_style) tuples
        rows: List of row data
        title_style: Style for the table title
        header_style: Style for column headers
        alternate_row_styles: Alternating row styles
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style=header_style,
        border_style="cyan",
        title_justify="left",
        row_styles=alternate_row_styles or ["", "dim"],
        expand=True,
    )

    for name, style in columns:
        table.add_column(name, style=style)

    for row in rows:
        table.add_row(*row)

    return table


def create_rank_table(ranks: Sequence[Any], total_pages: int, pages_checked: Sequence[int]) -> Table:
    """Create a table of discovered free company ranks in hierarchy order."""
    columns = [
        ("#", "cyan"),
        ("Rank", "bold white"),
        ("Members Seen", "yellow"),
        ("Icon", "dim white"),
    ]
    rows = [
        [str(position), rank.name, str(rank.member_count), rank.icon_url or "-"]
        for position, rank in enumerate(ranks, start=1)
    ]

    return create_multi_column_table(
        title=f"🏅 Ranks ({len(pages_checked)} of {total_pages} pages checked)",
        columns=columns,
        rows=rows,
    )


def create_world_status_table(worlds: Sequence[Any]) -> Table:
    """Create a table with one row per world."""
    columns = [
        ("World", "bold white"),
        ("Data Center", "cyan"),
        ("Region", "magenta"),
        ("Status", "green"),
        ("Category", "yellow"),
        ("New Characters", "blue"),
    ]

    rows = []
    for world in worlds:
        if world.creation_open is None:
            creation = "-"
        else:
            creation = "[bold green]✅[/bold green]" if world.creation_open else "[red]❌[/red]"
        rows.append(
            [
                world.name or "-",
                world.data_center or "-",
                world.region.name or "-",
                world.status or "-",
                world.category or "-",
                creation,
            ]
        )

    return create_multi_column_table(title="🌐 World Status", columns=columns, rows=rows)


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Create a logging configuration status table.

    Args:
        status: Logging status dictionary

    Returns:
        Styled logging configuration table
    """
    logging_data = {
        "🔧 Mode": status["mode"].title(),
        "📁 Log Directory": status["log_directory"] or "N/A (production mode)",
        "🔇 Suppressed Libraries": ", ".join(status["third_party_suppressed"]),
    }

    if status["log_files"]["main"]:
        logging_data["📝 Main Log"] = status["log_files"]["main"]
    if status["log_files"]["json"]:
        logging_data["📊 JSON Log"] = status["log_files"]["json"]
    if status["log_files"]["errors"]:
        logging_data["🚨 Error Log"] = status["log_files"]["errors"]

    return create_key_value_table(title="🔍 Logging Configuration", data=logging_data)


def print_rich_table(console: Console, table: Table) -> None:
    """Print a rich table with consistent spacing."""
    console.print()
    console.print(table)
    console.print()
