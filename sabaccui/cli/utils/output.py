# sabaccui/cli/utils/output.py
"""Output formatting utilities"""

import json
from typing import Any, Dict, List, Optional, Tuple

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ...api.exceptions import SabaccUIError, ValidationFailedError
from ...models.result import ComponentInstallResult, MergeReport, TemplateInstallResult

console = Console()

# Catalog listing columns: (key, header)
CATALOG_COLUMNS = [
    ('key', 'Key'),
    ('name', 'Name'),
    ('description', 'Description'),
    ('version', 'Version'),
]


def format_table(data: List[Dict[str, Any]],
                 columns: List[Tuple[str, str]],
                 title: Optional[str] = None) -> Table:
    """Create a formatted table

    Args:
        data: List of dictionaries with data
        columns: List of (key, header) tuples
        title: Optional table title

    Returns:
        Rich Table object
    """
    table = Table(title=title, box=box.ROUNDED)

    for key, header in columns:
        table.add_column(header, style="cyan" if key == "key" else None)

    for item in data:
        row = []
        for key, _ in columns:
            value = item.get(key, "")
            row.append("" if value is None else str(value))
        table.add_row(*row)

    return table


def format_catalog_list(items: List[Dict[str, Any]], title: str) -> None:
    """Display templates or bloks returned by the catalog"""
    if not items:
        console.print(f"[yellow]No {title.lower()} found[/yellow]")
        return

    # Only show columns the catalog actually returned
    columns = [(key, header) for key, header in CATALOG_COLUMNS
               if any(key in item for item in items)]
    if not columns:
        columns = [(key, key.capitalize()) for key in items[0].keys()]

    console.print(format_table(items, columns, title=title))


def format_json(data: Any, title: Optional[str] = None) -> None:
    """Format and display JSON data with syntax highlighting"""
    json_str = json.dumps(data, indent=2, default=str)
    syntax = Syntax(json_str, "json", theme="monokai", line_numbers=False)

    if title:
        console.print(Panel(syntax, title=title, border_style="blue"))
    else:
        console.print(syntax)


def _merge_lines(report: MergeReport) -> List[str]:
    lines = []
    if report.copied:
        lines.append(f"[bold]Files copied:[/bold] {len(report.copied)}")
    if report.unchanged:
        lines.append(f"[bold]Files unchanged:[/bold] {len(report.unchanged)}")
    if report.conflicted:
        lines.append("[bold yellow]Kept local changes, new version saved next to:[/bold yellow]")
        lines.extend(f"  • {path}" for path in report.conflicted)
    if report.missing:
        lines.append("[bold yellow]Missing from artifact:[/bold yellow]")
        lines.extend(f"  • {path}" for path in report.missing)
    return lines


def format_component_result(result: ComponentInstallResult) -> None:
    """Format and display a blok installation result"""
    if not result.success:
        console.print(Panel(
            f"[red]✗ Installing {result.key} failed:[/red] {result.error}",
            title="Install Error",
            border_style="red"
        ))
        return

    lines = [f"[green]✓[/green] Blok [bold]{result.key}[/bold] installed", ""]
    lines.extend(_merge_lines(result.merge))

    if result.dependencies and not result.dependencies.nothing_to_do:
        installed = result.dependencies.installed + result.dependencies.installed_dev
        lines.append(f"[bold]Packages ({result.dependencies.package_manager}):[/bold] {' '.join(installed)}")

    if result.pushed:
        lines.append(f"[bold]Pushed to Storyblok:[/bold] {', '.join(result.pushed)}")

    console.print(Panel("\n".join(lines), title="Install Result", border_style="green"))


def format_template_result(result: TemplateInstallResult) -> None:
    """Format and display a template installation result"""
    lines = [
        f"[green]✓[/green] Project created in [bold]{result.project_dir}[/bold]",
        "",
    ]
    lines.extend(_merge_lines(result.merge))

    if result.components:
        lines.append("")
        lines.append(f"[bold]Components:[/bold] {len(result.installed_components)}/{len(result.components)}")
        for component in result.components:
            if component.success:
                lines.append(f"  [green]+ {component.key}[/green]")
            else:
                lines.append(f"  [red]- {component.key}[/red]: {component.error}")

    if result.migrations:
        lines.append(f"[bold]Migrations:[/bold] {', '.join(result.migrations)}")

    border = "yellow" if result.failed_components or result.warnings else "green"
    console.print(Panel("\n".join(lines), title="Template Result", border_style=border))

    for warning in result.warnings:
        print_warning(warning)


def print_sabaccui_error(error: SabaccUIError) -> None:
    """Print an error from the exception hierarchy, including field errors"""
    if isinstance(error, ValidationFailedError) and error.field_errors:
        print_error("Validation failed")
        for field, messages in error.field_errors.items():
            for message in messages:
                console.print(f"  • {field}: {message}")
        return

    print_error(str(error))
    if error.error_code:
        console.print(f"[dim]Error code: {error.error_code}[/dim]")


def print_error(message: str, error: Optional[Exception] = None) -> None:
    """Print error message"""
    if error:
        console.print(f"[red]Error:[/red] {message}: {str(error)}")
    else:
        console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    """Print warning message"""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def print_info(message: str) -> None:
    """Print info message"""
    console.print(f"[blue]Info:[/blue] {message}")


def print_success(message: str) -> None:
    """Print success message"""
    console.print(f"[green]Success:[/green] {message}")
