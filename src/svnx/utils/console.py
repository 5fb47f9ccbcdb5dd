from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from typing import Any, Dict, List

console = Console()


def success(message: str):
    """Display success message"""
    console.print(f"✔ {message}", style="bold green")


def error(message: str):
    """Display error message"""
    console.print(f"✖ {message}", style="bold red")


def warning(message: str):
    """Display warning message"""
    console.print(f"⚠  {message}", style="bold yellow")


def info(message: str):
    """Display info message"""
    console.print(f"{message}", style="cyan")


def plain(message: str, target: Console = None):
    """Print repository text as-is, without rich markup or highlighting"""
    (target or console).print(message, markup=False, highlight=False)


def create_table(title: str, columns: List[str]) -> Table:
    """Create a rich table"""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for column in columns:
        table.add_column(column)
    return table


def display_summary(title: str, rows: Dict[str, Any]):
    """Display a two-column table of name/value pairs"""
    table = create_table(title, ["Item", "Value"])
    for name, value in rows.items():
        table.add_row(name, str(value))
    console.print(table)


def display_panel(content: str, title: str, style: str = "blue"):
    """Display content in a panel"""
    console.print(Panel(content, title=title, border_style=style))
