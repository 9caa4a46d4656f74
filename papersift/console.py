"""Console UI for terminal output using Rich."""

from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from papersift.models.paper import PageInfo
from papersift.services.pager import page_window


class ConsoleUI:
    """Rich-based console UI for catalog/result display and notifications."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize console."""
        self.console = console or Console()

    def info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(message)

    def success(self, message: str) -> None:
        """Print a success message in green."""
        self.console.print(f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Print a warning message in yellow."""
        self.console.print(f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        """Print an error message in red."""
        self.console.print(f"[red]Error:[/red] {message}")

    def exported(self, count: int, path) -> None:
        """Print export summary."""
        self.console.print(
            f"[green]Exported[/green] {count} papers → [bold]{path}[/bold]"
        )

    def display_catalog(self, periods: dict[str, list[str]]) -> None:
        """Display collection → available periods."""
        if not periods:
            self.console.print("No data files found.")
            return

        table = Table(title="Available data")
        table.add_column("Collection")
        table.add_column("Periods", overflow="fold")
        for collection, years in periods.items():
            table.add_row(collection, ", ".join(years))
        self.console.print(table)

    def display_page(
        self,
        info: PageInfo,
        keywords: Sequence[str] = (),
    ) -> None:
        """Display one page of ranked papers in a formatted table.

        Args:
            info: Page to display
            keywords: Active search keywords (shown in the title)
        """
        title = f"Results (page {info.number}/{max(info.total_pages, 1)}, {info.total_items} papers)"
        if keywords:
            title += f" – keywords: {', '.join(keywords)}"

        if not info.items:
            self.console.print("No matching papers found.")
            return

        offset = (info.number - 1) * info.size
        table = Table(title=title)
        table.add_column("#", justify="right")
        table.add_column("Title", overflow="fold")
        table.add_column("Authors", overflow="fold", max_width=40)
        table.add_column("Rating", justify="right")
        table.add_column("Status", justify="right")
        if keywords:
            table.add_column("Matched", overflow="fold")
            table.add_column("Relevance", justify="right")

        for i, item in enumerate(info.items, start=offset + 1):
            paper = item.paper
            row = [
                str(i),
                paper.title,
                paper.authors,
                f"{paper.rating_score:g}" if paper.rating_score is not None else "-",
                str(paper.status_score) if paper.status_score else "-",
            ]
            if keywords:
                row.append(", ".join(item.matched_keywords))
                row.append(f"{item.relevance_score:.1f}")
            table.add_row(*row)

        self.console.print(table)

        window = page_window(info.number, info.total_pages)
        if window:
            pages = " ".join(
                "…" if n is None else (f"[bold][{n}][/bold]" if n == info.number else str(n))
                for n in window
            )
            self.console.print(f"Pages: {pages}")
