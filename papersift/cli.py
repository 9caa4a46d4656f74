"""Command-line interface handlers."""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn

from papersift.config import Settings
from papersift.console import ConsoleUI
from papersift.services.export_service import MarkdownExporter
from papersift.services.session import InvalidCoordinateError, SearchSession
from papersift.services.transport import TransportError, make_transport


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through Rich (WARNING, or DEBUG with -v)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


class PaperSiftCLI:
    """CLI application for PaperSift."""

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize CLI with settings.

        Args:
            settings: Application settings (loads from disk if not provided)
        """
        self.settings = settings or Settings.load()
        self.ui = ConsoleUI()

    def _transport(self):
        return make_transport(self.settings.data_root, timeout=self.settings.fetch_timeout)

    async def _discover(self, session: SearchSession) -> None:
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            console=self.ui.console,
            transient=True,
        ) as progress:
            progress.add_task("Scanning data files...", total=None)
            await session.discover()

    async def _load(
        self,
        session: SearchSession,
        collection: str,
        period: str,
        keywords: list[str],
    ) -> None:
        for kw in keywords:
            session.add_keyword(kw)
        await session.load(collection, period)

    def cmd_catalog(self) -> None:
        """Discover available data files and print the catalog."""

        async def run() -> None:
            async with self._transport() as transport:
                session = SearchSession(transport, self.settings, sink=self.ui)
                await self._discover(session)
                self.ui.display_catalog(session.catalog_periods())

        asyncio.run(run())

    def cmd_search(
        self,
        collection: str,
        period: str,
        keywords: list[str],
        page: int = 1,
    ) -> None:
        """Load one collection/period, rank it and print one page.

        Args:
            collection: Collection id (any case)
            period: Period, e.g. ``2024``
            keywords: Search keywords (empty → browse order)
            page: Page number (clamped to the valid range)
        """

        async def run() -> None:
            async with self._transport() as transport:
                session = SearchSession(transport, self.settings, sink=self.ui)
                await self._load(session, collection, period, keywords)
                self.ui.display_page(session.page_info(page), session.keywords)

        asyncio.run(run())

    def cmd_export(
        self,
        collection: str,
        period: str,
        keywords: list[str],
    ) -> None:
        """Load, rank and export every result to Markdown."""

        async def run() -> None:
            async with self._transport() as transport:
                session = SearchSession(transport, self.settings, sink=self.ui)
                await self._load(session, collection, period, keywords)
                exporter = MarkdownExporter(self.settings.export_dir)
                label = f"{collection.upper()}-{period}"
                path = exporter.export(session.results, session.keywords, label)
                self.ui.exported(len(session.results), path)

        asyncio.run(run())


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="papersift",
        description="Conference JSON dumps → keyword search → ranked pages",
    )
    parser.add_argument(
        "--data-root",
        help="Local directory or http(s) URL holding the data files",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Per-probe timeout in seconds (default: 3)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # catalog command
    subparsers.add_parser("catalog", help="List collections and periods with data")

    # search command
    search_parser = subparsers.add_parser("search", help="Search one collection/period")
    _add_selection_args(search_parser)
    search_parser.add_argument(
        "--page",
        type=int,
        default=1,
        help="Page number (default: 1)",
    )
    search_parser.add_argument(
        "--page-size",
        type=int,
        help="Results per page (default: from settings)",
    )

    # export command
    export_parser = subparsers.add_parser("export", help="Export ranked results to markdown")
    _add_selection_args(export_parser)

    return parser


def _add_selection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("collection", help="Collection id, e.g. ICLR")
    parser.add_argument("period", help="Period, e.g. 2024")
    parser.add_argument(
        "-k", "--keyword",
        action="append",
        default=[],
        dest="keywords",
        help="Search keyword (repeatable)",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    settings = Settings.load()
    if args.data_root:
        settings.update(data_root=args.data_root)
    if args.timeout is not None:
        settings.update(probe_timeout=args.timeout)
    if getattr(args, "page_size", None) is not None:
        if args.page_size < 1:
            parser.error("--page-size must be >= 1")
        settings.update(page_size=args.page_size)

    cli = PaperSiftCLI(settings)

    try:
        if args.command == "catalog":
            cli.cmd_catalog()
        elif args.command == "search":
            cli.cmd_search(args.collection, args.period, args.keywords, args.page)
        elif args.command == "export":
            cli.cmd_export(args.collection, args.period, args.keywords)
    except (TransportError, InvalidCoordinateError):
        # Already reported by the session
        return 1
    return 0


def run_cli() -> None:
    sys.exit(main())
