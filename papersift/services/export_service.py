"""Markdown export service."""

from datetime import date
from pathlib import Path
from typing import Sequence

from papersift.models.paper import RankedPaper


class MarkdownExporter:
    """Service for exporting ranked results to Markdown format."""

    def __init__(self, export_dir: Path):
        """Initialize exporter.

        Args:
            export_dir: Directory to save exported markdown files
        """
        self.export_dir = export_dir
        self.export_dir.mkdir(parents=True, exist_ok=True)

    def export(
        self,
        results: Sequence[RankedPaper],
        keywords: Sequence[str] = (),
        label: str = "results",
    ) -> Path:
        """Export ranked papers to a markdown file named by label and date.

        Args:
            results: Ranked papers, in display order
            keywords: Search keywords the results were ranked for
            label: File name prefix, e.g. ``ICLR-2024``

        Returns:
            Path to the created markdown file
        """
        today = date.today().isoformat()
        filepath = self.export_dir / f"{label}-{today}.md"

        lines = [f"# {label}", ""]
        if keywords:
            lines.append(f"Keywords: {', '.join(keywords)}")
        lines.append(f"Papers: {len(results)}")
        lines.append("")

        for rank, item in enumerate(results, start=1):
            paper = item.paper
            lines.append(f"## {rank}. {paper.title}")
            lines.append(f"- Authors: {paper.authors}")
            if paper.venue:
                lines.append(f"- Venue: {paper.venue}")
            if paper.rating_score is not None:
                lines.append(f"- Rating: {paper.rating_score:g}")
            if paper.status_score:
                status = ", ".join(
                    s for s in (paper.status, paper.presentation, paper.award) if s
                )
                lines.append(f"- Status: {status or '-'} ({paper.status_score})")
            if item.matched_keywords:
                lines.append(f"- Matched: {', '.join(item.matched_keywords)}")
            if paper.pdf_url:
                lines.append(f"- PDF: {paper.pdf_url}")
            if paper.url and paper.url != paper.pdf_url:
                lines.append(f"- Link: {paper.url}")
            lines.append("")

        # Write to file (overwrites if exists)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write("\n".join(lines))

        return filepath
