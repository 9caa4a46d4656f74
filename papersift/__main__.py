"""Entry point for running papersift as a module or installed script.

Usage:
    papersift / python -m papersift         → JSON web API (uvicorn)
    papersift <command> ... / python -m papersift <command> ... → CLI
"""

import sys

import uvicorn


def run() -> None:
    """Entry point: no args → web API (via uvicorn), else → CLI."""
    if len(sys.argv) == 1:
        uvicorn.run("papersift.gui.app:app", host="127.0.0.1", port=8000)
    else:
        from papersift.cli import run_cli
        run_cli()


if __name__ == "__main__":
    run()
