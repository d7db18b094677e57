"""
CLI for superdb-mcp

This module provides a command-line interface to run the MCP server and to
exercise the language server integration by hand.
"""

import argparse
import asyncio
import json
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config.logging import setup_logging
from .config.settings import get_settings
from .lsp.context import LSPContext
from .lsp.tools import super_complete, super_docs, super_lsp_status

# stdout belongs to the MCP stream while serving
console = Console(stderr=True)


def serve_command(args):
    """Run the MCP server on stdio."""
    from .server import SuperDBMCPServer

    settings = get_settings()
    errors = settings.validate()
    if errors:
        for error in errors:
            console.print(f"[red]Error: {error}[/red]")
        sys.exit(1)

    SuperDBMCPServer(settings).run()


def lsp_status_command(args):
    """Show whether the language server is usable."""
    status = super_lsp_status(LSPContext(get_settings().lsp))

    if args.json:
        print(json.dumps(status.model_dump(mode="json"), indent=2))
        return

    if status.available:
        console.print(f"[green]SuperDB LSP available:[/green] {status.path}")
        return

    console.print(f"[yellow]SuperDB LSP not available:[/yellow] {status.error}")
    if status.setup:
        steps = "\n".join(f"{i}. {step}" for i, step in enumerate(status.setup.install_steps, 1))
        console.print(Panel(
            f"{status.setup.recommendation}\n\n{steps}\n\nReleases: {status.setup.releases_url}",
            title="[bold]Setup[/bold]",
            border_style="yellow",
        ))
    sys.exit(1)


def complete_command(args):
    """Print completions at a position."""
    result = asyncio.run(
        super_complete(args.query, args.line, args.character, LSPContext(get_settings().lsp))
    )

    if args.json:
        print(json.dumps(result.to_result(), indent=2))
        return

    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        sys.exit(1)

    table = Table(title=f"{len(result.completions)} completions")
    table.add_column("Label", style="bold")
    table.add_column("Kind")
    table.add_column("Detail", style="dim")
    for entry in result.completions:
        table.add_row(entry.label, entry.kind or "", entry.detail or "")
    console.print(table)


def docs_command(args):
    """Print hover documentation at a position."""
    result = asyncio.run(
        super_docs(args.query, args.line, args.character, LSPContext(get_settings().lsp))
    )

    if args.json:
        print(json.dumps(result.to_result(), indent=2))
        return

    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        sys.exit(1)

    if result.documentation is None:
        console.print("[dim]No documentation at this position.[/dim]")
        return

    console.print(Panel(result.documentation, title="[bold]Documentation[/bold]", border_style="blue"))


def version_command(args):
    """Show the superdb-mcp version."""
    from . import __version__
    console.print(f"superdb-mcp version {__version__}")


def _add_position_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("query", help="SuperSQL query text")
    parser.add_argument("line", type=int, help="Line number (0-based)")
    parser.add_argument("character", type=int, help="Character offset (0-based)")
    parser.add_argument("--json", action="store_true", help="Print the raw tool result")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="superdb-mcp",
        description="SuperDB MCP server: query tools and LSP assistance for AI assistants",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the MCP server on stdio (default)")
    serve_parser.set_defaults(func=serve_command)

    status_parser = subparsers.add_parser("lsp-status", help="Check the SuperDB language server")
    status_parser.add_argument("--json", action="store_true", help="Print the raw tool result")
    status_parser.set_defaults(func=lsp_status_command)

    complete_parser = subparsers.add_parser("complete", help="Get completions at a position")
    _add_position_arguments(complete_parser)
    complete_parser.set_defaults(func=complete_command)

    docs_parser = subparsers.add_parser("docs", help="Get documentation at a position")
    _add_position_arguments(docs_parser)
    docs_parser.set_defaults(func=docs_command)

    version_parser = subparsers.add_parser("version", help="Show version")
    version_parser.set_defaults(func=version_command)

    args = parser.parse_args()
    setup_logging(get_settings().logging)

    if args.command is None:
        serve_command(args)
        return

    args.func(args)


if __name__ == "__main__":
    main()
