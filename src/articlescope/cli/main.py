"""
ArticleScope CLI - Main entry point.

Extract articles from saved HTML pages with per-source selector rules,
and validate extractor definition files.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.traceback import install as install_rich_traceback

from articlescope import __app_name__, __version__
from articlescope.core.config import ContentType, load_app_config, validate_extractor_file
from articlescope.core.config.loader import load_extractor_definition
from articlescope.core.errors import ArticleScopeError
from articlescope.core.logging import get_logger, json_dumps, setup_logging

load_dotenv()

install_rich_traceback(show_locals=False, width=120)

console = Console()
err_console = Console(stderr=True)

logger = get_logger("cli")

app = typer.Typer(
    name=__app_name__,
    help="Rule-driven article extraction from HTML documents",
    rich_markup_mode="rich",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]{__app_name__}[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """ArticleScope - Article extraction from HTML."""
    pass


# =============================================================================
# Extract Command
# =============================================================================


def _read_html(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.exists():
        err_console.print(f"[red]File not found:[/red] {path}")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8", errors="replace")


@app.command()
def extract(
    source: str = typer.Argument(..., help="HTML file to extract from ('-' for stdin)"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Original page URL"),
    extractor_file: Optional[Path] = typer.Option(
        None,
        "--extractor",
        "-e",
        help="Extractor definition YAML to apply",
    ),
    extractors_dir: Optional[Path] = typer.Option(
        None,
        "--extractors-dir",
        "-d",
        help="Directory of extractor definitions (looked up by --url)",
    ),
    content_type: Optional[ContentType] = typer.Option(
        None,
        "--content-type",
        "-t",
        help="Representation of extracted content",
    ),
    content_only: bool = typer.Option(False, "--content-only", help="Extract only the content"),
    extracted_title: Optional[str] = typer.Option(
        None,
        "--extracted-title",
        help="Known title, used as context in content-only mode",
    ),
    fallback: Optional[bool] = typer.Option(
        None,
        "--fallback/--no-fallback",
        help="Use generic extraction when custom rules don't match",
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON result to file"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to app.yaml"),
) -> None:
    """Extract an article from an HTML file and print it as JSON.

    Examples:

        # Generic extraction
        articlescope extract page.html --url https://example.com/story

        # Apply a specific extractor, content as markdown
        articlescope extract page.html -e configs/extractors/example.yaml -t markdown
    """
    from articlescope.api import parse
    from articlescope.core.extract import ExtractorRegistry

    try:
        app_config = load_app_config(config)
        setup_logging(
            level=app_config.logging.level,
            log_file=app_config.logging.file,
            json_format=app_config.logging.json_format,
            rich_console=app_config.logging.rich_console,
        )

        extractor = load_extractor_definition(extractor_file) if extractor_file else None
        registry = None
        if extractor is None:
            registry = ExtractorRegistry.from_directory(extractors_dir or app_config.extractors_dir)

        html = _read_html(source)
        result = parse(
            html,
            url,
            extractor=extractor,
            registry=registry,
            content_type=content_type or app_config.extraction.content_type,
            content_only=content_only,
            extracted_title=extracted_title,
            fallback=app_config.extraction.fallback if fallback is None else fallback,
        )
    except ArticleScopeError as e:
        details = getattr(e, "details", None)
        err_console.print(f"[red]Error:[/red] {e}")
        if details:
            err_console.print(f"[dim]{details}[/dim]")
        raise typer.Exit(1)

    payload = json_dumps(result.to_dict())

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload, encoding="utf-8")
        console.print(f"[green]Saved result to[/green] {output}")
    else:
        console.print_json(payload)


# =============================================================================
# Validate Command
# =============================================================================


@app.command()
def validate(
    paths: list[Path] = typer.Argument(..., help="Extractor definition YAML files"),
) -> None:
    """Validate extractor definition files without running them."""
    failed = False

    for path in paths:
        errors = validate_extractor_file(path)
        if errors:
            failed = True
            console.print(Panel.fit(
                "\n".join(f"- {error}" for error in errors),
                title=f"[bold red]{path}[/bold red]",
                border_style="red",
            ))
        else:
            console.print(f"[green]OK[/green] {path}")

    if failed:
        raise typer.Exit(1)


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    run()
