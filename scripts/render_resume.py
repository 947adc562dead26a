#!/usr/bin/env python3
"""
Résumé Rendering CLI

Renders résumé markup or plain text to PDF through the fallback pipeline, and
inspects what the parser and renderer make of it.

Commands:
    render   - Render a source file to PDF
    show     - Print the parsed document structure
    source   - Export the raw source unchanged, with a download filename
    inspect  - Print page count and text lines of a PDF
    generate - Generate a résumé from a profile JSON and render it
    events   - Show recent pipeline events

Examples:\n

    render_resume.py render resume.tex                      # Writes resume.pdf

    render_resume.py render notes.txt --plain -o out.pdf    # Plain-text input

    render_resume.py render resume.tex --page-size LETTER   # US letter pages

    render_resume.py show resume.tex                        # Parsed sections and items

    render_resume.py inspect resume.pdf                     # Page count and text

    render_resume.py generate profile.json -o resume.pdf    # Profile → markup → PDF

    render_resume.py events --type render_fallback          # Recent fallbacks
"""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from quill.contexts.generation import JsonProfileStore, ProfileNotFoundError, ResumeService
from quill.contexts.generation.logger import setup_generation_logger
from quill.contexts.generation.resume_service import download_raw_source
from quill.contexts.parsing.document_model import Bullet, PlainLine, ProjectHeading, Subheading
from quill.contexts.parsing.logger import setup_parsing_logger
from quill.contexts.parsing.parser import parse_document
from quill.contexts.rendering.logger import setup_rendering_logger
from quill.contexts.rendering.pipeline import RenderPipeline
from quill.utils.event_logging import get_recent_events
from quill.utils.pdf_processing import extract_text_lines, page_count
from quill.utils.text_processing import truncate_display
from quill.utils.timestamp import format_timestamp, now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))


app = typer.Typer(
    help="Render résumé markup or plain text to paginated PDF",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def read_source(path: Path) -> str:
    if not path.exists():
        typer.secho(f"Error: file not found: {path}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return path.read_text(encoding="utf-8")


def report_render(result, output: Path) -> None:
    """Print the outcome of a pipeline run."""
    if result.degraded:
        typer.secho("✗ Rendered fallback page", fg=typer.colors.YELLOW, bold=True)
    else:
        typer.secho(f"✓ Rendered with the {result.stage.value} stage", fg=typer.colors.GREEN, bold=True)

    typer.echo(f"  Pages: {result.page_count if result.page_count is not None else '?'}")
    typer.echo(f"  Time: {result.elapsed_s:.2f}s")
    for error in result.errors:
        typer.secho(f"  - {truncate_display(error.splitlines()[0], 100)}", fg=typer.colors.YELLOW)
    typer.echo(f"  PDF: {output}")


@app.command("render")
def render_command(
    source_path: Annotated[Path, typer.Argument(help="Markup (.tex) or plain-text source file")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="PDF path (default: source path with .pdf)"),
    ] = None,
    plain: Annotated[
        bool,
        typer.Option("--plain", help="Treat the source as plain text instead of markup"),
    ] = False,
    page_size: Annotated[
        Optional[str],
        typer.Option("--page-size", help="A4, LETTER or LEGAL (default: PAGE_SIZE or layout config)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging on the console"),
    ] = False,
):
    """
    Render a source file to PDF.

    Markup goes through the remote compiler first when REMOTE_COMPILER_URL is
    set, then the local renderer; a fallback page is written if both fail.

    Examples:\n

        $ render_resume.py render resume.tex

        $ render_resume.py render notes.txt --plain --output notes.pdf
    """
    source = read_source(source_path)
    output = output or source_path.with_suffix(".pdf")

    log_file = setup_rendering_logger(
        LOGS_PATH / f"render_{now()}", console_level="DEBUG" if verbose else "INFO"
    )

    typer.secho(f"\nRendering: {source_path}", fg=typer.colors.BLUE, bold=True)
    try:
        pipeline = RenderPipeline.from_env(page_size=page_size)
    except ValueError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    result = pipeline.render(source, is_markup=not plain)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(result.blob)

    typer.echo("")
    report_render(result, output)
    typer.echo(f"  Log: {log_file}")
    typer.echo("")

    raise typer.Exit(code=1 if result.degraded else 0)


@app.command("show")
def show_command(
    source_path: Annotated[Path, typer.Argument(help="Markup (.tex) or plain-text source file")],
    plain: Annotated[
        bool,
        typer.Option("--plain", help="Treat the source as plain text instead of markup"),
    ] = False,
):
    """
    Print the document the parser builds from a source file.

    Examples:\n

        $ render_resume.py show resume.tex
    """
    source = read_source(source_path)
    setup_parsing_logger(LOGS_PATH / f"parse_{now()}", console_level="WARNING")

    document = parse_document(source, is_markup=not plain)

    typer.echo("")
    if document.name:
        typer.secho(document.name, bold=True)
    if document.contact:
        typer.echo(document.contact)

    for section in document.sections:
        typer.secho(f"\n{section.title}", fg=typer.colors.BLUE, bold=True)
        if not section.items:
            typer.secho("  (empty)", fg=typer.colors.YELLOW)
        for item in section.items:
            if isinstance(item, Subheading):
                typer.echo(f"  {item.title}  [{item.right_date}]")
                typer.echo(f"    {item.subtitle}  [{item.subtitle_right}]")
            elif isinstance(item, ProjectHeading):
                typer.echo(f"  {item.title}  [{item.right_date}]")
            elif isinstance(item, Bullet):
                typer.echo(f"    • {item.text}")
            elif isinstance(item, PlainLine):
                typer.echo(f"  {item.text}")

    leaf_count = sum(1 for _ in document.leaf_texts())
    typer.echo(f"\n{len(document.sections)} sections, {leaf_count} text entries\n")


@app.command("source")
def source_command(
    source_path: Annotated[Path, typer.Argument(help="Source file to export")],
    output_dir: Annotated[
        Path,
        typer.Option("--output", "-o", help="Directory to write the download into"),
    ] = Path("."),
    filename: Annotated[
        Optional[str],
        typer.Option("--filename", help="Download filename (default: resume.tex / resume.txt)"),
    ] = None,
    plain: Annotated[
        bool,
        typer.Option("--plain", help="Export as plain text instead of markup"),
    ] = False,
):
    """
    Export the raw source unchanged under its download filename.

    Examples:\n

        $ render_resume.py source generated.tex --filename jo_park_resume.tex
    """
    download = download_raw_source(read_source(source_path), filename=filename, is_markup=not plain)

    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / download.filename
    target.write_text(download.content, encoding="utf-8")

    typer.secho(f"✓ Exported {download.media_type}", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  File: {target}")


@app.command("inspect")
def inspect_command(
    pdf_path: Annotated[Path, typer.Argument(help="PDF to inspect")],
    max_lines: Annotated[
        int,
        typer.Option("--lines", "-n", help="Text lines to show per page", min=0),
    ] = 20,
):
    """
    Print page count and the first text lines of each page.

    Examples:\n

        $ render_resume.py inspect resume.pdf --lines 5
    """
    if not pdf_path.exists():
        typer.secho(f"Error: file not found: {pdf_path}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    pages = page_count(pdf_path)
    if pages is None:
        typer.secho(f"✗ Not a readable PDF: {pdf_path}", fg=typer.colors.RED, bold=True)
        raise typer.Exit(code=1)

    typer.secho(f"\n{pdf_path}: {pages} page(s)", fg=typer.colors.BLUE, bold=True)
    for number, lines in enumerate(extract_text_lines(pdf_path), start=1):
        typer.secho(f"\nPage {number}", bold=True)
        for line in lines[:max_lines]:
            typer.echo(f"  {line}")
        if len(lines) > max_lines:
            typer.echo(f"  ... and {len(lines) - max_lines} more lines")
    typer.echo("")


@app.command("generate")
def generate_command(
    profile_path: Annotated[Path, typer.Argument(help="Profile JSON file")],
    job_path: Annotated[
        Optional[Path],
        typer.Option("--job", "-j", help="Job description text file"),
    ] = None,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="PDF path"),
    ] = Path("resume.pdf"),
    save_source: Annotated[
        bool,
        typer.Option("--save-source", help="Also write the generated source next to the PDF"),
    ] = False,
):
    """
    Generate a résumé from a profile and render it to PDF.

    Examples:\n

        $ render_resume.py generate profile.json --job job.txt -o out/resume.pdf --save-source
    """
    setup_generation_logger(LOGS_PATH / f"generate_{now()}")
    job_description = read_source(job_path) if job_path else ""

    service = ResumeService(JsonProfileStore(profile_path))
    try:
        built = service.build_resume(job_description)
    except ProfileNotFoundError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(built.pdf)

    typer.echo("")
    report_render(built.render, output)

    if save_source:
        download = service.download_raw_source(built)
        target = output.parent / download.filename
        target.write_text(download.content, encoding="utf-8")
        typer.echo(f"  Source: {target}")
    typer.echo("")


@app.command("events")
def events_command(
    n: Annotated[
        int,
        typer.Option("--num", "-n", help="Number of recent events to show", min=1),
    ] = 10,
    event_type: Annotated[
        Optional[str],
        typer.Option("--type", "-t", help="Only show events of this type (e.g. render_fallback)"),
    ] = None,
    compact: Annotated[
        bool,
        typer.Option("--compact", "-c", help="One JSON object per line"),
    ] = False,
):
    """
    Show the most recent events from PIPELINE_EVENTS_FILE.

    Examples:


        $ render_resume.py events -n 20

        $ render_resume.py events --type render_fallback --compact
    """
    events = get_recent_events(n=n, event_type=event_type)

    if not events:
        typer.secho("No events found", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)

    if compact:
        for event in events:
            typer.echo(json.dumps(event))
        return

    suffix = f" [type={event_type}]" if event_type else ""
    typer.secho(f"\nShowing last {len(events)} event(s){suffix}:\n", fg=typer.colors.BLUE)
    for event in events:
        header = f"{format_timestamp(event.get('timestamp', ''))}  {event.get('event_type', '?')}"
        typer.secho(header, bold=True)
        for key, value in event.items():
            if key not in ("timestamp", "event_type"):
                typer.echo(f"  {key}: {value}")
        typer.echo("")


if __name__ == "__main__":
    app()
