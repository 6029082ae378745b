"""CLI application entry point for glyphsmith.

This module provides the main CLI interface using Typer.
"""

import time
from pathlib import Path
from typing import Annotated

import typer

from glyphsmith import __version__
from glyphsmith.cli.output import (
    console,
    print_availability_summary,
    print_error,
    print_header,
    print_kerning_summary,
    print_resolution_table,
    print_snapshot_info,
    print_step,
)
from glyphsmith.config import AutoKernConfig, LoggingConfig, get_default_settings
from glyphsmith.core import AutoKernQueue, ResolutionCache, recommended_pairs
from glyphsmith.domain import Character
from glyphsmith.exceptions import ContextLoadError, GlyphsmithError
from glyphsmith.io import ContextReader, ContextSnapshot, write_suggestions
from glyphsmith.utils import KerningRunLogger, configure_logging

# Create the Typer app
app = typer.Typer(
    name="glyphsmith",
    help="Resolve constructed glyphs and propose kerning for a font project snapshot.",
    add_completion=False,
    no_args_is_help=True,
)

_state = {"quiet": False}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Glyphsmith[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_options(
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Resolve constructed glyphs and propose kerning for a font project snapshot."""
    if log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        print_error(
            f"Invalid log level: {log_level}",
            details="Valid values: DEBUG, INFO, WARNING, ERROR",
        )
        raise typer.Exit(code=1)

    settings = LoggingConfig(log_file=log_file, log_level=log_level.upper())
    configure_logging(
        log_file=settings.log_file,
        console_level=settings.log_level,
        file_level=settings.file_log_level,
        quiet=quiet,
    )
    _state["quiet"] = quiet


def _load(snapshot_path: Path) -> ContextSnapshot:
    if not snapshot_path.is_file():
        print_error(
            f"Snapshot not found: {snapshot_path}",
            details=f"The file '{snapshot_path}' does not exist or is not a file.",
        )
        raise typer.Exit(code=1)

    quiet = _state["quiet"]
    if not quiet:
        print_header(__version__)
        print_step("Loading snapshot")

    snapshot = ContextReader(snapshot_path).load()

    if not quiet:
        print_snapshot_info(
            path=str(snapshot_path),
            character_count=len(snapshot.characters),
            glyph_count=len(snapshot.glyph_store),
            metrics=snapshot.context.metrics,
        )
    return snapshot


@app.command()
def inspect(
    snapshot_path: Annotated[
        Path,
        typer.Argument(
            help="Path to a JSON project snapshot",
            show_default=False,
        ),
    ],
    name: Annotated[
        list[str] | None,
        typer.Option(
            "--name",
            "-n",
            help="Only show these characters (repeatable)",
        ),
    ] = None,
) -> None:
    """Resolve every character and show availability.

    Example:
        glyphsmith inspect project.json --name "é" --name "fi"
    """
    try:
        snapshot = _load(snapshot_path)

        characters = snapshot.characters
        if name:
            wanted = set(name)
            unknown = wanted - {c.name for c in characters}
            if unknown:
                print_error(f"Unknown characters: {', '.join(sorted(unknown))}")
                raise typer.Exit(code=1)
            characters = [c for c in characters if c.name in wanted]

        cache = ResolutionCache()
        rows = [(c, cache.resolve(c, snapshot.context)) for c in characters if not c.hidden]

        if not _state["quiet"]:
            print_step("Resolving")
        print_resolution_table(rows)
        if not _state["quiet"]:
            print_availability_summary(sum(1 for _, r in rows if r.is_available), len(rows))

    except ContextLoadError as e:
        print_error(f"Could not load snapshot: {e.reason}")
        raise typer.Exit(code=1)
    except GlyphsmithError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


def _all_base_pairs(snapshot: ContextSnapshot) -> list[tuple[int, int]]:
    """Every ordered pair of drawn, visible base characters."""
    drawn: list[Character] = []
    for character in snapshot.characters:
        if character.unicode is None or character.hidden or not character.is_base:
            continue
        glyph = snapshot.glyph_store.get(character.unicode)
        if glyph is not None and glyph.is_drawn():
            drawn.append(character)
    return [(left.unicode, right.unicode) for left in drawn for right in drawn]


@app.command()
def autokern(
    snapshot_path: Annotated[
        Path,
        typer.Argument(
            help="Path to a JSON project snapshot",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write suggestions to this JSON file",
        ),
    ] = None,
    gap: Annotated[
        float | None,
        typer.Option(
            "--gap",
            "-g",
            help="Minimum ink gap for pairs without a recommended rule",
            min=0.0,
        ),
    ] = None,
    scanlines: Annotated[
        int | None,
        typer.Option(
            "--scanlines",
            "-s",
            help="Number of scanlines between top line and baseline",
            min=2,
            max=1000,
        ),
    ] = None,
    workers: Annotated[
        int,
        typer.Option(
            "--workers",
            "-j",
            help="Number of worker processes",
            min=1,
            max=32,
        ),
    ] = 1,
) -> None:
    """Propose kerning for recommended pairs.

    When the snapshot lists no recommended kerning, every ordered pair of
    drawn base characters is kerned.

    Example:
        glyphsmith autokern project.json -o suggestions.json
    """
    try:
        snapshot = _load(snapshot_path)
        context = snapshot.context

        defaults = get_default_settings().autokern
        config = AutoKernConfig(
            scanline_count=scanlines if scanlines is not None else defaults.scanline_count,
            minimum_visual_gap=gap if gap is not None else defaults.minimum_visual_gap,
            max_workers=workers,
        )

        if snapshot.recommended_kerning:
            requests = recommended_pairs(
                snapshot.recommended_kerning,
                context.characters_by_name,
                context.groups,
                context.metrics,
            )
        else:
            requests = _all_base_pairs(snapshot)

        if not requests:
            if not _state["quiet"]:
                console.print("\nNo drawn pairs to kern. Nothing to do.")
            raise typer.Exit(code=0)

        if not _state["quiet"]:
            print_step(f"Kerning {len(requests)} pairs")

        run_logger = KerningRunLogger()
        run_logger.stats.start_time = time.time()
        with AutoKernQueue(
            snapshot.kerning_store,
            snapshot.glyph_store,
            snapshot.characters,
            context.metrics,
            context.stroke_thickness,
            config=config,
            run_logger=run_logger,
        ) as queue:
            queue.enqueue(requests)
            queue.flush()
        run_logger.stats.end_time = time.time()

        suggestions = dict(snapshot.kerning_store.suggestions)
        if output is not None:
            write_suggestions(output, suggestions)

        print_kerning_summary(
            suggestions=suggestions,
            requested=len(requests),
            total_time_s=run_logger.stats.duration_seconds,
            failed_batches=run_logger.stats.batches_failed,
            output_path=str(output) if output is not None else None,
        )
        if run_logger.stats.batches_failed:
            raise typer.Exit(code=1)

    except ContextLoadError as e:
        print_error(f"Could not load snapshot: {e.reason}")
        raise typer.Exit(code=1)
    except GlyphsmithError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
