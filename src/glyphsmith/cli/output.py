"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with tables and formatted messages.
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from glyphsmith.core.resolver import Resolution
from glyphsmith.domain import Character, FontMetrics

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header."""
    console.print(f"\n[bold]Glyphsmith[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    console.print(f"\n{SYM_STEP} {message}")


def print_snapshot_info(path: str, character_count: int, glyph_count: int, metrics: FontMetrics) -> None:
    """Print snapshot information.

    Args:
        path: Path to the snapshot file
        character_count: Number of character definitions
        glyph_count: Number of drawn slots
        metrics: Font metrics
    """
    line = Text("  ")
    line.append(path)
    console.print(line)
    console.print(
        f"  {character_count:,} characters {SYM_DOT} {glyph_count:,} drawings "
        f"{SYM_DOT} {metrics.units_per_em:,} UPM"
    )


def _format_unicode(unicode: int | None) -> str:
    return f"U+{unicode:04X}" if unicode is not None else "-"


def print_resolution_table(rows: list[tuple[Character, Resolution]]) -> None:
    """Print one row per character with its resolution flags."""
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Name")
    table.add_column("Unicode")
    table.add_column("Kind")
    table.add_column("Available")
    table.add_column("Manual")
    table.add_column("Paths", justify="right")
    table.add_column("Reason")

    for character, resolution in rows:
        available = f"[green]{SYM_OK}[/green]" if resolution.is_available else f"[red]{SYM_ERR}[/red]"
        table.add_row(
            character.name,
            _format_unicode(character.unicode),
            character.construction_kind or "drawn",
            available,
            SYM_OK if resolution.is_manually_set else "",
            str(len(resolution.paths)),
            resolution.reason or "",
        )
    console.print(table)


def print_availability_summary(available: int, total: int) -> None:
    style = "green" if available == total else "yellow"
    console.print(f"\n  [{style}]{available}[/{style}] of {total} characters available")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_kerning_summary(
    suggestions: dict[str, float],
    requested: int,
    total_time_s: float,
    failed_batches: int,
    output_path: str | None = None,
    limit: int = 20,
) -> None:
    """Print auto-kerning result with the strongest suggestions.

    Args:
        suggestions: Pair key to proposed value
        requested: Number of pairs sent to the worker
        total_time_s: Wall time of the run in seconds
        failed_batches: Batches that produced no result
        output_path: Where suggestions were written, if anywhere
        limit: Maximum number of pairs listed
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}")

    if output_path is not None:
        line = Text("  ")
        line.append(output_path, style="bold")
        console.print(line)

    error_style = "red" if failed_batches > 0 else "green"
    nonzero = sum(1 for value in suggestions.values() if value != 0)
    console.print(
        f"  {requested} pairs {SYM_DOT} {len(suggestions)} proposed {SYM_DOT} {nonzero} non-zero "
        f"{SYM_DOT} [{error_style}]{failed_batches} failed batches[/{error_style}]"
    )

    strongest = sorted(
        ((key, value) for key, value in suggestions.items() if value != 0),
        key=lambda item: (-abs(item[1]), item[0]),
    )
    if strongest:
        table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
        table.add_column("Pair")
        table.add_column("Value", justify="right")
        for key, value in strongest[:limit]:
            table.add_row(key, f"{value:g}")
        console.print(table)
        if len(strongest) > limit:
            console.print(f"  ... +{len(strongest) - limit} more")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
