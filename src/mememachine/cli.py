"""Meme Machine CLI entry point.

``search`` runs the full pipeline for a free-text scenario, ``preset`` runs
one of the canned scenarios, ``show`` is the detail view for one frame and
``save`` downloads a rendered meme image.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from mememachine.config import MAX_RESULTS, WRAP_WIDTH
from mememachine.errors import MemeMachineError
from mememachine.models import Frame
from mememachine.pipeline import SearchReport, run_search
from mememachine.presets import PRESETS, get_preset
from mememachine.search.frinkiac import FrinkiacClient
from mememachine.text import pick_quote

app = typer.Typer(
    name="mememachine",
    help="Homer's Meme Machine — describe a situation, get Simpsons screenshots with captions.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

DEFAULT_SAVE_NAME = "simpsons-meme.jpg"


@app.callback()
def configure(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log every upstream call and fallback to stderr."),
    ] = False,
) -> None:
    """Set up logging before any command runs."""
    logger = logging.getLogger("mememachine")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=err_console, show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def _error_panel(e: MemeMachineError, title: str) -> None:
    err_console.print(Panel(str(e), title=f"[red]{title}[/red]", border_style="red"))


def _print_scores(report: SearchReport, limit: int) -> None:
    table = Table(title="Aggregated frame scores", show_lines=False)
    table.add_column("Episode")
    table.add_column("Timestamp", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Kept", justify="center")
    kept = {f.key for f in report.frames}
    for (episode, timestamp), score in list(report.scores.items())[:limit]:
        table.add_row(escape(episode), str(timestamp), f"{score:.3f}", "✓" if (episode, timestamp) in kept else "")
    console.print(table)


def _print_report(report: SearchReport) -> None:
    if report.is_empty:
        console.print(Panel(
            f"No moments found for [bold]{escape(report.scenario)}[/bold].\n"
            f"Try different words, or a line of dialogue you remember.",
            title="[yellow]No Results[/yellow]",
            border_style="yellow",
        ))
        return

    table = Table(show_lines=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Episode")
    table.add_column("Quote", style="bold", min_width=WRAP_WIDTH)
    table.add_column("Meme URL", overflow="fold")
    for i, card in enumerate(report.cards, start=1):
        episode = escape(card.frame.episode)
        if card.title:
            episode = f"{episode}\n[dim]{escape(card.title)}[/dim]"
        table.add_row(str(i), episode, escape(card.quote), card.meme_url)

    count = len(report.cards)
    console.print(table)
    console.print(f"[green]{count} moment{'s' if count != 1 else ''} found[/green]")


def _run_and_print(scenario: str, max_results: int, raw: bool, show_scores: bool) -> None:
    console.print(f"\n[bold cyan]Meme Machine[/bold cyan] — [dim]{escape(scenario)}[/dim]\n")
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Starting…", total=None)
            report = run_search(
                scenario,
                max_results=max_results,
                use_punchlines=not raw,
                progress_callback=lambda message: progress.update(task, description=message),
            )
    except MemeMachineError as e:
        # Typed failures get a panel, never a traceback.
        _error_panel(e, "Search Error")
        raise typer.Exit(1)

    if len(report.queries) > 1:
        console.print(f"Queries: [dim]{' · '.join(escape(q) for q in report.queries)}[/dim]\n")
    if show_scores:
        _print_scores(report, limit=max_results * 2)
    _print_report(report)


@app.command()
def search(
    scenario: Annotated[str, typer.Argument(help="Describe the situation you want a meme for.")],
    max_results: Annotated[
        int,
        typer.Option("--max", "-n", min=1, help="Maximum number of memes to return."),
    ] = MAX_RESULTS,
    raw: Annotated[
        bool,
        typer.Option("--raw", help="Use raw subtitle text instead of rewritten punchlines."),
    ] = False,
    show_scores: Annotated[
        bool,
        typer.Option("--show-scores", help="Print the aggregated frame scores."),
    ] = False,
) -> None:
    """Find Simpsons moments matching a free-text scenario."""
    scenario = scenario.strip()
    if not scenario:
        err_console.print(Panel(
            "Describe a situation to search for, e.g. [bold]\"when the wifi goes down\"[/bold].",
            title="[red]Input Error[/red]",
            border_style="red",
        ))
        raise typer.Exit(1)
    _run_and_print(scenario, max_results, raw, show_scores)


@app.command()
def preset(
    name: Annotated[str, typer.Argument(help="Preset name (see `mememachine presets`).")],
    max_results: Annotated[
        int,
        typer.Option("--max", "-n", min=1, help="Maximum number of memes to return."),
    ] = MAX_RESULTS,
) -> None:
    """Run one of the preset scenarios."""
    scenario = get_preset(name)
    if scenario is None:
        err_console.print(Panel(
            f"Unknown preset: [bold]{escape(name)}[/bold]\n"
            f"Valid presets: {', '.join(sorted(PRESETS))}",
            title="[red]Input Error[/red]",
            border_style="red",
        ))
        raise typer.Exit(1)
    _run_and_print(scenario, max_results, raw=False, show_scores=False)


@app.command()
def presets() -> None:
    """List the preset scenarios."""
    table = Table(title="Presets")
    table.add_column("Name", style="bold")
    table.add_column("Scenario")
    for name, scenario in PRESETS.items():
        table.add_row(name, scenario)
    console.print(table)


@app.command()
def show(
    episode: Annotated[str, typer.Argument(help="Episode key, e.g. S07E21.")],
    timestamp: Annotated[int, typer.Argument(min=0, help="Frame timestamp in milliseconds.")],
) -> None:
    """Show the detail view for one frame: episode, quote and image URLs."""
    client = FrinkiacClient()
    frame = Frame(episode=episode, timestamp=timestamp)
    try:
        caption_set = client.caption(frame)
    except MemeMachineError as e:
        _error_panel(e, "Caption Error")
        raise typer.Exit(1)

    quote = pick_quote(caption_set)
    title = escape(caption_set.episode.title) or "[dim]untitled[/dim]"
    meme_url = client.meme_url(frame, quote) if quote else client.image_url(frame)
    console.print(Panel(
        f"[bold]{title}[/bold]\n\n"
        f"  Quote:  {escape(quote) or '[dim](no subtitles)[/dim]'}\n"
        f"  Meme:   {meme_url}\n"
        f"  Image:  {client.image_url(frame)}",
        title=f"[cyan]{frame.episode} @ {frame.timestamp} ms[/cyan]",
        border_style="cyan",
    ))


@app.command()
def save(
    url: Annotated[str, typer.Argument(help="Meme URL printed by `search` or `show`.")],
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", dir_okay=False, resolve_path=True, help="Where to write the image."),
    ] = None,
) -> None:
    """Download a rendered meme image."""
    dest = out if out is not None else Path.cwd() / DEFAULT_SAVE_NAME
    try:
        FrinkiacClient().download_image(url, dest)
    except MemeMachineError as e:
        _error_panel(e, "Download Failed")
        raise typer.Exit(1)
    console.print(f"[green]Saved:[/green] [dim]{dest}[/dim]")
