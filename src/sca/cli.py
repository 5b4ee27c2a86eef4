"""Typer CLI — ``sca compare`` and ``sca validate`` commands."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from sca.config import load_config, load_snapshot
from sca.schemas.config import AnalysisOptions
from sca.schemas.result import CompetitiveAnalysisResult
from sca.schemas.snapshot import AnalysisSnapshot

# Load .env file from project root (if it exists)
load_dotenv()

app = typer.Typer(
    name="sca",
    help="Site Competitive Analysis — compare a site snapshot against a competitor.",
    no_args_is_help=True,
)
console = Console()

_ADVANTAGE_STYLE = {"main": "green", "competitor": "red", "neutral": "dim"}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every HTTP request at INFO — noisy and unhelpful for users
    logging.getLogger("httpx").setLevel(logging.WARNING)


@app.command()
def validate(
    config: Path = typer.Option(..., "--config", "-c", help="Path to analysis-options.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate an options file without running a comparison."""
    _setup_logging(verbose)

    try:
        opts = load_config(config)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)

    console.print("[green]Config is valid![/]\n")
    console.print(f"  AI insights:  {'on' if opts.include_ai else 'off'}")
    console.print(f"  Model:        {opts.model}")
    console.print(f"  Max tokens:   {opts.max_tokens}")
    console.print(f"  Depth:        {opts.analysis_depth}")
    console.print(f"  Focus areas:  {', '.join(opts.focus_areas) or '(none)'}")


@app.command()
def compare(
    main: Path = typer.Option(..., "--main", "-m", help="Snapshot JSON of the site being analyzed."),
    competitor: Path = typer.Option(..., "--competitor", "-k", help="Snapshot JSON of the competitor."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to analysis-options.yml"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the full result as JSON to this file."),
    ai: bool = typer.Option(None, "--ai/--no-ai", help="Override include_ai from the config."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Use canned AI insights (no API calls)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Compare two site snapshots and report gaps, strategies and insights."""
    _setup_logging(verbose)

    try:
        opts = load_config(config) if config else AnalysisOptions()
        main_snapshot = load_snapshot(main)
        competitor_snapshot = load_snapshot(competitor)
    except Exception as exc:
        console.print(f"[red]Failed to load input:[/] {exc}")
        raise typer.Exit(code=1)

    if ai is not None:
        opts = opts.model_copy(update={"include_ai": ai})

    if dry_run and opts.include_ai:
        console.print("[yellow]DRY-RUN mode — no API calls will be made.[/]\n")

    console.print(
        f"[bold]Comparing[/] {main_snapshot.domain} ({main_snapshot.page_count} pages) "
        f"[bold]vs[/] {competitor_snapshot.domain} ({competitor_snapshot.page_count} pages)\n"
    )

    try:
        result = asyncio.run(_run_comparison(opts, main_snapshot, competitor_snapshot, dry_run=dry_run))
    except Exception as exc:
        console.print(f"[red]Analysis failed:[/] {exc}")
        raise typer.Exit(code=1)

    _print_result(result)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.model_dump_json(indent=2))
        console.print(f"\n[green]Result written to:[/] {output}")


async def _run_comparison(
    opts: AnalysisOptions,
    main: AnalysisSnapshot,
    competitor: AnalysisSnapshot,
    *,
    dry_run: bool = False,
) -> CompetitiveAnalysisResult:
    """Build the analyzer and run it under a progress display."""
    from sca.orchestrator import build_analyzer
    from sca.shared.progress import AnalysisProgress

    client = None
    if opts.include_ai:
        if dry_run:
            from sca.shared.llm_client import DryRunClient
            client = DryRunClient()
        else:
            from sca.shared.llm_client import LLMClient
            client = LLMClient()

    with AnalysisProgress() as progress:
        progress.print_phase("Competitive analysis")
        analyzer = build_analyzer(opts, client, on_stage=progress.start_stage)
        try:
            result = await analyzer.run(main, competitor)
        except Exception as exc:
            progress.fail_stage(str(exc))
            raise
        progress.finish()
    return result


def _print_result(result: CompetitiveAnalysisResult) -> None:
    """Print a human-readable summary to stdout."""
    from sca.analysis.summary import format_area_name

    table = Table(title="Metrics", show_lines=False)
    table.add_column("Metric")
    table.add_column("Main", justify="right")
    table.add_column("Competitor", justify="right")
    table.add_column("Diff %", justify="right")
    table.add_column("Advantage")
    table.add_column("Significance")
    for key, m in result.metrics.items():
        style = _ADVANTAGE_STYLE[m.advantage]
        table.add_row(
            format_area_name(key),
            f"{m.main:.1f}",
            f"{m.competitor:.1f}",
            f"{m.percentage_diff:.0f}",
            f"[{style}]{m.advantage}[/]",
            m.significance,
        )
    console.print(table)

    console.print("\n[bold]── Strategies ──[/]\n")
    for area, s in result.strategies.items():
        console.print(f"[bold cyan]{format_area_name(area)}[/]: {s.effectiveness}")
        console.print(f"  Yours:      {s.main_approach}")
        console.print(f"  Competitor: {s.competitor_approach}")
        for rec in s.recommendations:
            console.print(f"    - {rec}")

    summary = result.summary
    console.print("\n[bold]── Summary ──[/]\n")
    style = _ADVANTAGE_STYLE[summary.overall_advantage]
    console.print(f"  Overall advantage: [{style}]{summary.overall_advantage}[/]")
    if summary.strength_areas:
        console.print(f"  Strengths:  {', '.join(summary.strength_areas)}")
    if summary.weakness_areas:
        console.print(f"  Weaknesses: {', '.join(summary.weakness_areas)}")
    for win in summary.quick_wins:
        console.print(f"  [green]Quick win:[/] {win}")
    if summary.long_term_opportunities:
        console.print(f"  Long-term:  {', '.join(summary.long_term_opportunities)}")

    stats = result.processing_stats
    console.print(
        f"\n[dim]{len(result.insights)} insights, confidence {stats.confidence}, "
        f"{stats.analysis_time}ms, {stats.ai_calls_made} AI call(s)[/]"
    )
