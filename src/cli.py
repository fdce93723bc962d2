"""
Command-Line Interface for NPVSim.

Purpose
-------
A thin consumer of the analytics engine: selects a scenario, runs the
pipeline and prints the structured results. It adds no semantics of its own.

Commands
--------
- run: Run the pipeline for one scenario (or every scenario)
- scenarios: Show the static scenario comparison table
- calibration: Validate and display calibration files

Example Usage
-------------
    # Run the base scenario reproducibly
    $ npvsim run --scenario base --seed 42

    # JSON payload for another tool
    $ npvsim run -s optimistic --json > optimistic.json

    # Validate a custom calibration
    $ npvsim calibration validate calibration.json

    # Show version
    $ npvsim --version
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import pydantic
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import AppSettings, CalibrationConfig, EngineConfig, SamplerConfig
from .exceptions import NPVSimError

# Version
__version__ = "0.1.0"


def _load_calibration(path: Optional[Path]) -> Optional[CalibrationConfig]:
    if path is None:
        return None
    from .serialization import load_calibration

    return load_calibration(path)


@click.group()
@click.version_option(version=__version__, prog_name="npvsim")
@click.option("--quiet", "-q", is_flag=True, help="Plain output without tables")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level (default: NPVSIM_LOG_LEVEL or WARNING)"
)
@click.pass_context
def main(ctx: click.Context, quiet: bool, log_level: Optional[str]) -> None:
    """
    NPVSim - Monte Carlo investment analytics.

    Samples correlated value / retention outcomes per scenario and reports
    summary statistics, the value distribution, a multi-year projection
    and a risk scatter.

    Use 'npvsim COMMAND --help' for command-specific help.
    """
    try:
        settings = AppSettings()
    except pydantic.ValidationError as e:
        click.echo(f"Error: invalid NPVSIM_* settings: {e}", err=True)
        sys.exit(1)
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["console"] = Console()
    ctx.obj["settings"] = settings


@main.command()
@click.option(
    "--scenario", "-s",
    type=str,
    default=None,
    help="Scenario key: all, conservative, base, optimistic (default: NPVSIM_DEFAULT_SCENARIO or 'all')"
)
@click.option("--all-scenarios", is_flag=True, help="Run every scenario in the calibration")
@click.option("--seed", type=click.IntRange(min=0), default=None, help="Random seed for reproducibility")
@click.option(
    "--simulations", "-n",
    type=int,
    default=None,
    help="Population size (default: 10,000)"
)
@click.option("--bins", type=int, default=None, help="Histogram bin count (default: 40)")
@click.option(
    "--calibration", "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Calibration JSON file (default: built-in)"
)
@click.option("--json", "as_json", is_flag=True, help="Print the JSON payload instead of tables")
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the JSON payload to this file (or directory with --all-scenarios)"
)
@click.pass_context
def run(
    ctx: click.Context,
    scenario: Optional[str],
    all_scenarios: bool,
    seed: Optional[int],
    simulations: Optional[int],
    bins: Optional[int],
    calibration: Optional[Path],
    as_json: bool,
    output: Optional[Path],
) -> None:
    """
    Run the analytics pipeline.

    Example:
        npvsim run -s base --seed 42
    """
    console: Console = ctx.obj["console"]
    quiet = ctx.obj.get("quiet", False)
    settings: AppSettings = ctx.obj["settings"]

    from .simulation import AnalyticsEngine
    from .serialization import save_result

    if all_scenarios and scenario is not None:
        raise click.UsageError("--scenario and --all-scenarios are mutually exclusive.")
    scenario = scenario or settings.default_scenario
    seed = seed if seed is not None else settings.seed

    try:
        calib = _load_calibration(calibration or settings.calibration_path)
        sampler_kwargs = {} if simulations is None else {"n_sims": simulations}
        engine_kwargs = {} if bins is None else {"bin_count": bins}
        engine = AnalyticsEngine(
            EngineConfig(sampler=SamplerConfig(**sampler_kwargs), **engine_kwargs),
            calibration=calib,
        )
        if all_scenarios:
            results = engine.run_all(seed=seed)
        else:
            results = {scenario: engine.run(scenario, seed=seed)}
    except (NPVSimError, pydantic.ValidationError, OSError, json.JSONDecodeError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        payload = {k: r.to_dict() for k, r in results.items()}
        click.echo(json.dumps(payload if all_scenarios else payload[scenario], indent=2))
    else:
        for result in results.values():
            _print_result(console, result, quiet)

    if output:
        if all_scenarios:
            for key, result in results.items():
                save_result(result, output / f"{key}.json")
        else:
            save_result(results[scenario], output)
        if not quiet:
            click.echo(f"Results saved to {output}", err=True)


def _print_result(console: Console, result, quiet: bool) -> None:
    stats = result.statistics
    if quiet:
        click.echo(f"Scenario: {result.scenario}")
        click.echo(f"Median: ${stats.median:,.1f}B")
        click.echo(f"10th Percentile: ${stats.p10:,.1f}B")
        click.echo(f"90th Percentile: ${stats.p90:,.1f}B")
        click.echo(f"Above $80B: {stats.above_80_pct:.1f}%")
        return

    from .risk import risk_breakdown

    table = Table(title=f"Scenario: {result.scenario}", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Simulations", f"{stats.n:,}")
    table.add_row("Mean", f"${stats.mean:,.1f}B")
    table.add_row("Std Dev", f"${stats.std:,.1f}B")
    table.add_row("Median", f"${stats.median:,.1f}B")
    table.add_row("10th Percentile", f"${stats.p10:,.1f}B")
    table.add_row("90th Percentile", f"${stats.p90:,.1f}B")
    table.add_row("Min / Max", f"${stats.min:,.1f}B / ${stats.max:,.1f}B")
    table.add_row("Positive", f"{stats.positive_pct:.1f}%")
    table.add_row("Above $80B", f"{stats.above_80_pct:.1f}%")
    table.add_row("Avg Market Share", f"{stats.avg_retention_pct:.1f}%")
    table.add_row("Market Share > 75%", f"{stats.retention_above_75_pct:.1f}%")
    console.print(table)

    traj = Table(title="Projection", show_header=True)
    traj.add_column("Year", style="cyan")
    traj.add_column("P10", justify="right")
    traj.add_column("Expected", style="green", justify="right")
    traj.add_column("P90", justify="right")
    for p in result.trajectory:
        traj.add_row(str(p.year), f"{p.p10:.1f}", f"{p.expected:.1f}", f"{p.p90:.1f}")
    console.print(traj)

    lines = [
        f"{tier.value.capitalize()}: {b.count} ({b.share_pct:.1f}%)"
        for tier, b in risk_breakdown(result.scatter).items()
    ]
    console.print(Panel("\n".join(lines), title=f"Risk Tiers (first {len(result.scatter)} samples)"))


@main.command()
@click.pass_context
def scenarios(ctx: click.Context) -> None:
    """
    Show the scenario comparison table.

    Example:
        npvsim scenarios
    """
    console: Console = ctx.obj["console"]
    quiet = ctx.obj.get("quiet", False)

    from .scenario import scenario_table

    rows = scenario_table()
    if quiet:
        for row in rows:
            click.echo(
                f"{row.name}: target ${row.target_value:.0f}B, predicted ${row.predicted_value:.1f}B, "
                f"{row.probability_pct:.0f}% ({row.simulation_count:,} sims)"
            )
        return

    table = Table(title="Scenario Comparison", show_header=True)
    table.add_column("Scenario", style="cyan")
    table.add_column("Target", justify="right")
    table.add_column("Predicted", style="green", justify="right")
    table.add_column("Probability", justify="right")
    table.add_column("Simulations", justify="right")
    for row in rows:
        table.add_row(
            f"[{row.display_color}]{row.name}[/]",
            f"${row.target_value:.0f}B",
            f"${row.predicted_value:.1f}B",
            f"{row.probability_pct:.0f}%",
            f"{row.simulation_count:,}",
        )
    console.print(table)


@main.group()
def calibration() -> None:
    """
    Calibration management commands.

    Validate and display scenario calibration files.
    """
    pass


@calibration.command("validate")
@click.argument("calibration_file", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def calibration_validate(ctx: click.Context, calibration_file: Path) -> None:
    """
    Validate a calibration file.

    Example:
        npvsim calibration validate calibration.json
    """
    quiet = ctx.obj.get("quiet", False)

    try:
        calib = _load_calibration(calibration_file)
    except (NPVSimError, pydantic.ValidationError, OSError, json.JSONDecodeError) as e:
        click.echo(f"Calibration validation failed: {e}", err=True)
        sys.exit(1)

    click.echo("Calibration is valid")
    if not quiet:
        click.echo(f"Scenarios: {', '.join(calib.scenarios)}")
        click.echo(f"Years: {calib.years[0]}-{calib.years[-1]}")


@calibration.command("show")
@click.argument("calibration_file", type=click.Path(exists=True, path_type=Path), required=False)
@click.option("--format", "-f", type=click.Choice(["json", "table"]), default="table")
@click.pass_context
def calibration_show(ctx: click.Context, calibration_file: Optional[Path], format: str) -> None:
    """
    Display a calibration (built-in when no file is given).

    Example:
        npvsim calibration show --format json
    """
    console: Console = ctx.obj["console"]

    from .serialization import calibration_to_dict

    try:
        calib = _load_calibration(calibration_file) or CalibrationConfig.default()
    except (NPVSimError, pydantic.ValidationError, OSError, json.JSONDecodeError) as e:
        click.echo(f"Error loading calibration: {e}", err=True)
        sys.exit(1)

    if format == "json":
        click.echo(json.dumps(calibration_to_dict(calib), indent=2))
        return

    table = Table(title="Calibration", show_header=True)
    table.add_column("Scenario", style="cyan")
    table.add_column("Mean", justify="right")
    table.add_column("Std Dev", justify="right")
    table.add_column("Retention", justify="right")
    table.add_column("Growth " + " / ".join(str(y) for y in calib.years))
    for key, params in calib.scenarios.items():
        table.add_row(
            key,
            f"{params.mean_value:.1f}",
            f"{params.std_dev_value:.1f}",
            f"{params.mean_retention:.3f}",
            ", ".join(f"{f:.2f}" for f in calib.growth_factors[key]),
        )
    console.print(table)


if __name__ == "__main__":
    main()
