import logging
import sys

import click

from hydrogenpy.config import SamplerConfig
from hydrogenpy.exceptions import HydrogenpyError
from hydrogenpy.export import export_samples
from hydrogenpy.sampler import RejectionSampler
from hydrogenpy.verification import envelope_coverage


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug output.")
def cli(verbose: bool) -> None:
    formatter = logging.Formatter("%(levelname)s (%(name)s): %(message)s")
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger = logging.getLogger("hydrogenpy")
    logger.handlers = [console]
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


@cli.command()
@click.option("-n", type=int, required=True, help="Principal quantum number.")
@click.option("-l", type=int, required=True, help="Angular momentum quantum number.")
@click.option("-m", type=int, default=0, show_default=True, help="Magnetic quantum number.")
@click.option("--count", type=int, default=8000, show_default=True, help="Number of points.")
@click.option(
    "--output",
    required=True,
    type=click.Path(dir_okay=False),
    help="Output file (.json, .yaml, .csv or .pbz2).",
)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON/YAML sampler config. HYDROGENPY_* environment variables override it.",
)
@click.option("--seed", type=int, default=None, help="Seed for reproducible sampling.")
@click.option("--workers", type=int, default=None, help="Number of sampling threads.")
@click.option(
    "--deadline",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Time budget in seconds.",
)
@click.option(
    "--strict", is_flag=True, help="Fail when fewer than --count points are accepted."
)
def sample(n, l, m, count, output, config, seed, workers, deadline, strict) -> None:
    """Sample an orbital's probability density and save the points."""
    try:
        sampler_config = SamplerConfig.from_env(
            SamplerConfig.from_file(config) if config else None
        )
        if workers is not None:
            sampler_config.workers = workers
        result = RejectionSampler(config=sampler_config, rng=seed).sample(
            n, l, m, count, deadline=deadline
        )
        if strict:
            result.raise_if_incomplete()
        export_samples(result, output)
    except (HydrogenpyError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(f"Saved {len(result)} points for {result.state.label} to {output}")


@cli.command("check-envelope")
@click.option("-n", type=int, required=True, help="Principal quantum number.")
@click.option("-l", type=int, required=True, help="Angular momentum quantum number.")
@click.option("-m", type=int, default=0, show_default=True, help="Magnetic quantum number.")
@click.option(
    "--resolution",
    type=click.IntRange(min=2),
    default=65,
    show_default=True,
    help="Grid points per axis.",
)
@click.option("--seed", type=int, default=None, help="Seed for the envelope scan.")
def check_envelope(n, l, m, resolution, seed) -> None:
    """Compare the sampling envelope with a grid-refined density maximum."""
    try:
        coverage = envelope_coverage(n, l, m, rng=seed, resolution=resolution)
    except (HydrogenpyError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(
        f"{coverage.state.label}: envelope {coverage.ceiling:.6e}, "
        f"reference max {coverage.reference_max:.6e}, ratio {coverage.ratio:.3f}"
    )
    if not coverage.covered:
        sys.exit(2)
