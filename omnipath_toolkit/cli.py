"""
Command-line interface for the OmniPath Toolkit.

Usage:
    python -m omnipath_toolkit paths --config configs/network.yaml
    omnipath-toolkit ext archive.tar.gz data.csv
    omnipath-toolkit abspath ../data/interactions.tsv
"""

import sys
from pathlib import Path

import click

from . import __version__
from .config import PipelineConfig
from .network import DrugTargetNetworkPipeline
from .utils.paths import extract_extension, to_absolute_path


@click.group()
@click.version_option(version=__version__, prog_name="omnipath-toolkit")
def main() -> None:
    """OmniPath Toolkit - pathway data helpers and drug-target networks."""


@main.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    required=True,
    help="Path to YAML configuration file",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Override output directory from config",
)
@click.option(
    "--verbose/--quiet",
    "-v/-q",
    default=True,
    help="Enable/disable verbose output",
)
def paths(config: str, output: str, verbose: bool) -> None:
    """
    Find the shortest paths from drug targets to genes of interest.

    Example:
        python -m omnipath_toolkit paths --config configs/network.yaml
    """
    config_path = Path(config)
    click.echo(f"Loading config: {config_path}")

    try:
        pipeline_config = PipelineConfig.from_yaml(str(config_path))

        # Apply overrides
        if output:
            pipeline_config.output_dir = to_absolute_path(output)
        pipeline_config.verbose = verbose

        result = DrugTargetNetworkPipeline(pipeline_config).run()

        click.echo("")
        click.echo(f"Pipeline completed: {result.summary()}")
        click.echo(f"Results: {pipeline_config.output_dir}")

    except (FileNotFoundError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: pipeline failed: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("names", nargs=-1)
def ext(names) -> None:
    """Print the extension of each file name."""
    for name in names:
        click.echo(extract_extension(name))


@main.command()
@click.argument("paths", nargs=-1)
@click.option("--base", "-b", default=None, help="Base directory of relative paths")
def abspath(paths, base: str) -> None:
    """Print the absolute form of each path."""
    for path in paths:
        click.echo(to_absolute_path(path, base))


if __name__ == "__main__":
    main()
