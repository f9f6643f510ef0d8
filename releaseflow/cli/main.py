"""releaseflow CLI"""

import sys
from pathlib import Path
from typing import Optional

import click

from releaseflow import CONFIG_FILE_NAME, __version__
from releaseflow.calculator import BuildVersionCalculator
from releaseflow.cli.utils.logging import logger
from releaseflow.config import ConfigurationReader, Options
from releaseflow.exceptions import ExternalError, InputError
from releaseflow.git import GitPrimitives, GitRunner
from releaseflow.output import OutputFormat, render

from .debug import add_logging_options


def compute_version_output(
    source_ref: Optional[str],
    target_branch: Optional[str],
    output: str,
    pretty: bool,
    config: str,
    use_origin_branches: bool,
    repo: Optional[str],
) -> str:
    """Read the configuration, compute the build version and render it."""
    repo_dir = Path(repo) if repo else Path.cwd()

    config_path = Path(config)
    if not config_path.is_absolute():
        config_path = repo_dir / config_path
    if not config_path.is_file():
        raise InputError(f"Config file '{config}' not found")

    logger.debug(f"Using options file '{config_path}'")
    repo_options = ConfigurationReader().get_options_from_file(config_path)
    logger.debug(f"Configuration options: {repo_options.model_dump_json(by_alias=True)}")

    git = GitPrimitives(GitRunner(repo_dir), use_origin_branches=use_origin_branches)

    if not source_ref:
        source_ref = git.get_current_branch_name()
        if source_ref is None:
            raise InputError(
                "No source ref specified, and unable to determine (detached head)"
            )
        logger.info(f"Source branch detected: {source_ref}")

    options = Options.from_repo_options(
        repo_options, use_origin_branches=use_origin_branches
    )
    calculator = BuildVersionCalculator(options, git=git)
    info = calculator.get_build_version_info(source_ref, target_branch)
    return render(info, OutputFormat(output), pretty)


@click.command(name="releaseflow")
@click.version_option(__version__, prog_name="releaseflow")
@click.option(
    "--source-ref",
    "-s",
    type=str,
    default=None,
    help="Full Git ref of the current branch or tag, e.g. refs/heads/main. "
    "Required when building from a detached head.",
)
@click.option(
    "--target-branch",
    "-t",
    type=str,
    default=None,
    help="Full Git ref of the merge target, if the build is for a pull request.",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.json.value,
    show_default=True,
    help="Output format.",
)
@click.option(
    "--pretty", "-p", is_flag=True, default=False, help="Pretty-print JSON output."
)
@click.option(
    "--config",
    "-c",
    type=str,
    default=CONFIG_FILE_NAME,
    show_default=True,
    help="Configuration file, relative to the repository.",
)
@click.option(
    "--use-origin-branches",
    is_flag=True,
    default=False,
    help="Reference origin branches instead of local ones "
    "(can be useful for a CI build on some systems).",
)
@click.option(
    "--repo",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Repository directory. Defaults to the current directory.",
)
@add_logging_options
def cli(
    source_ref,
    target_branch,
    output,
    pretty,
    config,
    use_origin_branches,
    repo,
):
    """
    Compute the version of a CI build from the Git repository.
    """
    logger.debug(f"Python version: {sys.version.split()[0]}")

    try:
        result = compute_version_output(
            source_ref,
            target_branch,
            output,
            pretty,
            config,
            use_origin_branches,
            repo,
        )
    except InputError as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(1)
    except ExternalError as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(2)

    click.echo(result)
