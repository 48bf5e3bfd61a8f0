"""
Chef helpers: CLI entrypoint.

Usage:
    python -m chefhelpers.main --help
    python -m chefhelpers.main run --helper setCookbookVersion -i cookbookVersionNumber=1.2.3 ...
    python -m chefhelpers.main paths --json

Inside a pipeline agent the inputs arrive as INPUT_<NAME> variables and
``chefhelpers run`` needs no arguments at all.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from chefhelpers import __version__
from chefhelpers.core.observability.logging_config import (
    LOG_FILE_LEVEL_VAR,
    LOG_FILE_VAR,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="chefhelpers")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """Chef helpers: cookbook, environment and Habitat pipeline helpers."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_VAR),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_VAR),
    )


_platform_option = click.option(
    "--platform",
    "platform_id",
    default=None,
    help="Host platform id to resolve for (default: this host, e.g. linux, win32).",
)
_tmp_dir_option = click.option(
    "--tmp-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Scratch directory (default: $AGENT_TEMPDIRECTORY or the system temp dir).",
)
_home_dir_option = click.option(
    "--home-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Home directory holding the .chef config dir (default: current user).",
)


@cli.command()
@click.option("--helper", "-H", "helper", default=None, help="Helper to run (overrides the 'helper' input).")
@click.option("--input", "-i", "input_pairs", multiple=True, metavar="NAME=VALUE", help="Task input; repeatable.")
@click.option(
    "--inputs-file",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="YAML mapping of task inputs.",
)
@_platform_option
@_tmp_dir_option
@_home_dir_option
@click.option("--mock", is_flag=True, help="Record external commands without running them.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def run(
    helper: str | None,
    input_pairs: tuple[str, ...],
    inputs_file: str | None,
    platform_id: str | None,
    tmp_dir: str | None,
    home_dir: str | None,
    mock: bool,
    as_json: bool,
) -> None:
    """Run one helper."""
    from chefhelpers.adapters.mock import MockProcessRunner
    from chefhelpers.adapters.shell.command import ShellCommandRunner
    from chefhelpers.adapters.task import (
        LayeredInputSource,
        MappingInputSource,
        ProcessEnvironment,
        TaskInputSource,
        TaskResultReporter,
        current_platform_id,
        default_tmp_root,
    )
    from chefhelpers.core.config.loader import ConfigError, load_inputs_file, parse_input_pairs
    from chefhelpers.core.use_cases.run import run_helper

    try:
        cli_inputs = parse_input_pairs(input_pairs)
        file_inputs = load_inputs_file(Path(inputs_file)) if inputs_file else {}
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)

    if helper:
        cli_inputs["helper"] = helper

    source = LayeredInputSource([
        MappingInputSource(cli_inputs),
        MappingInputSource(file_inputs),
        TaskInputSource(),
    ])

    # Agent commands go to stderr in JSON mode so stdout stays parseable
    agent_stream = click.get_text_stream("stderr") if as_json else None

    result = run_helper(
        source,
        platform_id or current_platform_id(),
        tmp_dir or default_tmp_root(),
        TaskResultReporter(stream=agent_stream),
        home_dir=home_dir,
        runner=MockProcessRunner() if mock else ShellCommandRunner(),
        environment=ProcessEnvironment(stream=agent_stream),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        for command in result.commands:
            click.echo(f"   $ {command}")
        if result.ok:
            click.secho(f"✅ {result.receipt.output}", fg="green")
        else:
            click.secho(f"❌ {result.error}", fg="red")

    if not result.ok:
        sys.exit(1)


@cli.command()
@_platform_option
@_tmp_dir_option
@_home_dir_option
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def paths(
    platform_id: str | None,
    tmp_dir: str | None,
    home_dir: str | None,
    as_json: bool,
) -> None:
    """Show the Chef workstation paths resolved for a platform."""
    from chefhelpers.adapters.task import current_platform_id, default_tmp_root
    from chefhelpers.core.config.resolver import build_paths, detect_platform
    from chefhelpers.core.errors import UnsupportedPlatformError

    platform_id = platform_id or current_platform_id()
    platform = detect_platform(platform_id)
    try:
        resolved = build_paths(platform, tmp_dir or default_tmp_root(), home_dir)
    except UnsupportedPlatformError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    data = resolved.model_dump(mode="json")
    if as_json:
        click.echo(json.dumps({"platform": platform.value, "paths": data}, indent=2))
        return

    click.secho(f"\n🔧 Chef workstation ({platform.value})", fg="cyan", bold=True)
    width = max(len(k) for k in data)
    for key, value in data.items():
        click.echo(f"   {key.ljust(width)}  {value}")
    click.echo()


if __name__ == "__main__":
    cli()
