"""The ``edgewalk`` command line: global flags, then one subcommand."""

from __future__ import annotations

import click

from edgewalk import __version__
from edgewalk.commands import register_commands
from edgewalk.commands._base import EdgeGroup
from edgewalk.commands._context import AppContext
from edgewalk.config.settings import EdgewalkSettings


@click.group(
    cls=EdgeGroup,
    invoke_without_command=True,
    examples="""\
  edgewalk setup
  edgewalk seed --seed 42
  edgewalk groups 6
  edgewalk --json traverse edges_all --page-size 16
  edgewalk --store /tmp/scratch.db setup --reset""",
)
@click.version_option(version=__version__, prog_name="edgewalk")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print bare ids or records, one per line.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and per-page timings.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("-c", "--config", "config_path", default=None, help="Read this edgewalk.toml.")
@click.option(
    "--store",
    "store_path",
    default=None,
    metavar="PATH",
    help="SQLite file to use instead of [store] path.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    store_path: str | None,
) -> None:
    """edgewalk: walk user/group memberships through paginated indexes."""
    overrides: dict[str, object] = {}
    if store_path is not None:
        overrides["store"] = {"path": store_path}
    settings = EdgewalkSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        **overrides,
    )
    ctx.obj = AppContext(settings)
    ctx.call_on_close(ctx.obj.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
