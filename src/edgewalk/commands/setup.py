"""Commands: create collections and indexes, inspect an index definition."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from edgewalk.commands._base import EdgeCommand

if TYPE_CHECKING:
    from edgewalk.commands._context import AppContext


@click.command(
    cls=EdgeCommand,
    examples="""\
  edgewalk setup
  edgewalk setup --reset
  edgewalk --json setup""",
)
@click.option("--reset", is_flag=True, help="Delete every collection, index, and document first.")
@click.pass_obj
def setup(app: AppContext, reset: bool) -> None:
    """Create the users, groups, and edges collections and their indexes."""
    from edgewalk.services.setup import SetupService

    app.emit(SetupService(app.store).setup(reset=reset))


@click.command(
    "index",
    cls=EdgeCommand,
    examples="""\
  edgewalk index edges_user_groups
  edgewalk --json index edge_user_group""",
)
@click.argument("name")
@click.pass_obj
def describe_index(app: AppContext, name: str) -> None:
    """Show the stored definition of index NAME."""
    from edgewalk.services.setup import SetupService

    app.emit(SetupService(app.store).describe_index(name))
