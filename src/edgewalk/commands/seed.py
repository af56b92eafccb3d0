"""Command: populate the store with sample memberships."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from edgewalk.commands._base import EdgeCommand

if TYPE_CHECKING:
    from edgewalk.commands._context import AppContext


@click.command(
    cls=EdgeCommand,
    examples="""\
  edgewalk seed
  edgewalk seed --users 1000 --groups 50 --edges 5000
  edgewalk seed --seed 42""",
)
@click.option("--users", type=int, default=None, help="Users to create (default from config).")
@click.option("--groups", type=int, default=None, help="Groups to create (default from config).")
@click.option("--edges", type=int, default=None, help="Random memberships to draw.")
@click.option("--seed", "rng_seed", type=int, default=None, help="Random seed for a repeatable draw.")
@click.pass_obj
def seed(
    app: AppContext,
    users: int | None,
    groups: int | None,
    edges: int | None,
    rng_seed: int | None,
) -> None:
    """Create sample users and groups and link them at random."""
    from edgewalk.services.seed import SeedService

    defaults = app.settings.seed
    result = SeedService(app.store).seed(
        users=defaults.users if users is None else users,
        groups=defaults.groups if groups is None else groups,
        edges=defaults.edges if edges is None else edges,
        seed=defaults.seed if rng_seed is None else rng_seed,
    )
    app.emit(result)
