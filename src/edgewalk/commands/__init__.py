"""Subcommand modules for edgewalk.

Provides register_commands() which uses deferred imports to keep
``edgewalk --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every standalone command on the root CLI group."""
    from edgewalk.commands.link import add_group, add_user, link
    from edgewalk.commands.seed import seed
    from edgewalk.commands.setup import describe_index, setup
    from edgewalk.commands.traverse import count, groups, traverse, users

    cli.add_command(setup)
    cli.add_command(describe_index)
    cli.add_command(seed)
    cli.add_command(add_user)
    cli.add_command(add_group)
    cli.add_command(link)
    cli.add_command(groups)
    cli.add_command(users)
    cli.add_command(traverse)
    cli.add_command(count)
