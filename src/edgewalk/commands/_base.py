"""Click base classes for edgewalk commands.

``examples=`` on a command or group adds an eager ``--examples`` flag that
prints the sample invocations as shell lines and exits, keeping ``--help``
short.  :class:`EdgeGroup` lists its subcommands in registration order
(setup, seed, membership, traversal) instead of alphabetically, so
``edgewalk --help`` reads in the order the commands are used.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


def examples_option(examples: str) -> click.Option:
    """Build the eager ``--examples`` flag for *examples*."""
    lines = [line.strip() for line in textwrap.dedent(examples).strip().splitlines()]

    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        for line in lines:
            click.echo(f"  $ {line}" if line else "")
        ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show sample invocations and exit.",
    )


class EdgeCommand(click.Command):
    """Command accepting ``examples=``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(examples_option(examples))


class EdgeGroup(click.Group):
    """Group accepting ``examples=``; subcommands default to :class:`EdgeCommand`."""

    command_class = EdgeCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(examples_option(examples))

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.commands)
