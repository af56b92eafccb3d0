"""Commands: add single users, groups, and memberships."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from edgewalk.commands._base import EdgeCommand

if TYPE_CHECKING:
    from edgewalk.commands._context import AppContext


@click.command(
    cls=EdgeCommand,
    examples="""\
  edgewalk link 6 3
  edgewalk --json link 6 3""",
)
@click.argument("user_id", type=int)
@click.argument("group_id", type=int)
@click.pass_obj
def link(app: AppContext, user_id: int, group_id: int) -> None:
    """Add user USER_ID to group GROUP_ID."""
    from edgewalk.services.membership import MembershipService

    app.emit(MembershipService(app.store).link(user_id, group_id))


@click.command("add-user", cls=EdgeCommand, examples="  edgewalk add-user 101")
@click.argument("user_id", type=int)
@click.pass_obj
def add_user(app: AppContext, user_id: int) -> None:
    """Create user USER_ID."""
    from edgewalk.services.membership import MembershipService

    app.emit(MembershipService(app.store).add_user(user_id))


@click.command("add-group", cls=EdgeCommand, examples="  edgewalk add-group 11")
@click.argument("group_id", type=int)
@click.pass_obj
def add_group(app: AppContext, group_id: int) -> None:
    """Create group GROUP_ID."""
    from edgewalk.services.membership import MembershipService

    app.emit(MembershipService(app.store).add_group(group_id))
