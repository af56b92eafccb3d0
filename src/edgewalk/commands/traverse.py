"""Commands: walk membership indexes page by page."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import click

from edgewalk.commands._base import EdgeCommand

if TYPE_CHECKING:
    from edgewalk.commands._context import AppContext
    from edgewalk.services.traverse import TraverseService


def _paging_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Shared --page-size / --after / --limit options."""
    func = click.option(
        "--limit", type=int, default=None, help="Stop after the page that reaches this many records."
    )(func)
    func = click.option("--after", default=None, help="Resume from a cursor printed by an earlier run.")(
        func
    )
    func = click.option(
        "--page-size", type=int, default=None, help="Entries per store request (default from config)."
    )(func)
    return func


def _service(app: AppContext) -> TraverseService:
    from edgewalk.services.traverse import TraverseService

    return TraverseService(app.store, app.settings.paging)


def parse_term(value: str) -> Any:
    """Read a match term from the command line.

    JSON scalars are decoded (``6`` is the integer 6, ``"6"`` the string);
    anything that is not valid JSON is taken as a plain string.
    """
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


@click.command(
    cls=EdgeCommand,
    examples="""\
  edgewalk groups 6
  edgewalk groups 6 --page-size 4
  edgewalk -q groups 6
  edgewalk groups 6 --after <cursor>""",
)
@click.argument("user_id", type=int)
@_paging_options
@click.pass_obj
def groups(
    app: AppContext,
    user_id: int,
    page_size: int | None,
    after: str | None,
    limit: int | None,
) -> None:
    """List the groups user USER_ID belongs to."""
    app.emit(_service(app).groups_for_user(user_id, page_size=page_size, after=after, limit=limit))


@click.command(
    cls=EdgeCommand,
    examples="""\
  edgewalk users 3
  edgewalk --json users 3 --limit 10""",
)
@click.argument("group_id", type=int)
@_paging_options
@click.pass_obj
def users(
    app: AppContext,
    group_id: int,
    page_size: int | None,
    after: str | None,
    limit: int | None,
) -> None:
    """List the users that belong to group GROUP_ID."""
    app.emit(_service(app).users_for_group(group_id, page_size=page_size, after=after, limit=limit))


@click.command(
    cls=EdgeCommand,
    examples="""\
  edgewalk traverse edges_all
  edgewalk traverse users_all --page-size 50
  edgewalk traverse edges_user_groups 6
  edgewalk traverse edge_user_group 6 3""",
)
@click.argument("index_name")
@click.argument("terms", nargs=-1)
@_paging_options
@click.pass_obj
def traverse(
    app: AppContext,
    index_name: str,
    terms: tuple[str, ...],
    page_size: int | None,
    after: str | None,
    limit: int | None,
) -> None:
    """Read every entry of INDEX_NAME matching TERMS.

    Give no TERMS for a term-less index, one per term field otherwise.
    """
    app.emit(
        _service(app).traverse(
            index_name,
            _match_key(terms),
            page_size=page_size,
            after=after,
            limit=limit,
        )
    )


@click.command(
    cls=EdgeCommand,
    examples="""\
  edgewalk count edges_all
  edgewalk count edges_user_groups 6""",
)
@click.argument("index_name")
@click.argument("terms", nargs=-1)
@click.pass_obj
def count(app: AppContext, index_name: str, terms: tuple[str, ...]) -> None:
    """Count the entries of INDEX_NAME matching TERMS."""
    app.emit(_service(app).count(index_name, _match_key(terms)))


def _match_key(terms: tuple[str, ...]) -> Any:
    if not terms:
        return None
    values = tuple(parse_term(term) for term in terms)
    return values[0] if len(values) == 1 else values
