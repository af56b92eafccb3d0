"""Human-readable rendering of a ServiceResult, one renderer per op.

Everything is drawn onto a StringIO-backed console from
:func:`create_console` and returned as text; Rich drops the colour codes
when stdout is not a terminal.  Traversals render as a table of records
followed by a ``N records in P pages`` summary and, when the walk stopped
early, the cursor to pass to ``--after``.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from edgewalk.output.console import create_console, get_output, style_for_collection

if TYPE_CHECKING:
    from rich.console import Console

    from edgewalk.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console"], None]

_VALUE_STYLES = (("cursor", "ew.cursor"), ("_id", "ew.id"), ("ref", "ew.ref"))


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render *result* as styled text (plain when not on a terminal)."""
    console = create_console()
    if result.ok:
        _RENDERERS.get(result.op, _render_fields)(result, console)
    else:
        _render_error(result, console, verbose=verbose)
    if verbose and result.meta:
        _render_meta(console, result.meta)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Pipe-friendly output for ``-q``.

    Membership walks print one related id per line, other traversals one
    compact JSON record per line, anything else a single status line.
    """
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {message}"
    if isinstance(result.data.get("related_ids"), list):
        return "\n".join(str(ident) for ident in result.data["related_ids"])
    if isinstance(result.data.get("items"), list):
        return "\n".join(json.dumps(item, separators=(",", ":")) for item in result.data["items"])
    return f"OK: {result.op}"


def _field(console: Console, key: str, value: Any) -> None:
    if isinstance(value, (dict, list)):
        text = Text(json.dumps(value, separators=(",", ":")))
    else:
        style = next((s for suffix, s in _VALUE_STYLES if key.endswith(suffix)), "")
        text = Text(str(value), style="ew.id" if key == "id" else style)
    console.print(Text(f"  {key}: ", style="ew.key"), text, sep="")


def _status(console: Console, result: ServiceResult, extra: str = "") -> None:
    console.print(
        Text("OK", style="ew.ok"), Text(f"  {result.op}", style="ew.op"), Text(extra), sep=""
    )


def _render_error(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    err = result.error
    console.print(
        Text("ERROR", style="ew.error"),
        Text(f"  {result.op}", style="ew.op"),
        Text(f": {err.message if err else 'Unknown error'}"),
        sep="",
    )
    # A traversal that failed part-way still says where to pick up.
    if result.resume_cursor:
        _field(console, "resume_cursor", result.resume_cursor)
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in err.detail.items():
            console.print(Text(f"    {key}: {value}"))


def _render_meta(console: Console, meta: dict[str, Any]) -> None:
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in meta.items():
        if key == "telemetry":
            console.print(_span_tree(value), style="dim")
        else:
            console.print(Text(f"    {key}: {value}"))


def _span_label(span: dict[str, Any]) -> Text:
    duration = span.get("duration_ms", 0.0)
    style = "bold red" if duration > 1000 else "yellow" if duration > 100 else ""
    label = Text(f"{duration:8.2f}ms", style=style)
    label.append(f"  {span.get('name', '?')}")
    notes = span.get("annotations") or {}
    if notes:
        label.append(f"  ({', '.join(f'{k}={v}' for k, v in notes.items())})")
    return label


def _span_tree(span: dict[str, Any], tree: Tree | None = None) -> Tree:
    node = Tree(_span_label(span)) if tree is None else tree.add(_span_label(span))
    for child in span.get("children", []):
        _span_tree(child, node)
    return node


def _render_fields(result: ServiceResult, console: Console) -> None:
    _status(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


def _render_write(result: ServiceResult, console: Console) -> None:
    _status(console, result)
    for key in ("ref", "id", "user_id", "group_id"):
        if key in result.data:
            _field(console, key, result.data[key])


def _render_setup(result: ServiceResult, console: Console) -> None:
    d = result.data
    _status(console, result, "  (store reset)" if d.get("reset") else "")
    for key in ("collections_created", "indexes_created", "indexes_existing"):
        _field(console, key, ", ".join(d.get(key, [])) or "-")


def _render_seed(result: ServiceResult, console: Console) -> None:
    _status(console, result)
    for key in ("users", "groups", "edges", "duplicates", "seed"):
        if result.data.get(key) is not None:
            _field(console, key, result.data[key])


def _records_table(items: list[dict[str, Any]]) -> Table:
    columns = list(items[0])
    source = "edges" if set(columns) == {"user_id", "group_id"} else ""
    table = Table(pad_edge=False)
    for column in columns:
        table.add_column(
            column.replace("_", " ").title(),
            style=style_for_collection(source) or "ew.id",
            justify="right",
        )
    for item in items:
        table.add_row(*(str(item.get(column, "")) for column in columns))
    return table


def _render_traversal(result: ServiceResult, console: Console) -> None:
    d = result.data
    items = d.get("items", [])
    key = d.get("key")
    _status(console, result, f"  {d.get('index')}" + ("" if key is None else f" [{key}]"))
    if items:
        console.print(_records_table(items))
    if "related_ids" in d:
        _field(console, "related_ids", d["related_ids"])
    console.print(f"{d.get('count', len(items))} records in {d.get('pages', 0)} pages")
    if d.get("next_cursor"):
        _field(console, "next_cursor", d["next_cursor"])


_RENDERERS: dict[str, Renderer] = {
    "setup": _render_setup,
    "seed": _render_seed,
    "add_user": _render_write,
    "add_group": _render_write,
    "link": _render_write,
    "traverse": _render_traversal,
    "user_groups": _render_traversal,
    "group_users": _render_traversal,
}
