"""Operation-specific Rich renderers for ServiceResult.

Renderers write to a StringIO-backed Console and are dispatched by
``result.op`` in :func:`render_result`. Unknown ops fall through to a
generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from boxplan.output.console import create_console, get_output, style_for_type

if TYPE_CHECKING:
    from rich.console import Console

    from boxplan.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if isinstance(item, dict))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="box.ok"), Text(f"  {result.op}", style="box.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="box.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="box.id")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v)


def _counts(counts: dict[str, int]) -> str:
    if not counts:
        return "-"
    return ", ".join(name if n == 1 else f"{name} x{n}" for name, n in counts.items())


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    duration = span_data.get("duration_ms", 0.0)
    style = "bold red" if duration > 1000 else "yellow" if duration > 100 else "dim"
    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {span_data.get('name', '?')}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)
    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text.assemble(("ERROR", "box.error"), (f"  {result.op}", "box.op"), ": ", msg))
    if err and err.code == "ASYMMETRIC":
        for issue in err.detail.get("issues", []):
            console.print(
                f"  {escape(str(issue['parent']))} -> {escape(str(issue['child']))}: "
                f"children={issue['children']} parents={issue['parents']}"
            )
    elif verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {escape(str(v))}")


# ── Board renderers ───────────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Table of entities and their active errors."""
    items = result.data.get("items", [])
    total = result.data.get("total", 0)

    if total == 0 and not verbose:
        console.print("[box.ok]OK[/box.ok]  No errors.")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="box.id", no_wrap=True)
    table.add_column("Type")
    table.add_column("Errors")
    if verbose:
        table.add_column("Text", style="dim")

    for item in items:
        errors = item.get("errors", [])
        if not errors and not verbose:
            continue
        row: list[Any] = [
            str(item["id"]),
            Text(str(item.get("type", "")), style=style_for_type(str(item.get("type", "")))),
            Text("; ".join(errors), style="box.error") if errors else Text("-", style="dim"),
        ]
        if verbose:
            row.append(str(item.get("text", "")))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{total} errors")
    if verbose:
        _render_meta(console, result)


def _render_show(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """One entity as a panel."""
    d = result.data
    lines = [f"type: {escape(str(d.get('type', '')))}"]
    for region in d.get("regions", []):
        (left, top), (right, bottom) = region
        lines.append(f"region: ({left}, {top}) - ({right}, {bottom})")
    lines.append(f"parents: {escape(_counts(d.get('parents', {})))}")
    lines.append(f"children: {escape(_counts(d.get('children', {})))}")
    if d.get("units") is not None:
        lines.append(f"units: {d['units']}")
    if d.get("total_units") is not None:
        lines.append(f"total units: {d['total_units']}")
    if d.get("counted_by"):
        lines.append(f"counted by: {escape(', '.join(d['counted_by']))}")
    for label, message in d.get("errors", {}).items():
        lines.append(f"[box.error]error[/box.error] {escape(label)}: {escape(message)}")
    if verbose and d.get("text"):
        lines.append(f"text: {escape(d['text'])}")

    style = style_for_type(str(d.get("type", "")))
    title = escape(str(d.get("id", "?")))
    console.print(Panel("\n".join(lines), title=title, border_style=style or "dim", expand=False))
    if verbose:
        _render_meta(console, result)


def _render_move(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "id", d.get("id"))
    _field(console, "region", d.get("region"))
    for relation in ("parents", "children"):
        changes = d.get(relation, {})
        if changes:
            rendered = ", ".join(f"+{k} x{n}" if n else f"-{k}" for k, n in changes.items())
            _field(console, relation, rendered)
    errors = d.get("errors", {})
    if errors:
        _field(console, "errors", "; ".join(errors.values()))
    if "snapshot_id" in d:
        _field(console, "snapshot_id", d["snapshot_id"])
    if verbose:
        _render_meta(console, result)


def _render_tree(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Containment hierarchy as a Rich tree."""
    roots = result.data.get("roots", [])
    if not roots:
        console.print("Empty board.")
        return

    def label(node: dict[str, Any]) -> Text:
        text = Text(str(node["id"]), style="box.id")
        if node.get("count", 1) != 1:
            text.append(f" x{node['count']}", style="box.count")
        kind = str(node.get("type", ""))
        if kind:
            text.append(f" ({kind})", style=style_for_type(kind) or "dim")
        if node.get("seen"):
            text.append(" …", style="dim")
        return text

    def grow(branch: Tree, node: dict[str, Any]) -> None:
        for child in node.get("children", []):
            grow(branch.add(label(child)), child)

    for root in roots:
        tree = Tree(label(root))
        grow(tree, root)
        console.print(tree)
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "check": _render_check,
    "show": _render_show,
    "move": _render_move,
    "save": _render_generic,
    "tree": _render_tree,
    "verify": _render_generic,
}
