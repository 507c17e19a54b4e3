"""Shared utility functions for procgen.

Provides name sanitisation, deterministic JSON rendering for generated
manifests, output-path validation, duration formatting, and Rich-based
console reporting used by the pipeline orchestrator.
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, Mapping

from rich.console import Console
from rich.rule import Rule
from rich.table import Table
from rich.tree import Tree


console = Console()

# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def sanitize_name(name: str) -> str:
    """Convert an arbitrary project name to a safe package/directory name.

    Examples::

        sanitize_name("My Cool API") -> "my-cool-api"
        sanitize_name("  2FA (TOTP)  ") -> "2fa-totp"
    """
    result = re.sub(r"[^a-zA-Z0-9_-]", "-", name.strip().lower())
    result = re.sub(r"-+", "-", result)
    return result.strip("-") or "project"


def python_identifier(name: str) -> str:
    """Convert a project name to a valid Python/Rust/Go identifier."""
    ident = re.sub(r"[^a-z0-9_]", "_", sanitize_name(name).replace("-", "_"))
    if ident[0].isdigit():
        ident = f"_{ident}"
    return ident


# ---------------------------------------------------------------------------
# Generated-content helpers
# ---------------------------------------------------------------------------


def dump_json(data: Any) -> str:
    """Render *data* as pretty JSON with a trailing newline.

    Key order is preserved, so the output is a pure function of the input and
    re-parsing then re-dumping a generated manifest yields identical text.
    """
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def validate_relative_path(path: str) -> str:
    """Check that *path* is a safe project-relative path and return it.

    Raises:
        InvalidPath: if the path is empty, absolute, uses backslashes, or
            contains ``.``/``..``/empty segments.
    """
    from procgen.engine.errors import InvalidPath

    if not isinstance(path, str) or not path:
        raise InvalidPath(str(path), "path is empty")
    if "\\" in path:
        raise InvalidPath(path, "backslash separators are not allowed")
    if path.startswith("/") or re.match(r"^[A-Za-z]:", path):
        raise InvalidPath(path, "path is absolute")
    for segment in path.split("/"):
        if segment in ("", ".", ".."):
            raise InvalidPath(path, f"illegal segment {segment!r}")
    return path


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(0.0042) -> "4ms"
        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0ms"
    if seconds < 1:
        return f"{int(round(seconds * 1000))}ms"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


STAGE_COLORS: dict[str, str] = {
    "resolve": "bright_cyan",
    "generate": "bright_green",
    "enrich": "bright_magenta",
}


def print_stage_header(stage: str, detail: str = "") -> None:
    """Print a full-width rule announcing a pipeline stage."""
    color = STAGE_COLORS.get(stage, "white")
    title = f"[bold {color}] {stage.upper()} [/bold {color}]"
    if detail:
        title += f"[dim]{detail}[/dim] "
    console.print(Rule(title, style=color))


def print_summary_table(data: Mapping[str, Any], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_file_tree(paths: Iterable[str], title: str = "Files") -> None:
    """Print generated paths as a directory tree."""
    root = Tree(f"[bold]{title}[/bold]")
    nodes: dict[str, Tree] = {}
    for path in sorted(paths):
        parent = root
        parts = path.split("/")
        for depth, part in enumerate(parts):
            key = "/".join(parts[: depth + 1])
            if key not in nodes:
                is_dir = depth < len(parts) - 1
                label = f"[blue]{part}/[/blue]" if is_dir else part
                nodes[key] = parent.add(label)
            parent = nodes[key]
    console.print(root)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
