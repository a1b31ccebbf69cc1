"""Selection of leaf diagnostics from slash-separated hierarchies."""

from __future__ import annotations

from typing import Iterable

from awiv_adapter.messages import DiagnosticStatus


def split_by_last_slash(name: str) -> str:
    """Return the part of name before its last slash, or "" if there is none."""
    idx = name.rfind("/")
    return "" if idx == -1 else name[:idx]


def _ancestors(name: str):
    parent = split_by_last_slash(name)
    while parent:
        yield parent
        parent = split_by_last_slash(parent)


def parent_names(diag_name: str) -> list[str]:
    """Return every ancestor name of a diagnostic, nearest first."""
    return list(_ancestors(diag_name))


def is_child(child: DiagnosticStatus, parent: DiagnosticStatus) -> bool:
    """Tell whether child lies anywhere below parent in the hierarchy."""
    return any(name == parent.name for name in _ancestors(child.name))


def extract_leaf_diagnostics(
    diagnostics: Iterable[DiagnosticStatus],
) -> list[DiagnosticStatus]:
    """Keep only diagnostics that are not an ancestor of another one."""
    diagnostics = list(diagnostics)
    inner = {name for diag in diagnostics for name in _ancestors(diag.name)}
    return [diag for diag in diagnostics if diag.name not in inner]


def extract_leaf_children_diagnostics(
    parent: DiagnosticStatus, diagnostics: Iterable[DiagnosticStatus]
) -> list[DiagnosticStatus]:
    """Keep the leaf diagnostics that lie below parent."""
    return [d for d in extract_leaf_diagnostics(diagnostics) if is_child(d, parent)]