from awiv_adapter.diagnostics_filter import (
    extract_leaf_children_diagnostics,
    extract_leaf_diagnostics,
    is_child,
    parent_names,
    split_by_last_slash,
)
from awiv_adapter.messages import DiagnosticStatus


def _diag(name):
    return DiagnosticStatus(name=name)


def test_split_by_last_slash():
    assert split_by_last_slash("/a/b/c") == "/a/b"
    assert split_by_last_slash("abc") == ""
    assert split_by_last_slash("/a") == ""


def test_parent_names_nearest_first():
    assert parent_names("/a/b/c") == ["/a/b", "/a"]
    assert parent_names("plain") == []


def test_is_child():
    assert is_child(_diag("/a/b/c"), _diag("/a"))
    assert is_child(_diag("/a/b/c"), _diag("/a/b"))
    assert not is_child(_diag("/a/b"), _diag("/a/b"))
    assert not is_child(_diag("/x/b"), _diag("/a"))


def test_extract_leaf_diagnostics_keeps_order():
    diags = [_diag("/a"), _diag("/a/b"), _diag("/a/b/c"), _diag("/a/d"), _diag("/e")]
    leaves = extract_leaf_diagnostics(diags)
    assert [d.name for d in leaves] == ["/a/b/c", "/a/d", "/e"]


def test_leaves_are_never_ancestors():
    diags = [_diag(n) for n in ["/a", "/a/b", "/a/b/c", "/q/r", "/q"]]
    leaves = extract_leaf_diagnostics(diags)
    for leaf in leaves:
        assert not any(is_child(other, leaf) for other in diags)


def test_leaf_extraction_is_idempotent():
    diags = [_diag(n) for n in ["/a", "/a/b", "/c/d", "/c"]]
    once = extract_leaf_diagnostics(diags)
    assert extract_leaf_diagnostics(once) == once


def test_extract_leaf_children():
    diags = [_diag(n) for n in ["/a", "/a/b", "/a/b/c", "/a/d", "/e/f"]]
    children = extract_leaf_children_diagnostics(_diag("/a"), diags)
    assert [d.name for d in children] == ["/a/b/c", "/a/d"]
    assert extract_leaf_children_diagnostics(_diag("/z"), diags) == []