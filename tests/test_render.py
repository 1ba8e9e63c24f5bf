from techtree.models import NodeType, TreeNode
from techtree.render import (
    HEADER_STYLE,
    LOCKED_STYLE,
    continue_prefix,
    label_fragments,
    menu_choices,
    menu_rows,
    render_label,
)


def _node(label: str, type: NodeType = NodeType.CHALLENGE, **kwargs) -> TreeNode:
    return TreeNode(label=label, name=label.lower(), type=type, **kwargs)


def test_header_label_is_styled_without_glyph() -> None:
    header = _node("Voting (1/1)", NodeType.HEADER, completed=True)
    assert render_label(header) == " Voting (1/1)"
    assert label_fragments(header)[1] == (HEADER_STYLE, "Voting (1/1)")


def test_locked_label_is_dimmed_and_never_has_glyph() -> None:
    for kind in (NodeType.CHALLENGE, NodeType.QUIZ, NodeType.CAPSTONE_PROJECT):
        locked = _node("Soon", kind, unlocked=False, completed=True)
        assert render_label(locked, "├─") == "├─ Soon"
        assert label_fragments(locked, "├─")[1] == (LOCKED_STYLE, "Soon")


def test_challenge_trophy_only_when_completed() -> None:
    assert render_label(_node("Ballot")) == " Ballot"
    assert render_label(_node("Ballot", completed=True)) == " Ballot 🏆"


def test_quiz_and_capstone_glyphs_are_unconditional() -> None:
    assert render_label(_node("Read", NodeType.QUIZ)) == " Read 📜"
    assert render_label(_node("Build", NodeType.CAPSTONE_PROJECT)) == " Build 💻"


def test_continue_prefix_rewrites_branch_glyphs() -> None:
    assert continue_prefix("│ ├─") == "│ │ "
    assert continue_prefix("├─  └─") == "│     "
    assert continue_prefix("") == ""


def test_flat_menu_lists_immediate_children_only() -> None:
    grandchild = _node("Deep")
    child = _node("Tokens (0/1)", NodeType.HEADER, children=(grandchild,), recursive=True)
    root = _node("Main Menu", NodeType.HEADER, children=(child,))
    labels, nodes = menu_choices(root)
    assert labels == [" Tokens (0/1)"]
    assert nodes == [child]


def test_recursive_menu_draws_connectors_in_preorder() -> None:
    b = _node("Bb")
    c = _node("Cc")
    a = _node("Aaaa", children=(b, c))
    d = _node("Dd", unlocked=False)
    header = _node("Tag (0/4)", NodeType.HEADER, children=(a, d), recursive=True)

    labels, nodes = menu_choices(header)

    # header: no connector, then len("Tag (0/4)") // 5 == 1 space of padding
    # a: len("Aaaa") // 2 == 2 more spaces for its children
    assert labels == [
        " Tag (0/4)",
        " ├─ Aaaa",
        " │   ├─ Bb",
        " │   └─ Cc",
        " └─ Dd",
    ]
    assert nodes == [header, a, b, c, d]


def test_last_sibling_subtree_uses_blank_pass_through() -> None:
    leaf = _node("L")
    last = _node("Last", children=(leaf,))
    header = _node("H", NodeType.HEADER, children=(last,), recursive=True)
    rows = menu_rows(header)
    assert [prefix for prefix, _ in rows] == ["", "└─", "    └─"]
