"""Render menu labels with tree connectors and status glyphs."""

from __future__ import annotations

from .models import NodeType, TreeNode

TROPHY = "🏆"
SCROLL = "📜"
LAPTOP = "💻"

BRANCH = "├─"
LAST_BRANCH = "└─"
PASS_THROUGH = "│ "
BLANK = "  "

HEADER_INDENT_DIVISOR = 5
NODE_INDENT_DIVISOR = 2

HEADER_STYLE = "class:header"
LOCKED_STYLE = "class:locked"

Fragments = list[tuple[str, str]]


def label_fragments(node: TreeNode, prefix: str = "") -> Fragments:
    """Return `(style, text)` pieces for one menu row.

    Headers and locked nodes are styled and never carry a glyph; unlocked
    challenges get a trophy once completed, quizzes and capstones always show
    their kind.
    """
    lead = ("", f"{prefix} ")
    if node.type is NodeType.HEADER:
        return [lead, (HEADER_STYLE, node.label)]
    if not node.unlocked:
        return [lead, (LOCKED_STYLE, node.label)]
    if node.type is NodeType.CHALLENGE:
        glyph = TROPHY if node.completed else ""
    elif node.type is NodeType.QUIZ:
        glyph = SCROLL
    elif node.type is NodeType.CAPSTONE_PROJECT:
        glyph = LAPTOP
    else:
        glyph = ""
    fragments = [lead, ("", node.label)]
    if glyph:
        fragments.append(("", f" {glyph}"))
    return fragments


def render_label(node: TreeNode, prefix: str = "") -> str:
    """Plain display text for one menu row."""
    return "".join(text for _, text in label_fragments(node, prefix))


def menu_rows(node: TreeNode) -> list[tuple[str, TreeNode]]:
    """Return `(connector prefix, node)` rows for the menu shown at `node`.

    A non-recursive node lists its immediate children. A recursive node lists
    its whole subtree in pre-order, itself first, with branch connectors.
    """
    if not node.recursive:
        return [("", child) for child in node.children]

    rows: list[tuple[str, TreeNode]] = []

    def walk(current: TreeNode, is_last: bool, depth: str) -> None:
        if not current.is_header:
            depth += LAST_BRANCH if is_last else BRANCH
        rows.append((depth, current))
        depth = continue_prefix(depth)
        divisor = HEADER_INDENT_DIVISOR if current.is_header else NODE_INDENT_DIVISOR
        depth += " " * (len(current.label) // divisor)
        last = len(current.children) - 1
        for index, child in enumerate(current.children):
            walk(child, index == last, depth)

    walk(node, False, "")
    return rows


def menu_choices(node: TreeNode) -> tuple[list[str], list[TreeNode]]:
    """Return parallel lists of row labels and the nodes they select."""
    rows = menu_rows(node)
    return [render_label(target, prefix) for prefix, target in rows], [target for _, target in rows]


def continue_prefix(prefix: str) -> str:
    """Turn branch glyphs into pass-through glyphs for the next depth level."""
    return prefix.replace(BRANCH, PASS_THROUGH).replace(LAST_BRANCH, BLANK)
