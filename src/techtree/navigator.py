"""Interactive traversal of the challenge tree."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TypeVar

from .models import TreeNode
from .render import Fragments, label_fragments, menu_rows
from .session import Session
from .terminal import Terminal
from .tree import SelectionError, find_header, find_node, find_parent, header_at, header_index

BACK_LABEL = "⤴️"
LOCKED_NOTICE = (
    "This challenge doesn't exist yet. 🤔 Consider contributing to the project here: "
    "https://github.com/BuidlGuidl/eth-tech-tree-challenges"
)
ROOT_MESSAGE = "Select a category"
SUBTREE_MESSAGE = "Select a challenge"
TITLE_STYLE = "fg:ansired bold"

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Navigator:
    """Walk the session's current tree one view at a time.

    Each view returns the next node to show. Parents and headers are looked up
    in `session.tree` on demand, so a rebuild between views is always honoured.
    """

    def __init__(self, session: Session, terminal: Terminal) -> None:
        self.session = session
        self.terminal = terminal

    @property
    def tree(self) -> TreeNode:
        return self.session.tree

    async def run(self, start: TreeNode | None = None) -> None:
        """Loop until the user cancels a prompt."""
        node: TreeNode | None = start or self.tree
        while node is not None:
            try:
                node = await self.visit(node)
            except SelectionError as exc:
                logger.warning("Selection lookup failed: %s", exc)
                self.terminal.echo(f"Could not find that entry any more ({exc}); returning to the main menu.")
                await self.terminal.pause()
                node = self.tree

    async def visit(self, node: TreeNode) -> TreeNode | None:
        """Show one view for `node` and return the node to show next."""
        self.terminal.clear()
        if not node.is_header and not node.unlocked:
            self.terminal.echo(LOCKED_NOTICE)
            await self.terminal.pause()
            return find_header(self.tree, node)
        if node.is_header:
            return await self._visit_header(node)
        return await self._visit_leaf(node)

    async def _visit_header(self, node: TreeNode) -> TreeNode | None:
        rows = menu_rows(node)
        nodes = [target for _, target in rows]
        titles = [label_fragments(target, prefix) for prefix, target in rows]
        parent = find_parent(self.tree, node)
        default = 0
        if parent is not None:
            nodes.insert(0, parent)
            titles.insert(0, [("", BACK_LABEL)])
            default = 1

        message = SUBTREE_MESSAGE if parent is not None else ROOT_MESSAGE
        answer = await self.terminal.select(message, indexed_choices(titles), default=default)
        if answer is None:
            return None
        return resolve_choice(nodes, answer)

    async def _visit_leaf(self, node: TreeNode) -> TreeNode | None:
        header = find_header(self.tree, node)
        position = header_index(self.tree, header)
        self.terminal.echo(node.label, style=TITLE_STYLE)
        titles = [[("", BACK_LABEL)]] + [[("", action.label)] for action in node.actions]
        answer = await self.terminal.select(node.message or node.label, indexed_choices(titles), default=1)
        if answer is None:
            return None
        action = resolve_choice([None, *node.actions], answer)
        if action is None:
            return header

        self.terminal.clear()
        logger.info("Running %r on %s", action.label, node.name)
        await action.operation()
        await self.terminal.pause()

        scope = header_at(self.tree, position, header.name)
        reentered = find_node(self.tree, node.name, scope=scope, leaves_only=True)
        if reentered is None:
            raise SelectionError(f"challenge {node.name!r} is no longer in the tree")
        return reentered


def indexed_choices(titles: Sequence[Fragments]) -> list[tuple[str, Fragments]]:
    """Pair each title with its row index so equal labels stay distinguishable."""
    return [(str(index), title) for index, title in enumerate(titles)]


def resolve_choice(items: Sequence[T], answer: str) -> T:
    """Map a selected row index back to its item; anything else is a lookup failure."""
    try:
        index = int(answer)
    except ValueError:
        raise SelectionError(f"no menu entry for {answer!r}") from None
    if not 0 <= index < len(items):
        raise SelectionError(f"no menu entry for {answer!r}")
    return items[index]
