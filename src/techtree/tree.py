"""Build the tag-grouped challenge tree and look up nodes within it."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .models import Action, ChallengeRecord, NodeType, TreeNode, UserProgress

ROOT_NAME = "main-menu"
ROOT_LABEL = "Main Menu"

ActionBuilder = Callable[[ChallengeRecord, UserProgress], Sequence[Action]]

logger = logging.getLogger(__name__)


class SelectionError(LookupError):
    """A selection or re-entry did not resolve to a node in the current tree."""


@dataclass(frozen=True)
class _Entry:
    """A filtered record with its derived per-build state."""

    record: ChallengeRecord
    parent_name: str | None
    completed: bool
    actions: tuple[Action, ...]


def collect_tags(challenges: Sequence[ChallengeRecord]) -> list[str]:
    """Return distinct tags in first-seen order."""
    tags: dict[str, None] = {}
    for record in challenges:
        for tag in record.tags:
            tags.setdefault(tag, None)
    return list(tags)


def build_tree(
    challenges: Sequence[ChallengeRecord],
    progress: UserProgress,
    action_builder: ActionBuilder | None = None,
) -> TreeNode:
    """Build a fresh menu tree from the catalog and a progress snapshot.

    Every tag gets its own header and its own node instances, so a record
    carrying two tags appears twice. Parent links are resolved only within the
    tag's filtered records; unresolved parents make the record a root of that
    tag's forest.
    """
    headers: list[TreeNode] = []
    for tag in collect_tags(challenges):
        filtered = [record for record in challenges if tag in record.tags]
        entries = [_entry_for(record, filtered, progress, action_builder) for record in filtered]
        forest = _nest(entries, None)

        reachable = _count(forest)
        if reachable != len(entries):
            logger.warning(
                "Tag %r: dropped %d challenge(s) reachable only through a parent cycle",
                tag,
                len(entries) - reachable,
            )

        if not forest:
            logger.debug("Dropping empty tag %r", tag)
            continue
        completed_count = sum(1 for entry in entries if entry.completed)
        headers.append(
            TreeNode(
                label=f"{tag} ({completed_count}/{len(filtered)})",
                name=tag.lower(),
                type=NodeType.HEADER,
                children=tuple(forest),
                recursive=True,
            )
        )

    return TreeNode(label=ROOT_LABEL, name=ROOT_NAME, type=NodeType.HEADER, children=tuple(headers))


def _entry_for(
    record: ChallengeRecord,
    filtered: Sequence[ChallengeRecord],
    progress: UserProgress,
    action_builder: ActionBuilder | None,
) -> _Entry:
    parent_name = next((other.name for other in filtered if record.name in other.children_names), None)
    actions = tuple(action_builder(record, progress)) if action_builder is not None else ()
    return _Entry(
        record=record,
        parent_name=parent_name,
        completed=progress.is_completed(record.name),
        actions=actions,
    )


def _nest(entries: Sequence[_Entry], parent_name: str | None) -> list[TreeNode]:
    """Group entries under `parent_name`, recursing into each child."""
    nodes: list[TreeNode] = []
    for entry in entries:
        if entry.parent_name != parent_name:
            continue
        record = entry.record
        nodes.append(
            TreeNode(
                label=record.label,
                name=record.name,
                type=record.type,
                children=tuple(_nest(entries, record.name)),
                completed=entry.completed,
                unlocked=record.enabled,
                actions=entry.actions,
                message=record.description,
                level=record.level,
            )
        )
    return unlocked_first(nodes)


def unlocked_first(nodes: Sequence[TreeNode]) -> list[TreeNode]:
    """Stable partition: unlocked siblings before locked ones, order kept within each."""
    return [node for node in nodes if node.unlocked] + [node for node in nodes if not node.unlocked]


def _count(nodes: Sequence[TreeNode]) -> int:
    return sum(1 + _count(node.children) for node in nodes)


def find_parent(root: TreeNode, target: TreeNode) -> TreeNode | None:
    """Return the node whose immediate children contain `target` (by identity)."""
    if any(child is target for child in root.children):
        return root
    for child in root.children:
        parent = find_parent(child, target)
        if parent is not None:
            return parent
    return None


def find_header(root: TreeNode, target: TreeNode) -> TreeNode:
    """Return the nearest header ancestor of `target`, or `root` when there is none."""
    parent = find_parent(root, target)
    while parent is not None:
        if parent.is_header:
            return parent
        parent = find_parent(root, parent)
    return root


def find_node(
    root: TreeNode,
    name: str,
    scope: TreeNode | None = None,
    *,
    leaves_only: bool = False,
) -> TreeNode | None:
    """Find the first node named `name` in pre-order.

    When `scope` is given, that subtree is searched first so a challenge listed
    under several tags is found under the one it was entered from. With
    `leaves_only`, headers never match even when a tag shares the name.
    """
    if scope is not None:
        found = _find_named(scope, name, leaves_only=leaves_only)
        if found is not None:
            return found
    return _find_named(root, name, leaves_only=leaves_only)


def header_at(root: TreeNode, index: int | None, name: str) -> TreeNode | None:
    """Return the tag header at `index` under `root` if it still carries `name`."""
    if index is None or not 0 <= index < len(root.children):
        return None
    header = root.children[index]
    return header if header.name == name else None


def header_index(root: TreeNode, header: TreeNode) -> int | None:
    """Position of `header` among the root's tag headers (by identity)."""
    return next((i for i, child in enumerate(root.children) if child is header), None)


def _find_named(node: TreeNode, name: str, *, leaves_only: bool = False) -> TreeNode | None:
    if node.name == name and not (leaves_only and node.is_header):
        return node
    for child in node.children:
        found = _find_named(child, name, leaves_only=leaves_only)
        if found is not None:
            return found
    return None
