"""Navigation session: owns the current tree and builds per-node actions."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace
from pathlib import Path

from .actions import ChallengeActions
from .api import ProgressClient
from .models import Action, ChallengeRecord, NodeType, TreeNode, UserProgress
from .state import ProgressStore
from .tree import build_tree

CatalogLoader = Callable[[], Sequence[ChallengeRecord]]
PrintFn = Callable[[str], None]

SETUP_LABEL = "Setup Repository"
TEST_LABEL = "Test Challenge"
SUBMIT_LABEL = "Submit Completed Challenge"
MARK_READ_LABEL = "Mark as Read"
SUBMIT_PROJECT_LABEL = "Submit Project"

logger = logging.getLogger(__name__)


class Session:
    """Coordinates catalog, progress, collaborators, and the current tree.

    `tree` is replaced wholesale by `rebuild()`; callers must read it again
    after any action instead of holding on to nodes from an older build.
    """

    def __init__(
        self,
        load_challenges: CatalogLoader,
        store: ProgressStore,
        client: ProgressClient,
        domain: ChallengeActions,
        *,
        default_install_location: Path | str = "challenges",
        print_fn: PrintFn = print,
    ) -> None:
        self.load_challenges = load_challenges
        self.store = store
        self.client = client
        self.domain = domain
        self.default_install_location = default_install_location
        self.print_fn = print_fn
        self.tree = self.rebuild()

    def load_user_state(self) -> UserProgress:
        return self.store.load_user_state(self.default_install_location)

    def rebuild(self) -> TreeNode:
        """Rebuild the tree from the current catalog and stored progress."""
        self.tree = build_tree(self.load_challenges(), self.load_user_state(), self.actions_for)
        logger.debug("Rebuilt tree with %d tag header(s)", len(self.tree.children))
        return self.tree

    def actions_for(self, record: ChallengeRecord, progress: UserProgress) -> list[Action]:
        """Return the action list for one record given the current progress snapshot."""
        name = record.name
        if record.type is NodeType.CHALLENGE:
            target_dir = Path(progress.install_location) / name
            if not target_dir.exists():
                return [Action(SETUP_LABEL, lambda: self.setup(name, progress.install_location))]
            return [
                Action(TEST_LABEL, lambda: self.test(name)),
                Action(SUBMIT_LABEL, lambda: self.submit(name)),
            ]
        if record.type is NodeType.QUIZ:
            return [Action(MARK_READ_LABEL, lambda: self.mark_read(name))]
        if record.type is NodeType.CAPSTONE_PROJECT:
            return [Action(SUBMIT_PROJECT_LABEL, lambda: self.submit_project(name))]
        return []

    async def setup(self, name: str, install_location: str) -> None:
        """Set up the challenge repository, then rebuild so the node offers test/submit."""
        logger.info("Setting up %s in %s", name, install_location)
        await self.domain.setup_challenge(name, install_location)
        self.rebuild()

    async def test(self, name: str) -> None:
        logger.info("Testing %s", name)
        await self.domain.test_challenge(name)

    async def submit(self, name: str) -> None:
        """Submit, pull remote progress, persist the merge, and rebuild."""
        logger.info("Submitting %s", name)
        await self.domain.submit_challenge(name)
        progress = self.load_user_state()
        remote = await self.client.get_user(progress.address)
        merged = replace(progress, challenges=remote.challenges)
        self.store.save_user_state(merged)
        self.rebuild()
        status = "completed" if merged.is_completed(name) else "not completed yet"
        self.print_fn(f"Challenge {name} is {status}.")

    # TODO: record quiz reads once the progress API accepts non-challenge entries.
    async def mark_read(self, name: str) -> None:
        logger.info("Mark-as-read requested for %s (no state change)", name)
        self.print_fn("Marking as read...")

    async def submit_project(self, name: str) -> None:
        logger.info("Project submission requested for %s (no state change)", name)
        self.print_fn("Submitting project...")
