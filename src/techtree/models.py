"""Core domain models for the challenge catalog, user progress, and menu tree."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

SUCCESS_STATUS = "success"


class NodeType(str, Enum):
    """Kind of a menu tree node."""

    HEADER = "header"
    CHALLENGE = "challenge"
    QUIZ = "quiz"
    CAPSTONE_PROJECT = "capstone-project"


@dataclass(frozen=True)
class ChallengeRecord:
    """One catalog entry as supplied by the catalog loader."""

    name: str
    label: str
    level: int
    type: NodeType
    tags: tuple[str, ...]
    children_names: tuple[str, ...] = ()
    enabled: bool = True
    description: str = ""
    repo: str = ""


@dataclass(frozen=True)
class UserChallenge:
    """Progress entry for one challenge."""

    challenge_name: str
    status: str


@dataclass(frozen=True)
class UserProgress:
    """Local user state: identity, install root, and challenge results."""

    address: str
    install_location: str
    challenges: tuple[UserChallenge, ...] = ()

    def is_completed(self, challenge_name: str) -> bool:
        """Return whether any entry marks the challenge as successful."""
        return any(
            entry.challenge_name == challenge_name and entry.status == SUCCESS_STATUS for entry in self.challenges
        )


Operation = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class Action:
    """Named asynchronous operation offered on a node."""

    label: str
    operation: Operation


@dataclass(frozen=True, eq=False)
class TreeNode:
    """Menu tree node.

    Equality is identity: the same challenge may appear under several tags as
    independent instances, and ancestor lookups must tell them apart.
    """

    label: str
    name: str
    type: NodeType
    children: tuple[TreeNode, ...] = ()
    completed: bool = False
    unlocked: bool = True
    actions: tuple[Action, ...] = ()
    message: str = ""
    level: int = 0
    recursive: bool = False

    @property
    def is_header(self) -> bool:
        return self.type is NodeType.HEADER
