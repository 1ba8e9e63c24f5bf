from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from techtree.models import ChallengeRecord, NodeType, UserChallenge, UserProgress  # noqa: E402

Answer = str | None | Callable[[list[str]], int]


class ScriptedTerminal:
    """Terminal double that answers prompts from a script.

    Menus are recorded by their rendered titles. A string answer picks the first
    title containing it and returns that choice's value (or is returned as-is
    when nothing matches). A callable answer receives the titles and returns the
    index to pick. None or an exhausted script cancels the prompt.
    """

    def __init__(self, answers: Sequence[Answer] = ()) -> None:
        self.answers = list(answers)
        self.menus: list[tuple[str, list[str], int]] = []
        self.echoed: list[str] = []
        self.pauses = 0
        self.clears = 0

    async def select(self, message: str, choices: Sequence[tuple[str, Any]], default: int = 0) -> str | None:
        values = [value for value, _ in choices]
        labels = ["".join(text for _, text in title) for _, title in choices]
        self.menus.append((message, labels, default))
        if not self.answers:
            return None
        wanted = self.answers.pop(0)
        if wanted is None:
            return None
        if callable(wanted):
            return values[wanted(labels)]
        for value, label in zip(values, labels):
            if label == wanted:
                return value
        for value, label in zip(values, labels):
            if wanted in label:
                return value
        return wanted

    async def pause(self) -> None:
        self.pauses += 1

    def clear(self) -> None:
        self.clears += 1

    def echo(self, text: str, style: str | None = None) -> None:
        self.echoed.append(text)

    @property
    def last_labels(self) -> list[str]:
        return self.menus[-1][1]


class FakeActions:
    """Domain actions that record calls; setup creates the install directory."""

    def __init__(self, client: FakeClient | None = None) -> None:
        self.client = client
        self.calls: list[tuple[str, str]] = []
        self.fail_on: set[str] = set()

    async def setup_challenge(self, name: str, install_location: str) -> None:
        self.calls.append(("setup", name))
        if "setup" in self.fail_on:
            raise OSError("git not found")
        (Path(install_location) / name).mkdir(parents=True, exist_ok=True)

    async def test_challenge(self, name: str) -> None:
        self.calls.append(("test", name))

    async def submit_challenge(self, name: str) -> None:
        self.calls.append(("submit", name))
        if self.client is not None:
            self.client.completed.append(name)


class FakeClient:
    """Remote progress double: reports every submitted challenge as successful."""

    def __init__(self) -> None:
        self.completed: list[str] = []
        self.requested: list[str] = []

    async def get_user(self, address: str) -> UserProgress:
        self.requested.append(address)
        return UserProgress(
            address=address,
            install_location="",
            challenges=tuple(UserChallenge(name, "success") for name in self.completed),
        )


@pytest.fixture
def make_record() -> Callable[..., ChallengeRecord]:
    def factory(
        name: str,
        *,
        tags: Sequence[str] = ("core",),
        children: Sequence[str] = (),
        enabled: bool = True,
        type: NodeType = NodeType.CHALLENGE,
        label: str | None = None,
        description: str = "",
    ) -> ChallengeRecord:
        return ChallengeRecord(
            name=name,
            label=label or name,
            level=1,
            type=type,
            tags=tuple(tags),
            children_names=tuple(children),
            enabled=enabled,
            description=description,
        )

    return factory


@pytest.fixture
def empty_progress(tmp_path: Path) -> UserProgress:
    return UserProgress(address="0xabc", install_location=str(tmp_path / "challenges"))


@pytest.fixture
def scripted() -> Callable[..., ScriptedTerminal]:
    def factory(*answers: Answer) -> ScriptedTerminal:
        return ScriptedTerminal(answers)

    return factory


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def fake_actions(fake_client: FakeClient) -> FakeActions:
    return FakeActions(fake_client)
