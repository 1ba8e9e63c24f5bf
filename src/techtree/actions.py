"""Domain actions: repository setup, local testing, and submission."""

from __future__ import annotations

import asyncio
import logging
import shlex
from pathlib import Path
from typing import Protocol

from .api import ProgressClient

logger = logging.getLogger(__name__)


class ActionFailed(RuntimeError):
    """A domain action did not complete successfully."""


class ChallengeActions(Protocol):
    """Operations the navigator can trigger for a challenge."""

    async def setup_challenge(self, name: str, install_location: str) -> None: ...

    async def test_challenge(self, name: str) -> None: ...

    async def submit_challenge(self, name: str) -> None: ...


class ShellChallengeActions:
    """Run setup and tests as subprocesses; submit through the progress API."""

    def __init__(
        self,
        client: ProgressClient,
        *,
        address: str,
        install_location: Path | str,
        repo_template: str,
        test_command: str,
    ) -> None:
        self.client = client
        self.address = address
        self.install_location = Path(install_location)
        self.repo_template = repo_template
        self.test_command = test_command

    async def setup_challenge(self, name: str, install_location: str) -> None:
        """Clone the challenge repository into `<install_location>/<name>`."""
        root = Path(install_location)
        root.mkdir(parents=True, exist_ok=True)
        repo = self.repo_template.format(name=name)
        await _run(["git", "clone", "--depth", "1", repo, str(root / name)], cwd=root)
        self.install_location = root

    async def test_challenge(self, name: str) -> None:
        """Run the configured test command inside the challenge directory."""
        workdir = self.install_location / name
        if not workdir.is_dir():
            raise ActionFailed(f"Challenge '{name}' is not set up at {workdir}.")
        await _run(shlex.split(self.test_command), cwd=workdir)

    async def submit_challenge(self, name: str) -> None:
        if not self.address:
            raise ActionFailed("No account address configured; run with --address first.")
        await self.client.submit_challenge(name, self.address)


async def _run(argv: list[str], *, cwd: Path) -> None:
    """Run a command with inherited stdio and fail on non-zero exit."""
    logger.info("Running %s in %s", shlex.join(argv), cwd)
    process = await asyncio.create_subprocess_exec(*argv, cwd=str(cwd))
    code = await process.wait()
    if code != 0:
        raise ActionFailed(f"Command '{shlex.join(argv)}' exited with status {code}.")
