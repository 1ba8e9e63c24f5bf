"""CLI entrypoint for the challenge tree navigator."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sqlite3
from collections.abc import Sequence
from functools import partial

import httpx

from .actions import ActionFailed, ShellChallengeActions
from .api import ProgressAPIError, ProgressClient
from .catalog import load_challenges, load_challenges_from_file
from .config import Settings, load_settings
from .models import ChallengeRecord
from .navigator import Navigator
from .session import CatalogLoader, Session
from .state import ProgressStore
from .terminal import QuestionaryTerminal, Terminal

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
RECOVERABLE_ERRORS = (ActionFailed, ProgressAPIError, httpx.HTTPError, sqlite3.Error, OSError)

logger = logging.getLogger(__name__)


def run(argv: list[str] | None = None) -> int:
    """Run the CLI application."""
    parser = argparse.ArgumentParser(prog="techtree", description="Navigate and work through learning challenges")
    parser.add_argument("command", nargs="?", default="play", choices=["play"])
    parser.add_argument("--address", help="account address used for submissions and progress sync")
    parser.add_argument("--install-location", help="directory where challenge repositories are set up")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(settings, verbose=args.verbose)
    return asyncio.run(play(settings, address=args.address, install_location=args.install_location))


def configure_logging(settings: Settings, *, verbose: bool = False) -> None:
    """Send logs to a file under the app home; the terminal belongs to the prompts."""
    settings.home.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(settings.log_path),
        level=logging.DEBUG if verbose else settings.log_level,
        format=LOG_FORMAT,
    )


def catalog_loader(settings: Settings) -> CatalogLoader:
    """Bundled catalog unless `TECHTREE_CATALOG` points at a file."""
    if settings.catalog_path is not None:
        return partial(load_challenges_from_file, settings.catalog_path)
    return load_challenges


async def play(
    settings: Settings,
    *,
    address: str | None = None,
    install_location: str | None = None,
    terminal: Terminal | None = None,
) -> int:
    """Open the stores and run navigation until the user quits."""
    load: CatalogLoader = catalog_loader(settings)
    try:
        challenges: Sequence[ChallengeRecord] = load()
    except ValueError as exc:
        logger.error("Invalid challenge catalog: %s", exc)
        print(f"Could not load challenges: {exc}")
        return 1
    logger.info("Loaded %d challenges", len(challenges))

    terminal = terminal or QuestionaryTerminal()
    store = ProgressStore(settings.db_path)
    try:
        progress = store.load_user_state(settings.default_install_location)
        if address is not None or install_location is not None:
            progress = store.update_user(
                address=address,
                install_location=install_location,
                default_install_location=settings.default_install_location,
            )
        async with ProgressClient(settings.api_url) as client:
            domain = ShellChallengeActions(
                client,
                address=progress.address,
                install_location=progress.install_location,
                repo_template=settings.repo_template,
                test_command=settings.test_command,
            )
            session = Session(
                load,
                store,
                client,
                domain,
                default_install_location=settings.default_install_location,
                print_fn=terminal.echo,
            )
            await _navigate(Navigator(session, terminal), terminal)
        return 0
    finally:
        store.close()


async def _navigate(navigator: Navigator, terminal: Terminal) -> None:
    """Run the navigator, restarting from a fresh root after a failed action."""
    while True:
        try:
            await navigator.run()
            return
        except RECOVERABLE_ERRORS as exc:
            logger.exception("Action failed")
            terminal.echo(f"Action failed: {exc}")
            await terminal.pause()
            navigator.session.rebuild()


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
