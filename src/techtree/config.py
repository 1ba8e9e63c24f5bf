"""Runtime settings read from the environment and an optional `.env` file."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_API_URL = "https://api.techtree.dev"
DEFAULT_REPO_TEMPLATE = "https://github.com/techtree-challenges/{name}.git"
DEFAULT_TEST_COMMAND = "yarn test"


@dataclass(frozen=True)
class Settings:
    """Resolved application settings."""

    home: Path
    api_url: str
    catalog_path: Path | None
    repo_template: str
    test_command: str
    log_level: str

    @property
    def db_path(self) -> Path:
        return self.home / "progress.db"

    @property
    def log_path(self) -> Path:
        return self.home / "techtree.log"

    @property
    def default_install_location(self) -> Path:
        return self.home / "challenges"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from `environ` (defaults to `os.environ` after loading `.env`)."""
    if environ is None:
        load_dotenv()
        environ = os.environ
    catalog = environ.get("TECHTREE_CATALOG", "").strip()
    return Settings(
        home=Path(environ.get("TECHTREE_HOME", ".techtree")),
        api_url=environ.get("TECHTREE_API_URL", DEFAULT_API_URL).rstrip("/"),
        catalog_path=Path(catalog) if catalog else None,
        repo_template=environ.get("TECHTREE_REPO_TEMPLATE", DEFAULT_REPO_TEMPLATE),
        test_command=environ.get("TECHTREE_TEST_COMMAND", DEFAULT_TEST_COMMAND),
        log_level=environ.get("TECHTREE_LOG_LEVEL", "INFO").upper(),
    )
