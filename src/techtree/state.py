"""SQLite persistence for the local user record and challenge results."""

from __future__ import annotations

import logging
import sqlite3
from datetime import UTC, datetime
from pathlib import Path

from .models import UserChallenge, UserProgress

SCHEMA_VERSION = 1

logger = logging.getLogger(__name__)


class ProgressStore:
    """Database access layer for user progress."""

    def __init__(self, db_path: Path | str) -> None:
        """Initialize database and schema."""
        if isinstance(db_path, Path):
            db_path.parent.mkdir(parents=True, exist_ok=True)
            target = str(db_path)
        else:
            target = db_path
        self._conn = sqlite3.connect(target)
        self._conn.row_factory = sqlite3.Row
        self._apply_migrations()

    def _apply_migrations(self) -> None:
        """Apply forward-only schema migrations to latest version."""
        current = int(self._conn.execute("PRAGMA user_version").fetchone()[0])
        if current > SCHEMA_VERSION:
            raise RuntimeError(f"Database schema version {current} is newer than supported {SCHEMA_VERSION}.")

        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_migrations (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL
                )
                """)

        for version in range(current + 1, SCHEMA_VERSION + 1):
            if version == 1:
                self._migrate_to_v1()
            with self._conn:
                self._conn.execute(f"PRAGMA user_version = {version}")
                self._conn.execute(
                    "INSERT OR REPLACE INTO schema_migrations (version, applied_at) VALUES (?, ?)",
                    (version, datetime.now(UTC).isoformat()),
                )
            logger.debug("Applied progress schema migration %d", version)

    def _migrate_to_v1(self) -> None:
        """Create the single-row user table and the ordered challenge results table."""
        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS user_state (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    address TEXT NOT NULL,
                    install_location TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """)
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS challenge_progress (
                    position INTEGER PRIMARY KEY,
                    challenge_name TEXT NOT NULL,
                    status TEXT NOT NULL
                )
                """)

    def load_user_state(self, default_install_location: Path | str = "challenges") -> UserProgress:
        """Return stored progress, or an empty record when nothing was saved yet."""
        row = self._conn.execute("SELECT address, install_location FROM user_state WHERE id = 1").fetchone()
        rows = self._conn.execute(
            "SELECT challenge_name, status FROM challenge_progress ORDER BY position ASC"
        ).fetchall()
        challenges = tuple(
            UserChallenge(challenge_name=str(item["challenge_name"]), status=str(item["status"])) for item in rows
        )
        if row is None:
            return UserProgress(address="", install_location=str(default_install_location), challenges=challenges)
        return UserProgress(
            address=str(row["address"]),
            install_location=str(row["install_location"]),
            challenges=challenges,
        )

    def save_user_state(self, progress: UserProgress) -> None:
        """Replace the stored user record and challenge results."""
        now = datetime.now(UTC).isoformat()
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO user_state (id, address, install_location, updated_at)
                VALUES (1, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    address = excluded.address,
                    install_location = excluded.install_location,
                    updated_at = excluded.updated_at
                """,
                (progress.address, progress.install_location, now),
            )
            self._conn.execute("DELETE FROM challenge_progress")
            self._conn.executemany(
                "INSERT INTO challenge_progress (position, challenge_name, status) VALUES (?, ?, ?)",
                [
                    (position, entry.challenge_name, entry.status)
                    for position, entry in enumerate(progress.challenges)
                ],
            )
        logger.info("Saved user state with %d challenge entries", len(progress.challenges))

    def update_user(
        self,
        *,
        address: str | None = None,
        install_location: Path | str | None = None,
        default_install_location: Path | str = "challenges",
    ) -> UserProgress:
        """Update identity fields while keeping challenge results."""
        current = self.load_user_state(default_install_location)
        updated = UserProgress(
            address=current.address if address is None else address.strip(),
            install_location=current.install_location if install_location is None else str(install_location),
            challenges=current.challenges,
        )
        self.save_user_state(updated)
        return updated

    def close(self) -> None:
        """Close db connection."""
        self._conn.close()
