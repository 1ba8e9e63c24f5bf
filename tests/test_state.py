from pathlib import Path

from techtree.models import UserChallenge, UserProgress
from techtree.state import ProgressStore


def test_empty_store_returns_default_progress() -> None:
    store = ProgressStore(":memory:")
    progress = store.load_user_state("/opt/challenges")
    assert progress == UserProgress(address="", install_location="/opt/challenges", challenges=())


def test_save_and_load_round_trip_preserves_order() -> None:
    store = ProgressStore(":memory:")
    progress = UserProgress(
        address="0xabc",
        install_location="/work",
        challenges=(UserChallenge("ballot", "success"), UserChallenge("dex", "failed")),
    )
    store.save_user_state(progress)
    assert store.load_user_state() == progress


def test_save_replaces_previous_challenges() -> None:
    store = ProgressStore(":memory:")
    store.save_user_state(UserProgress("0xabc", "/work", (UserChallenge("a", "success"),)))
    store.save_user_state(UserProgress("0xabc", "/work", (UserChallenge("b", "success"),)))
    assert [entry.challenge_name for entry in store.load_user_state().challenges] == ["b"]


def test_update_user_keeps_challenges() -> None:
    store = ProgressStore(":memory:")
    store.save_user_state(UserProgress("", "/work", (UserChallenge("a", "success"),)))
    updated = store.update_user(address=" 0xdef ")
    assert updated.address == "0xdef"
    assert updated.install_location == "/work"
    assert updated.challenges == (UserChallenge("a", "success"),)

    moved = store.update_user(install_location="/elsewhere")
    assert moved.address == "0xdef"
    assert store.load_user_state().install_location == "/elsewhere"


def test_migration_sets_user_version_and_schema_history() -> None:
    store = ProgressStore(":memory:")
    version = int(store._conn.execute("PRAGMA user_version").fetchone()[0])  # noqa: SLF001
    assert version == 1
    rows = store._conn.execute("SELECT version FROM schema_migrations ORDER BY version").fetchall()  # noqa: SLF001
    assert [int(row["version"]) for row in rows] == [1]


def test_newer_schema_version_is_rejected(tmp_path: Path) -> None:
    db_path = tmp_path / "future.db"
    store = ProgressStore(db_path)
    store._conn.execute("PRAGMA user_version = 99")  # noqa: SLF001
    store._conn.commit()  # noqa: SLF001
    store.close()

    try:
        ProgressStore(db_path)
        raise AssertionError("Expected RuntimeError for newer schema.")
    except RuntimeError as exc:
        assert "newer than supported" in str(exc)


def test_path_database_creation_persists_between_instances(tmp_path: Path) -> None:
    db_path = tmp_path / "nested" / "progress.db"
    store = ProgressStore(db_path)
    store.save_user_state(UserProgress("0xabc", "/work", (UserChallenge("ballot", "success"),)))
    store.close()

    assert db_path.exists()
    reopened = ProgressStore(db_path)
    assert reopened.load_user_state().is_completed("ballot") is True
