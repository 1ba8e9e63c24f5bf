"""Load the challenge catalog from bundled or user-supplied JSON."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

from .models import ChallengeRecord, NodeType

CONTENT_PACKAGE = "techtree.content"
CATALOG_RESOURCE = "challenges.json"
RECORD_TYPES = {NodeType.CHALLENGE, NodeType.QUIZ, NodeType.CAPSTONE_PROJECT}

logger = logging.getLogger(__name__)


def _record_from_dict(raw: dict[str, Any]) -> ChallengeRecord:
    """Build a challenge record from raw JSON content."""
    name = str(raw.get("name", "")).strip()
    if not name:
        raise ValueError("Challenge entry is missing a name.")

    raw_type = str(raw.get("type", NodeType.CHALLENGE.value))
    try:
        record_type = NodeType(raw_type)
    except ValueError:
        raise ValueError(f"Challenge '{name}' has unknown type '{raw_type}'.") from None
    if record_type not in RECORD_TYPES:
        raise ValueError(f"Challenge '{name}' has unknown type '{raw_type}'.")

    tags = tuple(dict.fromkeys(str(tag).strip() for tag in raw.get("tags", []) if str(tag).strip()))
    children = tuple(str(child).strip() for child in raw.get("children_names") or [] if str(child).strip())
    label = str(raw.get("label", "")).strip() or name

    return ChallengeRecord(
        name=name,
        label=label,
        level=int(raw.get("level", 0)),
        type=record_type,
        tags=tags,
        children_names=children,
        enabled=bool(raw.get("enabled", True)),
        description=str(raw.get("description", "")),
        repo=str(raw.get("repo", "")),
    )


def parse_challenges(raw_obj: object) -> list[ChallengeRecord]:
    """Validate a decoded JSON payload and return records in catalog order."""
    if isinstance(raw_obj, dict):
        raw_obj = raw_obj.get("challenges", [])
    if not isinstance(raw_obj, list):
        raise ValueError("Catalog root must be a list of challenges or an object with 'challenges'.")

    records: list[ChallengeRecord] = []
    seen: set[str] = set()
    for item in raw_obj:
        if not isinstance(item, dict):
            raise ValueError("Catalog entries must be JSON objects.")
        record = _record_from_dict(item)
        if record.name in seen:
            raise ValueError(f"Duplicate challenge name: {record.name}")
        seen.add(record.name)
        records.append(record)
    _log_dangling_references(records)
    return records


def load_challenges() -> list[ChallengeRecord]:
    """Load the bundled catalog."""
    entry = resources.files(CONTENT_PACKAGE).joinpath(CATALOG_RESOURCE)
    return parse_challenges(json.loads(entry.read_text(encoding="utf-8-sig")))


def load_challenges_from_file(path: Path | str) -> list[ChallengeRecord]:
    """Load a catalog from a JSON file for tests/tools."""
    return parse_challenges(json.loads(Path(path).read_text(encoding="utf-8-sig")))


def _log_dangling_references(records: list[ChallengeRecord]) -> None:
    """Report child references that point nowhere; they are treated as absent."""
    names = {record.name for record in records}
    for record in records:
        for child in record.children_names:
            if child not in names:
                logger.debug("Challenge %r lists unknown child %r; ignoring.", record.name, child)
