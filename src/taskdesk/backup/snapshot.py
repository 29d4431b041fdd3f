# src/taskdesk/backup/snapshot.py

"""
Backup / restore of the whole key-value store.

Export captures every key (accounts, session, task lists, theme) in one pass.
Import validates the whole artifact first, then overwrites key by key:
keys missing from the artifact are left alone, and a failure halfway through
the writes leaves a mixed store (there is no rollback).
"""

from __future__ import annotations

import json
import logging
import os
from datetime import date
from pathlib import Path

from ..core.errors import ErrorCode, SnapshotImportError
from ..core.ports import KeyValueStore

logger = logging.getLogger(__name__)

Snapshot = dict[str, str]

_MALFORMED_MSG = "Error parsing backup file. Please ensure it is a valid JSON file."


def export_snapshot(store: KeyValueStore) -> Snapshot:
    """Every key -> raw stored string. Pure read."""
    out: Snapshot = {}
    for key in store.keys():
        value = store.get_item(key)
        if value is not None:
            out[key] = value
    return out


def snapshot_filename(day: date | None = None) -> str:
    day = day or date.today()
    return f"todo_backup_{day.isoformat()}.json"


def dump_snapshot(snapshot: Snapshot) -> str:
    return json.dumps(snapshot, ensure_ascii=False, indent=2)


def write_snapshot(store: KeyValueStore, out_dir: str | Path, *, day: date | None = None) -> Path:
    """Export the store into `<out_dir>/todo_backup_<date>.json` (atomic replace)."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / snapshot_filename(day)

    snapshot = export_snapshot(store)
    tmp = path.with_suffix(".tmp")
    try:
        tmp.write_text(dump_snapshot(snapshot), "utf-8")
        os.replace(tmp, path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise
    logger.info("Exported %d keys to %s", len(snapshot), path)
    return path


def parse_snapshot(artifact: str | bytes) -> Snapshot:
    """Parse and validate an artifact; raises SnapshotImportError without side effects."""
    try:
        data = json.loads(artifact)
    except (ValueError, TypeError) as e:
        logger.info("Backup artifact rejected: %s", e)
        raise SnapshotImportError(ErrorCode.MALFORMED_ARTIFACT, _MALFORMED_MSG) from e

    if not isinstance(data, dict):
        raise SnapshotImportError(
            ErrorCode.MALFORMED_ARTIFACT,
            "Backup file must contain a JSON object of key/value pairs.",
        )

    bad = [k for k, v in data.items() if not isinstance(v, str)]
    if bad:
        raise SnapshotImportError(
            ErrorCode.MALFORMED_ARTIFACT,
            f"Backup values must be strings (offending keys: {', '.join(sorted(bad))}).",
        )
    return data


def import_snapshot(store: KeyValueStore, artifact: str | bytes) -> list[str]:
    """
    Merge an artifact into the store (last write wins per key).

    Returns the keys written, in artifact order. Callers should rebuild any
    in-memory state from the store afterwards.
    """
    snapshot = parse_snapshot(artifact)
    written: list[str] = []
    for key, value in snapshot.items():
        store.set_item(key, value)
        written.append(key)
    logger.info("Imported %d keys from backup.", len(written))
    return written


def read_snapshot_file(path: str | Path) -> str:
    path = Path(path)
    try:
        return path.read_text("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SnapshotImportError(
            ErrorCode.MALFORMED_ARTIFACT, f"Cannot read backup file {path}: {e}"
        ) from e
