import json
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

import json5

from opencode_antigravity_sync.errors import ConfigParseError, NoBackupFound
from opencode_antigravity_sync.utils import detect_indentation

# Newest first: restore prefers the first suffix that has a file on disk.
BACKUP_SUFFIXES = ("antigravity-manager", "antigravity")


@dataclass(frozen=True)
class BackupRecord:
    original_path: Path
    backup_path: Path
    suffix: str


def _ensure_parent(path: Path) -> None:
    if not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)


def backup_path_for(path: Path, suffix: str = BACKUP_SUFFIXES[0]) -> Path:
    return path.with_name(f"{path.name}.{suffix}.bak")


def find_backup(path: str | Path) -> BackupRecord | None:
    """Locate the preferred existing backup of `path`, if any."""
    path = Path(path)
    for suffix in BACKUP_SUFFIXES:
        candidate = backup_path_for(path, suffix)
        if candidate.exists():
            return BackupRecord(path, candidate, suffix)
    return None


def has_backup(path: str | Path) -> bool:
    return find_backup(path) is not None


def create_backup(path: str | Path) -> BackupRecord | None:
    """Copy `path` aside once; later calls keep the first snapshot.

    Returns None when the file does not exist or a backup is already present
    under either suffix.
    """
    path = Path(path)
    if not path.exists():
        return None
    if find_backup(path) is not None:
        return None

    backup_path = backup_path_for(path)
    shutil.copyfile(path, backup_path)
    print(f"Created backup at {backup_path}")
    return BackupRecord(path, backup_path, BACKUP_SUFFIXES[0])


def restore_backup(path: str | Path, label: str = "config") -> BackupRecord:
    """Copy the preferred backup over `path`, leaving the backup in place."""
    path = Path(path)
    record = find_backup(path)
    if record is None:
        raise NoBackupFound(f"No backup found for {label} at {path}")

    _ensure_parent(path)
    shutil.copyfile(record.backup_path, path)
    print(f"Restored {label} from {record.backup_path}")
    return record


def read_json_document(path: str | Path, strict: bool = False) -> tuple[object, str]:
    """Read a JSON/JSONC file, returning (document, raw_text).

    A missing file reads as an empty object. Content that is not UTF-8 or does
    not parse reads as an empty object too, unless `strict` is set, in which
    case ConfigParseError is raised.
    """
    path = Path(path)
    if not path.exists():
        return {}, ""

    content = ""
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
        return json5.loads(content), content
    except ValueError as e:
        if strict:
            raise ConfigParseError(f"Failed to parse {path}: {e}") from e
        print(f"Warning: Could not parse existing {path.name} ({e}), creating new structure...")
        return {}, content


def render_json_document(document: object, old_content: str = "") -> str:
    indent = detect_indentation(old_content) if old_content else 2
    return json.dumps(document, indent=indent)


def write_json_document(path: str | Path, document: object, old_content: str = "") -> None:
    """Write `document` via a temp file renamed over the target."""
    path = Path(path)
    _ensure_parent(path)
    rendered = render_json_document(document, old_content)

    tmp_path = path.with_name(f"{path.name}.tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(rendered)
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
