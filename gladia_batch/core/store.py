"""JSON sidecar store: read, merge by file name, and rewrite atomically.

WHY: Results accumulate across runs and across files in one JSON object
keyed by audio file name. Each finished file has to land in that object
without losing earlier entries, and a half-written file must never replace
a good one.

HOW: load_store() reads and validates the existing sidecar against a JSON
Schema (jsonschema). merge_entry() does a shallow, key-overwriting merge.
write_store() serializes with 2-space indentation to a temp file in the
same directory and os.replace()s it over the target. merge_and_write()
combines the three and turns a ParseError into a reported empty store.

RULES:
- Missing sidecar → empty store, not an error
- Invalid JSON or a structure that fails SIDECAR_SCHEMA → ParseError
- merge_entry never mutates its inputs; colliding keys are fully replaced
- Writes are full rewrites (UTF-8, indent=2, trailing newline)
- A store that fails SIDECAR_SCHEMA is never written (UnwritableStoreError)
- Rewrites keep the existing file mode
- There is no delete path
- Default sidecar location: data.json next to the source audio
"""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema

from gladia_batch.config import DEFAULT_SIDECAR_NAME
from gladia_batch.errors import ParseError, UnwritableStoreError

logger = logging.getLogger(__name__)

Store = Dict[str, Dict[str, Any]]

_UTTERANCE_ENTRY = {
    "type": "object",
    "required": ["startTimes", "text"],
    "properties": {
        "text": {"type": "array", "items": {"type": "string"}},
        "startTimes": {
            "type": "array",
            "items": {
                "anyOf": [
                    {"type": "number"},
                    {"type": "array", "items": {"type": "number"}},
                ]
            },
        },
    },
}

_WORD_ENTRY = {
    "type": "object",
    "required": ["words", "text", "startTimes"],
    "properties": {
        "words": {"type": "object", "additionalProperties": {"type": "string"}},
        "text": {"type": "string"},
        "startTimes": {"type": "string"},
    },
}

SIDECAR_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": {"anyOf": [_UTTERANCE_ENTRY, _WORD_ENTRY]},
}


def _describe(error: jsonschema.ValidationError) -> str:
    where = "/".join(str(p) for p in error.absolute_path) or "<root>"
    return f"{error.message} at {where}"


def load_store(path: str | Path) -> Store:
    """Read and validate the sidecar at ``path``.

    Raises:
        ParseError: The file exists but is not valid JSON or not a valid store.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except UnicodeDecodeError as e:
        raise ParseError(path, "not UTF-8 text") from e

    try:
        data = json.loads(raw)
    except ValueError as e:
        raise ParseError(path, f"invalid JSON ({e})") from e

    try:
        jsonschema.validate(instance=data, schema=SIDECAR_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ParseError(path, _describe(e)) from e
    return data


def merge_entry(store: Mapping[str, Any], entry: Mapping[str, Any]) -> Store:
    """Return a new store with ``entry``'s keys added or replaced."""
    merged = dict(store)
    merged.update(entry)
    return merged


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def _target_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_current_umask()


def validate_store(path: str | Path, store: Mapping[str, Any]) -> None:
    """Check ``store`` against SIDECAR_SCHEMA before it is written to ``path``.

    Raises:
        UnwritableStoreError: The store would fail load_store() once written.
    """
    try:
        jsonschema.validate(instance=store, schema=SIDECAR_SCHEMA)
    except jsonschema.ValidationError as e:
        raise UnwritableStoreError(path, _describe(e)) from e


def write_store(path: str | Path, store: Mapping[str, Any]) -> Path:
    """Atomically replace ``path`` with the JSON serialization of ``store``.

    RULES:
    - The store is validated first; an invalid one never reaches the disk
    - An existing sidecar keeps its permission bits; a new one gets the
      mode a plain open() would give it (0o666 minus the umask)
    """
    path = Path(path)
    validate_store(path, store)
    path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(store, indent=2, ensure_ascii=False) + "\n"

    fd, tmp_name = tempfile.mkstemp(prefix=".{}.".format(path.name), suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        # mkstemp creates 0o600
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


def merge_and_write(
    path: str | Path,
    entry: Mapping[str, Any],
    on_status: Callable[[str], None] | None = None,
) -> Store:
    """Merge ``entry`` into the sidecar at ``path`` and write it back.

    WHY: A corrupt sidecar must not cost the result that was just paid
    for. The error is reported and the write proceeds from an empty store.

    RULES:
    - ParseError is logged and reported, never raised
    - OSError and UnwritableStoreError propagate (the caller decides
      their scope); the sidecar on disk is left as it was
    - Blocking file I/O; async callers run it in a worker thread
    """
    try:
        existing = load_store(path)
    except ParseError as e:
        logger.error("%s; starting from an empty store", e)
        if on_status:
            on_status("Error: {} (starting from an empty store)".format(e))
        existing = {}

    merged = merge_entry(existing, entry)
    write_store(path, merged)
    logger.info("Saved %d entr%s to %s", len(merged), "y" if len(merged) == 1 else "ies", path)
    if on_status:
        on_status("Data saved to {} successfully".format(path))
    return merged


@dataclass(frozen=True)
class SidecarPolicy:
    """Where results for a given audio file are stored.

    RULES:
    - fixed_path set: every file goes to that one sidecar
    - otherwise: <audio directory>/<name> (data.json by default)
    """

    fixed_path: Optional[Path] = None
    name: str = DEFAULT_SIDECAR_NAME

    def resolve(self, audio_path: str | Path) -> Path:
        if self.fixed_path is not None:
            return Path(self.fixed_path)
        return Path(audio_path).parent / self.name
