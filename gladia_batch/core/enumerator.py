"""Directory scan for supported audio files.

WHY: A batch starts from a directory, not a file list. The scan has to fail
loudly on a bad path before anything touches the network, and must pick up
only the audio formats the service accepts.

HOW: list_audio_files() validates the directory, then filters its direct
entries by a case-insensitive extension allow-list.

RULES:
- Missing path or non-directory raises InputError (no side effects)
- Only direct children are considered (no recursion)
- Extensions are matched case-insensitively against SUPPORTED_AUDIO_FORMATS
- Returned order is unspecified; the sequencer imposes the processing order
- An empty result is not an error here
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from gladia_batch.config import SUPPORTED_AUDIO_FORMATS
from gladia_batch.errors import InputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioFile:
    """A discovered audio file. Immutable once enumerated."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name


def is_supported(name: str, formats: Iterable[str] = SUPPORTED_AUDIO_FORMATS) -> bool:
    """Return True if ``name`` has one of the allowed extensions (any case)."""
    return Path(name).suffix.lower() in set(formats)


def list_audio_files(
    directory: str | Path,
    formats: Iterable[str] = SUPPORTED_AUDIO_FORMATS,
) -> List[AudioFile]:
    """List the supported audio files directly inside ``directory``.

    Args:
        directory: Directory to scan.
        formats: Allowed extensions, lowercase with leading dot.

    Returns:
        AudioFile entries in filesystem order.

    Raises:
        InputError: If the path does not exist or is not a directory.
    """
    root = Path(directory)
    if not root.exists():
        raise InputError(f'The directory "{directory}" does not exist.')
    if not root.is_dir():
        raise InputError(f'"{directory}" is not a directory.')

    allowed = {ext.lower() for ext in formats}
    found = [
        AudioFile(entry)
        for entry in root.iterdir()
        if entry.is_file() and is_supported(entry.name, allowed)
    ]
    logger.info("Found %d audio file(s) in %s", len(found), root)
    return found
