"""Deterministic processing order for a batch of audio files.

WHY: Directory listings come back in filesystem order, which differs between
machines and runs. Results are appended to the sidecar in processing order,
so the order has to be reproducible. Multi-part recordings ("1. Alice - 1",
"1. Alice - 2", "2. Bob - 1") are interleaved so every series makes progress
instead of one series being exhausted before the next starts.

HOW: Two policies. ASCENDING sorts by file name. INTERLEAVED parses each name
as "<index>. <series> - <part>.<ext>", groups by series, sorts each group by
part number, then takes one file per group per round until all are used.

RULES:
- ASCENDING: plain lexicographic order of file names
- INTERLEAVED: groups are created in (index, series, part, name) order
- Within a group parts are strictly ascending by numeric part
- Exhausted groups drop out of later rounds
- Names not matching the pattern are returned in `dropped`, never ordered
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from gladia_batch.core.enumerator import AudioFile

# "<leading index>. <series name> - <part number>.<extension>"
SERIES_PATTERN = re.compile(r"^(\d+)\.\s*(.+?)\s*-\s*(\d+)\.[^.]+$")


class OrderPolicy(str, enum.Enum):
    """Available ordering policies."""

    ASCENDING = "ascending"
    INTERLEAVED = "interleaved"


@dataclass
class FileGroup:
    """One series and its parts, ordered by part number."""

    name: str
    entries: List[Tuple[AudioFile, int]] = field(default_factory=list)

    def add(self, audio: AudioFile, part: int) -> None:
        self.entries.append((audio, part))
        self.entries.sort(key=lambda e: (e[1], e[0].name))


@dataclass
class SequenceResult:
    ordered: List[AudioFile]
    dropped: List[AudioFile] = field(default_factory=list)


def parse_series_name(name: str) -> Tuple[int, str, int] | None:
    """Parse ``name`` into (index, series, part), or None if it doesn't match."""
    match = SERIES_PATTERN.match(name)
    if not match:
        return None
    index, series, part = match.groups()
    return int(index), series, int(part)


def order_ascending(files: Sequence[AudioFile]) -> SequenceResult:
    return SequenceResult(ordered=sorted(files, key=lambda f: f.name))


def group_series(files: Sequence[AudioFile]) -> Tuple[List[FileGroup], List[AudioFile]]:
    """Group files by series name.

    Returns:
        (groups in creation order, files that did not match the pattern)
    """
    parsed = []
    dropped: List[AudioFile] = []
    for audio in files:
        fields = parse_series_name(audio.name)
        if fields is None:
            dropped.append(audio)
        else:
            parsed.append((fields, audio))

    # Sort before grouping so group creation order does not depend on the
    # filesystem's listing order.
    parsed.sort(key=lambda item: (item[0], item[1].name))

    groups: Dict[str, FileGroup] = {}
    for (_, series, part), audio in parsed:
        group = groups.get(series)
        if group is None:
            group = groups[series] = FileGroup(series)
        group.add(audio, part)

    dropped.sort(key=lambda f: f.name)
    return list(groups.values()), dropped


def interleave(groups: Sequence[FileGroup]) -> List[AudioFile]:
    """Round-robin one file from each group until every group is exhausted."""
    ordered: List[AudioFile] = []
    depth = max((len(g.entries) for g in groups), default=0)
    for round_no in range(depth):
        for group in groups:
            if round_no < len(group.entries):
                ordered.append(group.entries[round_no][0])
    return ordered


def order_interleaved(files: Sequence[AudioFile]) -> SequenceResult:
    groups, dropped = group_series(files)
    return SequenceResult(ordered=interleave(groups), dropped=dropped)


def sequence_files(
    files: Sequence[AudioFile],
    policy: OrderPolicy = OrderPolicy.ASCENDING,
) -> SequenceResult:
    """Apply ``policy`` to ``files`` and return the processing order."""
    if policy == OrderPolicy.INTERLEAVED:
        return order_interleaved(files)
    return order_ascending(files)
