"""Convert a finished Gladia transcription into a sidecar entry.

WHY: The provider returns nested utterances with nested words. The sidecar
stores a flat, merge-ready shape keyed by file name. Two shapes exist:
the per-utterance shape used by current tooling, and an older per-word
shape that some consumers still read.

HOW: extract() dispatches on OutputFormat.
  UTTERANCES: one text entry per utterance, with a parallel timing entry
               that is a list of word starts for multi-word utterances and
               the utterance start for single-word (or word-less) ones.
  WORDS:      every word of every utterance in one flat sequence, a
               word → start mapping, and space-joined words and starts.

RULES:
- UTTERANCES is the default; WORDS is the legacy alternate
- text and startTimes always have one entry per utterance (UTTERANCES)
  or per word (WORDS)
- WORDS start times are formatted with two decimals
- WORDS mapping: a repeated word keeps its last start time
- The returned mapping has exactly one key: the resolved file name
"""

from __future__ import annotations

import enum
from typing import Any, Dict, List, Union

from gladia_batch.api.models import TranscriptionOutput

StartTime = Union[float, List[float]]


class OutputFormat(str, enum.Enum):
    """Sidecar entry shape."""

    UTTERANCES = "utterances"
    WORDS = "words"


def extract_utterances(output: TranscriptionOutput) -> Dict[str, Any]:
    text: List[str] = []
    start_times: List[StartTime] = []
    for utterance in output.utterances:
        text.append(utterance.text)
        if len(utterance.words) > 1:
            start_times.append([word.start for word in utterance.words])
        else:
            start_times.append(utterance.start)
    return {"startTimes": start_times, "text": text}


def extract_words(output: TranscriptionOutput) -> Dict[str, Any]:
    words: List[str] = []
    starts: List[str] = []
    mapping: Dict[str, str] = {}
    for utterance in output.utterances:
        for word in utterance.words:
            text = word.word.strip()
            start = "{:.2f}".format(word.start)
            words.append(text)
            starts.append(start)
            mapping[text] = start
    return {
        "words": mapping,
        "text": " ".join(words),
        "startTimes": " ".join(starts),
    }


def extract(
    name: str,
    output: TranscriptionOutput,
    fmt: OutputFormat = OutputFormat.UTTERANCES,
) -> Dict[str, Dict[str, Any]]:
    """Build the single-entry sidecar mapping for one transcribed file.

    Args:
        name: Resolved file name from the upload step (the sidecar key).
        output: Parsed transcription of a "done" job.
        fmt: Which entry shape to produce.

    Returns:
        ``{name: entry}`` ready for store.merge_entry().
    """
    if fmt == OutputFormat.WORDS:
        entry = extract_words(output)
    else:
        entry = extract_utterances(output)
    return {name: entry}
