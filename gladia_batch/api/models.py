"""Gladia API response dataclasses.

WHY: The Gladia v2 API returns nested JSON for uploads, job submission and
job status. Typed dataclasses make the few fields the pipeline relies on
explicit and turn a missing field into one clear error instead of a
KeyError deep inside the extractor.

HOW: Each dataclass maps to one JSON object. Factory methods (from_dict)
parse raw API responses. The transcription result is only parsed when the
job status is "done"; earlier responses carry no usable result.

RULES:
- UploadResult.resolved_name comes from audio_metadata.filename
- JobStatus.result is None unless status == "done"
- Utterance.words may be empty; the extractor handles that case
- Times are float seconds exactly as the API reports them
- A time that is not a number, or text that is not a string, raises
  TypeError; the client reports it as a malformed response
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DONE_STATUS = "done"


def _seconds(data: Dict[str, Any], key: str) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key!r} must be a number of seconds, got {value!r}")
    return value


def _optional_seconds(data: Dict[str, Any], key: str) -> Optional[float]:
    if data.get(key) is None:
        return None
    return _seconds(data, key)


def _text(data: Dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key!r} must be a string, got {value!r}")
    return value


@dataclass
class UploadResult:
    """Response of POST /upload."""

    resolved_name: str
    audio_url: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> UploadResult:
        return cls(
            resolved_name=data["audio_metadata"]["filename"],
            audio_url=data["audio_url"],
        )


@dataclass
class TranscriptionJob:
    """A submitted transcription job, held only while it is being polled.

    RULES:
    - id: job identifier returned by POST /transcription
    - audio_url: the uploaded audio the job transcribes
    - source_path: the local file the job was created for
    - resolved_name: the provider's name for the upload (sidecar key)
    """

    id: str
    audio_url: str
    source_path: str
    resolved_name: str


@dataclass
class Word:
    """One recognised word with its offsets in seconds."""

    word: str
    start: float
    end: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Word:
        return cls(
            word=_text(data, "word"),
            start=_seconds(data, "start"),
            end=_optional_seconds(data, "end"),
        )


@dataclass
class Utterance:
    """A contiguous span of speech with its own text, timing, and words.

    RULES:
    - speaker is None when diarization is disabled
    - words keeps the provider's order
    """

    text: str
    start: float
    end: Optional[float] = None
    speaker: Optional[int] = None
    words: List[Word] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Utterance:
        return cls(
            text=_text(data, "text"),
            start=_seconds(data, "start"),
            end=_optional_seconds(data, "end"),
            speaker=data.get("speaker"),
            words=[Word.from_dict(w) for w in data.get("words") or []],
        )


@dataclass
class TranscriptionOutput:
    """The transcription section of a finished job's result."""

    utterances: List[Utterance]
    full_transcript: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TranscriptionOutput:
        transcription = data["transcription"]
        return cls(
            utterances=[Utterance.from_dict(u) for u in transcription["utterances"]],
            full_transcript=transcription.get("full_transcript"),
        )


@dataclass
class JobStatus:
    """Response of GET /pre-recorded/{id}.

    WHY: The poller only needs the status string on most ticks, and the
    parsed result exactly once, on the tick that reports "done".

    RULES:
    - status is a provider string ("queued", "processing", "done", ...)
    - result is parsed only when status is "done"
    """

    id: str
    status: str
    result: Optional[TranscriptionOutput] = None

    @property
    def is_done(self) -> bool:
        return self.status == DONE_STATUS

    @classmethod
    def from_dict(cls, data: Dict[str, Any], job_id: str = "") -> JobStatus:
        status = data["status"]
        result = None
        if status == DONE_STATUS:
            result = TranscriptionOutput.from_dict(data["result"])
        return cls(id=data.get("id", job_id), status=status, result=result)
