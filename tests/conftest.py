"""Shared test fixtures for the gladia_batch test suite.

WHY: Client, poller, pipeline, and CLI tests all need the same provider
responses and the same kind of throwaway audio directory. Centralizing them
keeps every test on one authoritative sample.

HOW: Module-level dicts mirror Gladia v2 responses for upload, submit, and
status. Fixtures build a MockTransport-backed router, a scripted fake client,
and audio directories under tmp_path.

RULES:
- Sample responses follow the shapes documented for /upload, /transcription
  and /pre-recorded/{id}
- No test ever reaches the network (MockTransport or FakeClient only)
- Audio files are empty placeholders; only names and extensions matter
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from gladia_batch.api.models import JobStatus, UploadResult
from gladia_batch.config import GladiaSettings
from gladia_batch.errors import TransportError

BASE_URL = "https://api.gladia.test/v2"

UPLOAD_RESPONSE: Dict[str, Any] = {
    "audio_url": "https://api.gladia.test/file/abc-123",
    "audio_metadata": {
        "id": "abc-123",
        "filename": "interview.mp3",
        "extension": "mp3",
        "size": 1024,
        "audio_duration": 2.5,
        "number_of_channels": 1,
    },
}

SUBMIT_RESPONSE: Dict[str, Any] = {
    "id": "job-42",
    "result_url": "https://api.gladia.test/v2/pre-recorded/job-42",
}

QUEUED_RESPONSE: Dict[str, Any] = {"id": "job-42", "status": "queued", "result": None}
PROCESSING_RESPONSE: Dict[str, Any] = {"id": "job-42", "status": "processing", "result": None}

DONE_RESPONSE: Dict[str, Any] = {
    "id": "job-42",
    "status": "done",
    "result": {
        "transcription": {
            "full_transcript": "Hello there friend Yes",
            "utterances": [
                {
                    "text": "Hello there friend",
                    "start": 0.5,
                    "end": 1.9,
                    "speaker": 0,
                    "words": [
                        {"word": " Hello", "start": 0.5, "end": 0.8},
                        {"word": " there", "start": 0.9, "end": 1.2},
                        {"word": " friend", "start": 1.3, "end": 1.9},
                    ],
                },
                {
                    "text": "Yes",
                    "start": 2.1,
                    "end": 2.4,
                    "speaker": 1,
                    "words": [
                        {"word": "Yes", "start": 2.125, "end": 2.4},
                    ],
                },
            ],
        }
    },
}


@pytest.fixture
def settings() -> GladiaSettings:
    return GladiaSettings(api_key="test-key", base_url=BASE_URL)


@pytest.fixture
def done_response() -> Dict[str, Any]:
    return copy.deepcopy(DONE_RESPONSE)


@pytest.fixture
def done_status(done_response) -> JobStatus:
    return JobStatus.from_dict(done_response)


@pytest.fixture
def make_audio_dir(tmp_path) -> Callable[..., Path]:
    """Return a factory that creates a directory holding the given file names."""

    def _make(*names: str, subdir: str = "audio") -> Path:
        directory = tmp_path / subdir
        directory.mkdir(exist_ok=True)
        for name in names:
            (directory / name).write_bytes(b"RIFF fake audio")
        return directory

    return _make


class Router:
    """A tiny request router for httpx.MockTransport.

    Records every request and answers from a queue of responses per
    (method, path suffix). The last queued response repeats once the
    queue is down to one entry.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._routes: Dict[tuple, List[Any]] = {}

    def add(self, method: str, suffix: str, *responses: Any) -> None:
        self._routes[(method, suffix)] = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for (method, suffix), queue in self._routes.items():
            if request.method == method and request.url.path.endswith(suffix):
                answer = queue.pop(0) if len(queue) > 1 else queue[0]
                if isinstance(answer, Exception):
                    raise answer
                if isinstance(answer, httpx.Response):
                    return answer
                return httpx.Response(200, json=answer)
        return httpx.Response(404, text="no route for {} {}".format(request.method, request.url))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def router() -> Router:
    return Router()


class FakeClient:
    """Scripted stand-in for GladiaClient used by pipeline tests.

    statuses: list of status strings returned in order by get_status;
    the final entry repeats. "done" returns the DONE_RESPONSE result.
    fail_upload: file names whose upload raises TransportError.
    """

    def __init__(
        self,
        statuses: Optional[List[str]] = None,
        fail_upload: Optional[set] = None,
    ) -> None:
        self.statuses = list(statuses or ["done"])
        self.fail_upload = fail_upload or set()
        self.uploaded: List[str] = []
        self.submitted: List[str] = []
        self.status_calls = 0

    async def upload_file(self, path, on_status=None) -> UploadResult:
        name = Path(path).name
        self.uploaded.append(name)
        if name in self.fail_upload:
            raise TransportError("upload of {} failed".format(name))
        return UploadResult(resolved_name=name, audio_url="https://files.test/" + name)

    async def create_transcription(self, audio_url, diarization=True, on_status=None) -> str:
        self.submitted.append(audio_url)
        return "job-{}".format(len(self.submitted))

    async def get_status(self, job_id: str) -> JobStatus:
        self.status_calls += 1
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        if status == "done":
            data = copy.deepcopy(DONE_RESPONSE)
            data["id"] = job_id
            return JobStatus.from_dict(data)
        return JobStatus(id=job_id, status=status)


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()
