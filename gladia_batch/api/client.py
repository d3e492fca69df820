"""Async HTTP client for the Gladia v2 pre-recorded transcription API.

WHY: The batch pipeline needs to upload audio files, submit transcription
jobs, and query job status. This module hides the HTTP details behind one
client class so the orchestrator and poller only deal with typed results
and a single TransportError family.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. GladiaClient is an
async context manager: enter it to get an authenticated connection pool,
exit to close it. Each API step is a separate method:
upload_file → create_transcription → get_status.

RULES:
- Always use the async context manager (async with GladiaClient(settings) as client:)
- Settings are passed in explicitly; the client never reads the environment
- Every request carries the x-gladia-key header
- httpx.HTTPError and malformed responses are re-raised as TransportError
- Non-2xx responses raise GladiaAPIError (a TransportError)
- get_status performs exactly one request; looping lives in core.poller
"""

from __future__ import annotations

import logging
import mimetypes
from collections.abc import Callable
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from gladia_batch.api.models import JobStatus, UploadResult
from gladia_batch.config import GladiaSettings
from gladia_batch.errors import GladiaAPIError, TransportError

logger = logging.getLogger(__name__)

_FALLBACK_CONTENT_TYPE = "audio/wav"


class GladiaClient:
    """Async client for the Gladia pre-recorded transcription API.

    WHY: Provides a clean, typed interface for the upload → submit → status
    workflow. Handles auth headers and error wrapping.

    HOW: Wraps httpx.AsyncClient with the x-gladia-key header. An optional
    httpx transport can be injected (httpx.MockTransport in tests).

    RULES:
    - Use as: async with GladiaClient(settings) as client: ...
    - base_url trailing slashes are stripped
    """

    def __init__(
        self,
        settings: GladiaSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._base_url = settings.base_url.rstrip("/")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> GladiaClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"x-gladia-key": self._settings.api_key},
            timeout=httpx.Timeout(self._settings.timeout_s, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "GladiaClient must be used as an async context manager: "
                "async with GladiaClient(settings) as client: ..."
            )
        return self._client

    async def _request(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        """Send one request and return the decoded JSON body.

        RULES:
        - Transport failures become TransportError (original chained)
        - Non-2xx becomes GladiaAPIError with the body text
        - A body that is not a JSON object becomes TransportError
        """
        client = self._ensure_client()
        try:
            resp = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise GladiaAPIError(resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError as e:
            raise TransportError(f"{method} {url} returned invalid JSON") from e
        if not isinstance(data, dict):
            raise TransportError(f"{method} {url} returned {type(data).__name__}, expected object")
        return data

    # ------------------------------------------------------------------
    # Step 1: Upload file
    # ------------------------------------------------------------------

    async def upload_file(
        self,
        file_path: Path,
        on_status: Callable[[str], None] | None = None,
    ) -> UploadResult:
        """Upload an audio file and return its resolved name and audio URL.

        WHY: Gladia transcribes audio by URL. Local files are first sent to
        POST /upload, which stores them and returns a URL plus the name
        the provider resolved for the file.

        HOW: Sends a multipart/form-data POST with the file under the
        "audio" field. The content type is guessed from the extension.

        RULES:
        - file_path must point to an existing, readable file (OSError otherwise)
        - The file is opened and streamed with blocking reads; with one
          upload in flight at a time this does not stall other work
        - Raises TransportError on network failure or a malformed response
        - Raises GladiaAPIError on non-2xx responses

        Args:
            file_path: Path to the audio file to upload.
            on_status: Optional callback for status updates.

        Returns:
            UploadResult with resolved_name and audio_url.
        """
        file_path = Path(file_path)
        content_type = mimetypes.guess_type(file_path.name)[0] or _FALLBACK_CONTENT_TYPE
        if on_status:
            on_status("- Uploading {}...".format(file_path.name))

        with open(file_path, "rb") as f:
            data = await self._request(
                "POST",
                "/upload",
                files={"audio": (file_path.name, f, content_type)},
            )

        try:
            upload = UploadResult.from_dict(data)
        except (KeyError, TypeError) as e:
            raise TransportError(f"Unexpected upload response: missing {e}") from e

        logger.debug("Uploaded %s as %s (%s)", file_path, upload.resolved_name, upload.audio_url)
        if on_status:
            on_status("  Uploaded as {}".format(upload.resolved_name))
        return upload

    # ------------------------------------------------------------------
    # Step 2: Create transcription
    # ------------------------------------------------------------------

    async def create_transcription(
        self,
        audio_url: str,
        diarization: bool = True,
        on_status: Callable[[str], None] | None = None,
    ) -> str:
        """Submit a transcription job for an uploaded file and return its ID.

        RULES:
        - Sends {audio_url, diarization} as JSON to POST /transcription
        - A response without an "id" raises TransportError
        - Raises GladiaAPIError on non-2xx responses
        """
        if on_status:
            on_status("- Sending transcription request...")

        data = await self._request(
            "POST",
            "/transcription",
            json={"audio_url": audio_url, "diarization": diarization},
        )

        job_id = data.get("id")
        if not job_id:
            raise TransportError("Transcription request returned no job id")

        logger.debug("Created transcription job %s for %s", job_id, audio_url)
        if on_status:
            on_status("  Transcription ID: {}".format(job_id))
        return str(job_id)

    # ------------------------------------------------------------------
    # Step 3: Query status
    # ------------------------------------------------------------------

    async def get_status(self, job_id: str) -> JobStatus:
        """Query a transcription job once.

        RULES:
        - One GET /pre-recorded/{id} per call, no retry
        - result is parsed only when status is "done"
        - A malformed body raises TransportError
        """
        data = await self._request("GET", f"/pre-recorded/{job_id}")
        try:
            return JobStatus.from_dict(data, job_id=job_id)
        except (KeyError, TypeError) as e:
            raise TransportError(
                f"Unexpected status response for job {job_id}: {type(e).__name__} {e}"
            ) from e
