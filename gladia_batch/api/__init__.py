"""Gladia API client package: async HTTP interface to the transcription service.

WHY: The batch pipeline needs to upload audio, submit jobs, and check their
status. This package keeps all Gladia communication behind one client so the
rest of the code treats the service as a black-box capability.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. GladiaClient provides one
method per API step. Response data is parsed into typed dataclasses defined
in models.py.

RULES:
- All HTTP calls go through GladiaClient (no direct httpx usage elsewhere)
- Authentication is via the x-gladia-key header from GladiaSettings
- Every failure surfaces as a TransportError subclass
"""

from gladia_batch.api.client import GladiaClient
from gladia_batch.api.models import (
    JobStatus,
    TranscriptionJob,
    TranscriptionOutput,
    UploadResult,
    Utterance,
    Word,
)

__all__ = [
    "GladiaClient",
    "JobStatus",
    "TranscriptionJob",
    "TranscriptionOutput",
    "UploadResult",
    "Utterance",
    "Word",
]
