"""Exception and warning taxonomy for the batch transcriber.

WHY: A batch run has two very different failure scopes. Some failures end
the whole run (no directory to scan), others only cost a single file (the
upload timed out). Callers need typed exceptions to tell them apart without
string matching.

HOW: Every error derives from GladiaBatchError. TransportError and its
subclasses are file-scoped; the orchestrator catches them per file and
moves on. InputError and ConfigError are batch-fatal and propagate to the
CLI. ParseError is raised by the store and handled inside the merge step.
UnwritableStoreError is raised by the store before it touches the file and
is file-scoped like TransportError.

RULES:
- InputError: missing/invalid directory (batch-fatal)
- TransportError: any upload/submit/poll failure (file-scoped)
- GladiaAPIError: non-2xx response, carries status_code and body
- PollTimeoutError: poll attempts exhausted before "done" (file-scoped)
- ParseError: sidecar exists but is unparsable or malformed
- UnwritableStoreError: a merged store that would not load back (file-scoped)
- ConfigError: missing API key, also a ValueError for argparse-style callers
- EmptyBatchWarning: no matching audio files, warned only when no
  status callback is listening
"""

from __future__ import annotations


class GladiaBatchError(Exception):
    """Base class for all batch transcriber errors."""


class InputError(GladiaBatchError):
    """Raised when the audio directory argument is missing or invalid."""


class ConfigError(GladiaBatchError, ValueError):
    """Raised when required configuration (the API key) is missing."""


class TransportError(GladiaBatchError):
    """Raised when talking to the transcription service fails.

    WHY: Network errors, HTTP errors and garbage responses all mean the
    same thing to the orchestrator: give up on this file, keep the batch.

    RULES:
    - Wraps httpx.HTTPError at the client boundary (original kept as __cause__)
    - Also raised for responses missing required fields
    """


class GladiaAPIError(TransportError):
    """Raised when the Gladia API returns a non-2xx response."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Gladia API error {status_code}: {message}")


class PollTimeoutError(TransportError):
    """Raised when polling gives up after the configured number of attempts."""


class ParseError(GladiaBatchError):
    """Raised when an existing sidecar file cannot be used as a store."""

    def __init__(self, path: object, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot parse sidecar {path}: {reason}")


class EmptyBatchWarning(UserWarning):
    """Emitted when a directory contains no supported audio files."""


class UnwritableStoreError(GladiaBatchError, ValueError):
    """Raised when a store fails validation just before it would be written.

    RULES:
    - Raised before the temp file is created; the sidecar on disk is untouched
    - File-scoped: the orchestrator records it against the file being written
    """

    def __init__(self, path: object, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Refusing to write sidecar {path}: {reason}")
