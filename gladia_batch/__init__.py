"""Gladia Batch Transcriber: directory-wide speech-to-text into a JSON sidecar.

WHY: Transcribing a folder of recordings through a remote service by hand
means uploading, waiting, and copying timings one file at a time. This
package runs that loop for a whole directory and keeps every result in one
merge-friendly JSON file next to the audio.

HOW: Six-stage pipeline, one file at a time: enumerate, sequence, upload and
submit (API client), poll, extract, merge-and-persist. Each stage is
independently testable.

RULES:
- Files are processed strictly sequentially (no concurrent uploads)
- A failure in one file never stops the rest of the batch
- The sidecar is merged by file name, never truncated
"""

import logging

__version__ = "0.1.0"

# Library code logs; only the CLI (with -v) or an embedding app shows it
logging.getLogger(__name__).addHandler(logging.NullHandler())
