"""Batch orchestration: scan, order, and transcribe a directory file by file.

WHY: This is the heart of the tool. It wires the enumerator, sequencer,
API client, poller, extractor, and store into one run over a directory,
and it is the only place that decides which failures end the batch and
which only cost a single file.

HOW: plan_batch() scans and orders the directory without any network
traffic. run_batch() walks the plan strictly sequentially; for each file
it uploads, submits, polls, extracts, and merge-writes the sidecar before
moving on. The sidecar step runs in a worker thread so its blocking file
I/O stays off the event loop. TransportError, UnwritableStoreError and
OSError are caught per file and recorded in the BatchReport; everything
else propagates.

RULES:
- One file at a time, each stage awaited before the next file starts
- An empty batch is reported once (on_status if given, else
  EmptyBatchWarning) and makes no network calls
- Files dropped by the interleaved order are reported unless silent_drop
- A file's sidecar write happens only after its job reaches "done"
- Results are written in processing order
"""

from __future__ import annotations

import asyncio
import logging
import warnings
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from gladia_batch.api.client import GladiaClient
from gladia_batch.api.models import TranscriptionJob
from gladia_batch.config import PollConfig
from gladia_batch.core.enumerator import AudioFile, list_audio_files
from gladia_batch.core.extractor import OutputFormat, extract
from gladia_batch.core.poller import Poller
from gladia_batch.core.sequencer import OrderPolicy, sequence_files
from gladia_batch.core.store import SidecarPolicy, merge_and_write
from gladia_batch.errors import EmptyBatchWarning, TransportError, UnwritableStoreError

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]


@dataclass
class BatchOptions:
    """Knobs for one batch run.

    RULES:
    - order: processing order policy (ascending by default)
    - output_format: sidecar entry shape (utterances by default)
    - sidecar: where results are written (per-directory data.json by default)
    - poll: poll cadence and optional attempt cap
    - silent_drop: suppress the warning for files the interleaved order drops
    - diarization: request speaker separation from the provider
    """

    order: OrderPolicy = OrderPolicy.ASCENDING
    output_format: OutputFormat = OutputFormat.UTTERANCES
    sidecar: SidecarPolicy = field(default_factory=SidecarPolicy)
    poll: PollConfig = field(default_factory=PollConfig)
    silent_drop: bool = False
    diarization: bool = True


@dataclass
class BatchPlan:
    files: List[AudioFile]
    dropped: List[AudioFile] = field(default_factory=list)


@dataclass
class BatchReport:
    """Outcome of a batch run.

    RULES:
    - planned: files in processing order
    - succeeded: files whose result was written
    - failed: (file, error message) for files that were skipped
    - dropped: files excluded by the ordering policy
    """

    planned: List[AudioFile] = field(default_factory=list)
    succeeded: List[AudioFile] = field(default_factory=list)
    failed: List[Tuple[AudioFile, str]] = field(default_factory=list)
    dropped: List[AudioFile] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def plan_batch(
    directory: str | Path,
    options: Optional[BatchOptions] = None,
    on_status: Optional[StatusCallback] = None,
) -> BatchPlan:
    """Scan ``directory`` and order its audio files.

    Raises:
        InputError: If the directory is missing or not a directory.
    """
    options = options or BatchOptions()
    files = list_audio_files(directory)
    result = sequence_files(files, options.order)

    if result.dropped and not options.silent_drop:
        names = ", ".join(f.name for f in result.dropped)
        logger.warning("Skipping %d file(s) not matching the series pattern: %s",
                       len(result.dropped), names)
        if on_status:
            on_status("Warning: skipping files that don't match "
                      "'<index>. <series> - <part>': {}".format(names))

    if not result.ordered:
        message = "No audio files found in the directory."
        if on_status:
            on_status(message)
        else:
            warnings.warn(message, EmptyBatchWarning, stacklevel=2)

    return BatchPlan(files=result.ordered, dropped=result.dropped)


async def transcribe_file(
    client: GladiaClient,
    audio: AudioFile,
    options: BatchOptions,
    on_status: Optional[StatusCallback] = None,
) -> Path:
    """Run one file through upload → submit → poll → extract → merge-write.

    Returns:
        The sidecar path the result was written to.
    """
    upload = await client.upload_file(audio.path, on_status=on_status)
    job_id = await client.create_transcription(
        upload.audio_url,
        diarization=options.diarization,
        on_status=on_status,
    )
    job = TranscriptionJob(
        id=job_id,
        audio_url=upload.audio_url,
        source_path=str(audio.path),
        resolved_name=upload.resolved_name,
    )

    status = await Poller(client, options.poll).run(job, on_status=on_status)
    if status.result is None:
        raise TransportError(f"Job {job.id} reported done without a result")

    entry = extract(job.resolved_name, status.result, options.output_format)
    target = options.sidecar.resolve(audio.path)
    await asyncio.to_thread(merge_and_write, target, entry, on_status)
    return target


async def run_batch(
    directory: str | Path,
    client: GladiaClient,
    options: Optional[BatchOptions] = None,
    on_status: Optional[StatusCallback] = None,
    plan: Optional[BatchPlan] = None,
) -> BatchReport:
    """Transcribe every supported audio file in ``directory``, one at a time.

    WHY: External rate limits and a single-writer sidecar both call for
    strictly sequential processing. A broken file should cost only itself.

    RULES:
    - InputError from the scan propagates (batch-fatal)
    - A precomputed plan skips the scan (the CLI plans before connecting)
    - TransportError, UnwritableStoreError and OSError for a file are
      logged, recorded, and skipped
    - Returns a BatchReport; report.ok is False if any file failed
    """
    options = options or BatchOptions()
    if plan is None:
        plan = plan_batch(directory, options, on_status=on_status)
    report = BatchReport(planned=list(plan.files), dropped=list(plan.dropped))

    for index, audio in enumerate(plan.files, start=1):
        if on_status:
            on_status("Processing file: {} ({}/{})".format(audio.name, index, len(plan.files)))
        try:
            await transcribe_file(client, audio, options, on_status=on_status)
        except (TransportError, UnwritableStoreError, OSError) as e:
            logger.error("Failed to transcribe %s: %s", audio.path, e)
            if on_status:
                on_status("Error fetching data for {}: {}".format(audio.path, e))
            report.failed.append((audio, str(e)))
        else:
            report.succeeded.append(audio)

    logger.info("Batch finished: %d succeeded, %d failed, %d dropped",
                len(report.succeeded), len(report.failed), len(report.dropped))
    return report
