"""Poll a transcription job until the provider reports it done.

WHY: Gladia transcription is not instant. After submitting a job the
pipeline has to keep asking for its status until the result is ready.
The provider job either completes or the operator cancels the run, so by
default there is no attempt cap; tests and cautious callers can set one.

HOW: A two-state machine (PENDING → DONE). Each tick performs exactly one
status query through the client. "done" moves to DONE and returns the
status with its parsed result; anything else stays PENDING and sleeps for
the current interval, which grows by backoff_factor up to max_interval_s.

RULES:
- The only terminal status is "done"; every other string means "not yet"
- max_attempts=None means poll forever
- Exceeding max_attempts raises PollTimeoutError (file-scoped)
- Client errors propagate unchanged (they are already TransportError)
- The sleep function is injectable so tests never wait
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable
from typing import Optional, Protocol

from gladia_batch.api.models import JobStatus, TranscriptionJob
from gladia_batch.config import PollConfig
from gladia_batch.errors import PollTimeoutError

logger = logging.getLogger(__name__)


class StatusSource(Protocol):
    async def get_status(self, job_id: str) -> JobStatus: ...


class PollState(str, enum.Enum):
    PENDING = "pending"
    DONE = "done"


class Poller:
    """Drives one job from PENDING to DONE.

    RULES:
    - attempts counts status queries made by the last run()
    - state is PENDING until a "done" status is seen
    """

    def __init__(
        self,
        client: StatusSource,
        config: Optional[PollConfig] = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._config = config or PollConfig()
        self._sleep = sleep
        self.state = PollState.PENDING
        self.attempts = 0

    async def run(
        self,
        job: TranscriptionJob,
        on_status: Callable[[str], None] | None = None,
    ) -> JobStatus:
        """Poll ``job`` until it is done and return the final status.

        Raises:
            PollTimeoutError: If max_attempts status checks all came back not done.
            TransportError: If a status query fails.
        """
        config = self._config
        interval = config.interval_s
        self.state = PollState.PENDING
        self.attempts = 0

        while True:
            if on_status:
                on_status("Polling for results...")
            status = await self._client.get_status(job.id)
            self.attempts += 1

            if status.is_done:
                self.state = PollState.DONE
                logger.info("Job %s done after %d poll(s)", job.id, self.attempts)
                if on_status:
                    on_status("- Transcription done")
                return status

            logger.debug("Job %s status %r (attempt %d)", job.id, status.status, self.attempts)
            if on_status:
                on_status("Transcription status: {}".format(status.status))

            if config.max_attempts is not None and self.attempts >= config.max_attempts:
                raise PollTimeoutError(
                    f"Transcription {job.id} not done after {self.attempts} "
                    f"status checks (last status: {status.status})"
                )

            await self._sleep(interval)
            interval = min(interval * config.backoff_factor, max(config.max_interval_s, interval))
