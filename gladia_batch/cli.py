"""Command-line interface for the Gladia batch transcriber.

WHY: Users need one command that transcribes every recording in a folder
and leaves the results next to the audio. The CLI wires configuration,
the API client, and the batch pipeline together behind that command.

HOW: Uses argparse to accept the audio directory plus ordering, output
shape, sidecar location, and polling options. Runs the async pipeline via
asyncio.run(). Status messages go to stderr; --dry-run prints the planned
order to stdout without contacting the service.

RULES:
- Positional argument: the audio directory (argparse exits 2 when missing)
- Invalid directory: message on stderr, exit 1
- Missing GLADIA_API_KEY: message on stderr, exit 1
- Any file that failed: exit 1 after the whole batch has run
- Empty batch: reported, exit 0
- Ctrl-C: "Cancelled by user.", exit 130
- Status output goes to stderr (not stdout)
- Status lines are the only operator channel; log records are shown
  only with -v, as a diagnostic trace
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from gladia_batch.api.client import GladiaClient
from gladia_batch.config import DEFAULT_SIDECAR_NAME, GladiaSettings, PollConfig
from gladia_batch.core.extractor import OutputFormat
from gladia_batch.core.pipeline import BatchOptions, BatchPlan, plan_batch, run_batch
from gladia_batch.core.sequencer import OrderPolicy
from gladia_batch.core.store import SidecarPolicy
from gladia_batch.errors import ConfigError, InputError


def _status(msg: str) -> None:
    """Print a status message to stderr (flushed, so progress shows live)."""
    print(msg, file=sys.stderr, flush=True)


def _error(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr, flush=True)


def _build_options(args: argparse.Namespace) -> BatchOptions:
    env_poll = PollConfig.from_env()
    interval = args.poll_interval if args.poll_interval is not None else env_poll.interval_s
    poll = PollConfig(
        interval_s=interval,
        max_attempts=args.max_attempts if args.max_attempts is not None else env_poll.max_attempts,
        max_interval_s=max(interval, env_poll.max_interval_s),
    )
    sidecar = SidecarPolicy(fixed_path=Path(args.output)) if args.output else SidecarPolicy()
    return BatchOptions(
        order=OrderPolicy(args.order),
        output_format=OutputFormat(args.format),
        sidecar=sidecar,
        poll=poll,
        silent_drop=args.silent_drop,
        diarization=args.diarization,
    )


async def _run(
    args: argparse.Namespace,
    options: BatchOptions,
    plan: BatchPlan,
    settings: GladiaSettings,
) -> int:
    async with GladiaClient(settings) as client:
        report = await run_batch(args.directory, client, options, on_status=_status, plan=plan)

    _status("")
    _status("Done: {} of {} file(s) transcribed.".format(
        len(report.succeeded), len(report.planned)))
    for audio, _ in report.failed:
        _status("  Failed: {}".format(audio.name))
    return 0 if report.ok else 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Positional: directory (required)
    - Optional: --order, --format, --output, --poll-interval, --max-attempts
    - Optional: --silent-drop, --diarization/--no-diarization, --dry-run, -v
    """
    parser = argparse.ArgumentParser(
        prog="gladia-batch",
        description="Transcribe every .mp3/.wav/.flac file in a directory with the "
                    "Gladia API and merge the results into a JSON sidecar.",
    )

    parser.add_argument(
        "directory",
        help="Directory containing the audio files to transcribe.",
    )

    parser.add_argument(
        "--order",
        choices=[p.value for p in OrderPolicy],
        default=OrderPolicy.ASCENDING.value,
        help="Processing order: plain ascending by name, or interleaved across "
             "'<index>. <series> - <part>' series (default: %(default)s).",
    )

    parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.UTTERANCES.value,
        help="Sidecar entry shape (default: %(default)s; 'words' is the legacy layout).",
    )

    parser.add_argument(
        "--output",
        default=None,
        help="Write all results to this JSON file instead of "
             "'{}' next to the audio.".format(DEFAULT_SIDECAR_NAME),
    )

    parser.add_argument(
        "--poll-interval",
        type=float,
        default=None,
        help="Seconds between job status checks (default: GLADIA_POLL_INTERVAL_S or 5).",
    )

    parser.add_argument(
        "--max-attempts",
        type=int,
        default=None,
        help="Give up on a file after this many status checks (default: unlimited).",
    )

    parser.add_argument(
        "--silent-drop",
        action="store_true",
        help="With --order interleaved, skip non-matching files without a warning.",
    )

    parser.add_argument(
        "--diarization",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Request speaker diarization (default: %(default)s).",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the processing order and exit without uploading anything.",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Also print the debug log to stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    - Always exits via sys.exit with the run's status code
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.max_attempts is not None and args.max_attempts < 1:
        parser.error("--max-attempts must be at least 1")
    if args.poll_interval is not None and args.poll_interval < 0:
        parser.error("--poll-interval cannot be negative")

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    try:
        options = _build_options(args)
        plan = plan_batch(args.directory, options, on_status=_status)
        if args.dry_run:
            for audio in plan.files:
                print(audio.name)
            sys.exit(0)
        if not plan.files:
            sys.exit(0)

        settings = GladiaSettings.from_env()
        code = asyncio.run(_run(args, options, plan, settings))
    except InputError as e:
        _error(str(e))
        sys.exit(1)
    except ConfigError as e:
        _error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)

    sys.exit(code)


if __name__ == "__main__":
    main()
