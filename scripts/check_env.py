"""Operator check for the ``.env`` file shared by the Biotrackr APIs and workers.

Subcommands:

``check``
    Load every settings group from the file and print the effective document
    store backend and worker intervals.
``record``
    Validate, then store the file's SHA256 as the drift baseline.
``verify``
    Validate, then compare the file against the recorded baseline.

Example usages::

    python -m scripts.check_env record --env-file /opt/biotrackr/.env \
        --hash-file /opt/biotrackr/.env.sha256
    python -m scripts.check_env verify --env-file /opt/biotrackr/.env \
        --hash-file /opt/biotrackr/.env.sha256

Exit codes: 0 ok, 2 invalid settings, 3 checksum drift, 5 missing files.
"""

from __future__ import annotations

import argparse
import hashlib
import sys
from pathlib import Path
from typing import Callable, Dict

from pydantic import ValidationError

from biotrackr.core.config import (
    AppSettings,
    AWSSettings,
    FitbitSettings,
    SchedulerSettings,
)

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CHECKSUM_ERROR = 3
EXIT_RUNTIME_ERROR = 5


def load_settings(env_file: Path) -> AppSettings:
    """Build every settings group from ``env_file``; raises ``ValidationError``."""
    source = str(env_file)
    # Nested groups only see the env file when it is passed to each of them.
    return AppSettings(
        _env_file=source,  # type: ignore[call-arg]
        fitbit=FitbitSettings(_env_file=source),  # type: ignore[call-arg]
        aws=AWSSettings(_env_file=source),  # type: ignore[call-arg]
        scheduler=SchedulerSettings(_env_file=source),  # type: ignore[call-arg]
    )


def file_digest(env_file: Path) -> str:
    return hashlib.sha256(env_file.read_bytes()).hexdigest()


def _run_check(args: argparse.Namespace, settings: AppSettings) -> int:
    scheduler = settings.scheduler
    print(f"Environment: {settings.environment}")
    print(f"Document store: {settings.aws.document_store_backend}")
    print(
        f"Token refresh every {scheduler.token_refresh_interval_minutes:g} min, "
        f"ingestion every {scheduler.ingestion_interval_minutes:g} min, "
        f"cycle timeout {scheduler.cycle_timeout_seconds:g} s."
    )
    return EXIT_OK


def _run_record(args: argparse.Namespace, settings: AppSettings) -> int:
    digest = file_digest(args.env_file)
    args.hash_file.write_text(f"{digest}\n", encoding="utf-8")
    print(f"Baseline {digest} written to {args.hash_file}")
    return EXIT_OK


def _run_verify(args: argparse.Namespace, settings: AppSettings) -> int:
    hash_file: Path = args.hash_file
    if not hash_file.exists():
        print(
            f"No baseline at {hash_file}; run 'record' first.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    baseline = hash_file.read_text(encoding="utf-8").strip()
    current = file_digest(args.env_file)
    if current != baseline:
        print(
            f"{args.env_file} has drifted from its baseline.\n"
            f"  baseline: {baseline}\n"
            f"  current:  {current}\n"
            "Review the change before restarting the workers.",
            file=sys.stderr,
        )
        return EXIT_CHECKSUM_ERROR

    print(f"{args.env_file} matches its baseline.")
    return EXIT_OK


Handler = Callable[[argparse.Namespace, AppSettings], int]

_COMMANDS: Dict[str, tuple[str, Handler, bool]] = {
    "check": ("Validate settings and print the effective configuration.", _run_check, False),
    "record": ("Validate settings and record the checksum baseline.", _run_record, True),
    "verify": ("Validate settings and compare against the baseline.", _run_verify, True),
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate Biotrackr settings and detect .env drift."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, (help_text, handler, needs_hash_file) in _COMMANDS.items():
        subparser = subparsers.add_parser(name, help=help_text)
        subparser.add_argument(
            "--env-file",
            type=Path,
            default=Path(".env"),
            help="Environment file to inspect (default: ./.env).",
        )
        if needs_hash_file:
            subparser.add_argument(
                "--hash-file",
                type=Path,
                required=True,
                help="Where the checksum baseline lives.",
            )
        subparser.set_defaults(handler=handler)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if not args.env_file.exists():
        print(f"Environment file {args.env_file} not found.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        settings = load_settings(args.env_file)
    except ValidationError as exc:
        print(
            f"Invalid settings in {args.env_file}:\n{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR

    return args.handler(args, settings)


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
