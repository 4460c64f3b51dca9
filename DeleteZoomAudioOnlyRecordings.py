"""
Move audio_only Zoom cloud recording files to the trash.

Runs as a dry run unless --no-dry-run is given. Files are only ever moved to
the trash, never permanently deleted.

Usage:
    python DeleteZoomAudioOnlyRecordings.py --from 2025-10-06 --to 2025-10-07
    python DeleteZoomAudioOnlyRecordings.py -f 2025-10-06 -t 2025-10-07 --no-dry-run
"""
import argparse
import os
import sys
from dataclasses import dataclass

import requests
from dotenv import load_dotenv

from commons import (
    ArgumentParser,
    ConfigError,
    add_date_range_arguments,
    collect_meetings,
    describe_error,
    fetch_recordings_page,
    format_recording_start,
    get_access_token,
    is_recording_type,
    load_config,
    move_to_trash,
    parse_date_range_args,
    print_config_error,
    print_request_error,
    select_recording_files,
)
from constants import AUDIO_ONLY, DEFAULT_TIMEZONE, RECORDING_NOT_FOUND_CODE

# Trash attempts
BY_UUID = "uuid"
BY_ID = "id"
FAILED = "failed"


@dataclass
class RunSummary:
    matched: int = 0
    trashed: int = 0
    failed: int = 0


def next_trash_attempt(has_uuid, has_id, last_attempt=None, error_code=None):
    """
    Decide how to address the next trash request for a recording file

    Args:
        has_uuid (bool): the meeting carries a UUID
        has_id (bool): the meeting carries a numeric id
        last_attempt (str, optional): BY_UUID or BY_ID if a request already failed
        error_code: Zoom error code (or HTTP status) of that failure

    Returns:
        str: BY_UUID, BY_ID or FAILED
    """
    if last_attempt is None:
        if has_uuid:
            return BY_UUID
        return BY_ID if has_id else FAILED

    # Only an unresolvable UUID earns a second try with the numeric id
    if last_attempt == BY_UUID and error_code == RECORDING_NOT_FOUND_CODE and has_id:
        return BY_ID
    return FAILED


def trash_recording_file(meeting, recording, trash):
    """
    Move one recording file to the trash, falling back to the numeric meeting id

    Args:
        meeting (dict): the parent meeting
        recording (dict): the recording file
        trash (callable): trash(meeting_identifier, recording_id), raises
            requests.RequestException on failure

    Returns:
        bool: True if the file was moved to the trash
    """
    has_uuid = bool(meeting.get("uuid"))
    has_id = bool(meeting.get("id"))

    attempt = next_trash_attempt(has_uuid, has_id)
    while attempt != FAILED:
        identifier = meeting["uuid"] if attempt == BY_UUID else meeting["id"]
        label = "UUID" if attempt == BY_UUID else "numeric ID"
        try:
            trash(identifier, recording["id"])
        except requests.RequestException as e:
            code, message = describe_error(e)
            print(f"   Error with {label} ({code}): {message}")
            attempt = next_trash_attempt(has_uuid, has_id, attempt, code)
            if attempt == BY_ID:
                print("   Retrying with the numeric meeting ID...")
            continue

        print(f"   Moved to trash (with {label})")
        return True

    return False


def describe_recording(meeting, recording, timezone=DEFAULT_TIMEZONE):
    return "{} | Meeting ID: {} | UUID: {} | Meeting: \"{}\" | Date: {} | File ID: {}".format(
        recording.get("recording_type"),
        meeting.get("id"),
        meeting.get("uuid") or "N/A",
        meeting.get("topic"),
        format_recording_start(recording.get("recording_start"), timezone),
        recording.get("id"),
    )


def trash_audio_only_recordings(meetings, trash, dry_run=True, timezone=DEFAULT_TIMEZONE):
    """
    List every audio_only recording file and, unless dry_run, move it to the trash

    A failure on one file is counted and never stops the batch.

    Returns:
        RunSummary
    """
    summary = RunSummary()

    for meeting in meetings:
        audio_files = select_recording_files(
            meeting.get("recording_files"),
            lambda recording: is_recording_type(recording, AUDIO_ONLY),
        )
        for recording in audio_files:
            summary.matched += 1
            print(describe_recording(meeting, recording, timezone))

            if dry_run:
                print("   DRY-RUN: no action")
                continue

            if trash_recording_file(meeting, recording, trash):
                summary.trashed += 1
            else:
                summary.failed += 1
                print("   Skipping to the next file...")

    return summary


def print_summary(summary):
    print("\nSUMMARY")
    print(f"- {AUDIO_ONLY} files found: {summary.matched}")
    print(f"- Files moved to trash: {summary.trashed}")
    print(f"- Errors: {summary.failed}")


def build_parser():
    parser = ArgumentParser(
        description=f"Move {AUDIO_ONLY} Zoom recording files to the trash",
        epilog=__doc__,
    )
    add_date_range_arguments(parser)
    parser.add_argument("--dry-run", dest="dry_run", action=argparse.BooleanOptionalAction,
                        default=True,
                        help="Only list matching files (default); --no-dry-run moves them to the trash")
    return parser


def main(argv=None):
    args = parse_date_range_args(build_parser(), argv)

    load_dotenv()
    try:
        config = load_config(os.environ)
    except ConfigError as e:
        print_config_error(e)
        return 1

    print("Mode: {}".format("DRY-RUN (simulation)" if args.dry_run else "TRASH ACTIVE"))
    print(f"Period: {args.from_date} -> {args.to_date}\n")

    try:
        access_token = get_access_token(config)
        meetings, _ = collect_meetings(
            lambda token: fetch_recordings_page(access_token, args.from_date, args.to_date, token)
        )
    except requests.RequestException as e:
        print_request_error(e)
        return 1

    summary = trash_audio_only_recordings(
        meetings,
        lambda identifier, recording_id: move_to_trash(access_token, identifier, recording_id),
        dry_run=args.dry_run,
        timezone=config.timezone,
    )
    print_summary(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
