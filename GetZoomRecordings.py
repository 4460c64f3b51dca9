"""
Export Zoom cloud recordings for a date range as JSON.

Usage:
    python GetZoomRecordings.py --from 2025-10-06 --to 2025-10-07
    python GetZoomRecordings.py -f 2025-10-06 -t 2025-10-07 --output recordings.json
    python GetZoomRecordings.py -f 2025-10-06 -t 2025-10-07 --compact
"""
import json
import os
import sys

import requests
from dotenv import load_dotenv

from commons import (
    ArgumentParser,
    ConfigError,
    add_date_range_arguments,
    collect_meetings,
    fetch_recordings_page,
    get_access_token,
    load_config,
    parse_date_range_args,
    print_config_error,
    print_request_error,
)


def build_parser():
    parser = ArgumentParser(
        description="Export Zoom cloud recordings as JSON",
        epilog=__doc__,
    )
    add_date_range_arguments(parser)
    parser.add_argument("--output", "-o", dest="output_file",
                        help="Save the JSON to this file instead of printing it")
    parser.add_argument("--compact", action="store_true",
                        help="Write the JSON on a single line")
    return parser


def build_export(from_date, to_date, meetings, page_count):
    return {
        "from": from_date.isoformat(),
        "to": to_date.isoformat(),
        "total_records": len(meetings),
        "page_count": page_count,
        "meetings": meetings,
    }


def dump_export(export, pretty=True):
    if pretty:
        return json.dumps(export, indent=2, ensure_ascii=False)
    return json.dumps(export, ensure_ascii=False)


def write_export(json_output, output_file=None, out=None):
    """Write to output_file when given, else print to out (stdout)."""
    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(json_output)
        return
    print(json_output, file=out or sys.stdout)


def export_recordings(fetch_page, from_date, to_date, log=None):
    """
    Collect every page of recordings and build the export document

    Args:
        fetch_page (callable): fetch_page(next_page_token) -> page dict
        from_date (date): start of the range
        to_date (date): end of the range
        log (file, optional): where progress lines are printed

    Returns:
        dict: the export document
    """
    log = log or sys.stdout

    def report_page(page_number, meetings, has_next):
        state = "next page available" if has_next else "last page"
        print(f"Page {page_number}: {len(meetings)} meeting(s) ({state})", file=log)

    meetings, page_count = collect_meetings(fetch_page, on_page=report_page)
    print(f"Total: {len(meetings)} meeting(s) over {page_count} page(s)", file=log)
    return build_export(from_date, to_date, meetings, page_count)


def main(argv=None):
    args = parse_date_range_args(build_parser(), argv)

    load_dotenv()
    try:
        config = load_config(os.environ)
    except ConfigError as e:
        print_config_error(e)
        return 1

    # Keep stdout clean when the JSON itself goes there
    log = sys.stdout if args.output_file else sys.stderr
    print(f"Fetching Zoom recordings: {args.from_date} -> {args.to_date}", file=log)

    try:
        access_token = get_access_token(config)
        print("Access token obtained", file=log)

        export = export_recordings(
            lambda token: fetch_recordings_page(access_token, args.from_date, args.to_date, token),
            args.from_date,
            args.to_date,
            log=log,
        )
    except requests.RequestException as e:
        print_request_error(e)
        return 1

    json_output = dump_export(export, pretty=not args.compact)
    try:
        write_export(json_output, args.output_file)
    except OSError as e:
        print(f"Error writing {args.output_file}: {e}", file=sys.stderr)
        return 1

    if args.output_file:
        print(f"JSON saved to: {args.output_file}", file=log)
    return 0


if __name__ == "__main__":
    sys.exit(main())
