"""
Generate SQL INSERT statements from a Zoom recordings JSON file.

The input is either a single meeting (with its recording_files) or a full
export written by GetZoomRecordings.py. Output goes to
outputfiles/output_<inputname>.sql next to this script.

Usage:
    python GenerateRecordingsSql.py input.json --zoomid=43
    python GenerateRecordingsSql.py input.json -z 43
"""
import json
import os
import sys

from commons import ArgumentParser, is_valid_recording_type, select_recording_files
from constants import SQL_OUTPUT_DIR, SQL_TABLE

OUTPUT_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), SQL_OUTPUT_DIR)


def escape_sql(value):
    """Quote-escape a value for a single-quoted SQL literal; None becomes ''."""
    if value is None:
        return ""
    return str(value).replace("'", "''")


def iso_to_unix_timestamp(iso_date):
    if not iso_date:
        return "UNIX_TIMESTAMP()"
    return f"UNIX_TIMESTAMP('{escape_sql(iso_date)}')"


def generate_insert_statement(recording_file, meeting, zoom_id):
    """
    Build the INSERT statement for one recording file

    Args:
        recording_file (dict): the recording file
        meeting (dict): the parent meeting (uuid, topic, recording_play_passcode, ...)
        zoom_id (int): zoom instance id stored with every row

    Returns:
        str
    """
    meeting_uuid = escape_sql(meeting.get("uuid"))
    recording_id = escape_sql(recording_file.get("id"))
    name = escape_sql(meeting.get("topic"))
    external_url = escape_sql(recording_file.get("play_url") or meeting.get("play_url"))
    passcode = escape_sql(
        meeting.get("recording_play_passcode") or recording_file.get("recording_play_passcode")
    )
    recording_type = escape_sql(recording_file.get("recording_type"))
    recording_start = iso_to_unix_timestamp(recording_file.get("recording_start"))

    return f"""INSERT INTO {SQL_TABLE} (
  zoomid,
  meetinguuid,
  zoomrecordingid,
  name,
  externalurl,
  passcode,
  recordingtype,
  recordingstart,
  showrecording,
  timecreated,
  timemodified
)
VALUES (
  {int(zoom_id)},
  '{meeting_uuid}', -- meetinguuid -> uuid
  '{recording_id}', -- zoomrecordingid -> id
  '{name}', -- zoom meeting name -> topic
  '{external_url}', -- externalurl -> play_url
  '{passcode}', -- passcode -> recording_play_passcode
  '{recording_type}', -- recording type -> recording_type
  {recording_start}, -- recordingstart -> recording_start
  1,
  UNIX_TIMESTAMP(), -- timecreated = now()
  UNIX_TIMESTAMP()  -- timemodified = now()
);"""


def comment_text(value):
    """Flatten a value onto one line for a -- comment."""
    return " ".join(escape_sql(value).split())


def meetings_from_document(document):
    """
    Return the meetings held by a JSON document

    Raises:
        ValueError: when the document is neither a meeting nor an export,
            or a meeting or recording file is not a JSON object
    """
    meetings = None
    if isinstance(document, dict):
        if isinstance(document.get("recording_files"), list):
            meetings = [document]
        elif isinstance(document.get("meetings"), list):
            meetings = document["meetings"]
    if meetings is None:
        raise ValueError('JSON file must contain a "recording_files" or "meetings" array')

    for index, meeting in enumerate(meetings):
        if not isinstance(meeting, dict):
            raise ValueError(f"meeting #{index + 1} is not a JSON object")
        recording_files = meeting.get("recording_files")
        if recording_files is None:
            continue
        if not isinstance(recording_files, list):
            raise ValueError(f'meeting #{index + 1}: "recording_files" must be an array')
        if not all(isinstance(recording_file, dict) for recording_file in recording_files):
            raise ValueError(f'meeting #{index + 1}: every "recording_files" entry must be a JSON object')
    return meetings


def generate_sql(document, zoom_id):
    """
    Build the SQL for every whitelisted recording file in the document

    Returns:
        tuple: (sql text, number of statements, number of recording files seen)
    """
    statements = []
    total = 0
    for meeting in meetings_from_document(document):
        recording_files = meeting.get("recording_files") or []
        total += len(recording_files)
        for recording_file in select_recording_files(recording_files, is_valid_recording_type):
            # Comment lines must stay on one line
            comment = "-- Recording: {} | Type: {}".format(
                comment_text(meeting.get("topic") or "Unknown Meeting"),
                comment_text(recording_file.get("recording_type")),
            )
            statements.append(comment + "\n" + generate_insert_statement(recording_file, meeting, zoom_id))

    return "\n\n".join(statements), len(statements), total


def output_path_for(input_path, output_dir=None):
    input_name = os.path.splitext(os.path.basename(input_path))[0]
    return os.path.join(output_dir or OUTPUT_DIR, f"output_{input_name}.sql")


def generate_sql_from_json(input_path, zoom_id, output_dir=None):
    """
    Read a recordings JSON file and write the matching SQL file

    Returns:
        str: path of the written SQL file

    Raises:
        OSError: the input cannot be read or the output cannot be written
        ValueError: the input is not valid JSON or has no recordings array
    """
    with open(input_path, "r", encoding="utf-8") as f:
        document = json.load(f)

    sql_content, generated, total = generate_sql(document, zoom_id)
    if generated == 0:
        print("Warning: No valid recording files found (filtered by recording_type)", file=sys.stderr)

    output_path = output_path_for(input_path, output_dir)
    os.makedirs(os.path.dirname(output_path), exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(sql_content)

    print(f"Successfully generated SQL file: {output_path}")
    print(f"  Processed {generated} recording(s) from {total} total")
    return output_path


def build_parser():
    parser = ArgumentParser(
        description="Generate SQL INSERT statements from a Zoom recordings JSON file",
        epilog=__doc__,
    )
    parser.add_argument("input_file", help="Path to the input JSON file")
    parser.add_argument("--zoomid", "-z", dest="zoom_id", type=int, required=True,
                        help="Zoom instance id written in every row")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    input_path = os.path.abspath(args.input_file)

    if not os.path.isfile(input_path):
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    try:
        generate_sql_from_json(input_path, args.zoom_id)
    except ValueError as e:
        print(f"Error reading/parsing JSON file: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
