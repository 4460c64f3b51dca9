# Common functions
import argparse
import base64
import re
import sys
from dataclasses import dataclass
from datetime import datetime
from urllib.parse import quote

import pytz
import requests

from constants import (
    API_URL,
    CURRENT_USER_PATH,
    DATE_FORMAT,
    DEFAULT_TIMEZONE,
    DISPLAY_DATETIME_FORMAT,
    ENV_ACCOUNT_ID,
    ENV_CLIENT_ID,
    ENV_CLIENT_SECRET,
    ENV_TIMEZONE,
    PAGE_SIZE,
    RECORDINGS_PATH,
    REQUIRED_ENV_VARS,
    TOKEN_URL,
    VALID_RECORDING_TYPES,
)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ConfigError(Exception):
    """Raised when required configuration is missing or malformed."""

    def __init__(self, message, missing=None):
        super().__init__(message)
        self.missing = missing or []


@dataclass(frozen=True)
class ZoomConfig:
    account_id: str
    client_id: str
    client_secret: str
    timezone: str = DEFAULT_TIMEZONE


def load_config(environ):
    """
    Build the Zoom configuration from an environment mapping

    Args:
        environ (Mapping): usually os.environ, after load_dotenv()

    Returns:
        ZoomConfig

    Raises:
        ConfigError: if a required variable is missing or the timezone is unknown
    """
    missing = [name for name in REQUIRED_ENV_VARS if not environ.get(name)]
    if missing:
        raise ConfigError(
            "Missing environment variables: {}".format(", ".join(missing)),
            missing=missing,
        )

    timezone = environ.get(ENV_TIMEZONE) or DEFAULT_TIMEZONE
    try:
        pytz.timezone(timezone)
    except pytz.UnknownTimeZoneError:
        raise ConfigError(f"Unknown timezone in {ENV_TIMEZONE}: {timezone}")

    return ZoomConfig(
        account_id=environ[ENV_ACCOUNT_ID],
        client_id=environ[ENV_CLIENT_ID],
        client_secret=environ[ENV_CLIENT_SECRET],
        timezone=timezone,
    )


def print_config_error(error):
    print(f"Error: {error}", file=sys.stderr)
    for name in error.missing:
        print(f"   - {name}", file=sys.stderr)
    if error.missing:
        print("Make sure your .env file defines these variables.", file=sys.stderr)

#===============================================
# Command line helpers
#===============================================
class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_date(value):
    """
    argparse type for YYYY-MM-DD dates
    :return: datetime.date
    """
    if not DATE_PATTERN.match(value or ""):
        raise argparse.ArgumentTypeError(f"invalid date '{value}', use YYYY-MM-DD")
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', use YYYY-MM-DD")


def validate_date_range(from_date, to_date):
    if from_date > to_date:
        raise ValueError(
            f"start date {from_date.isoformat()} is after end date {to_date.isoformat()}"
        )


def add_date_range_arguments(parser):
    parser.add_argument("--from", "-f", dest="from_date", type=parse_date, required=True,
                        help="Start date (YYYY-MM-DD)")
    parser.add_argument("--to", "-t", dest="to_date", type=parse_date, required=True,
                        help="End date (YYYY-MM-DD)")


def parse_date_range_args(parser, argv=None):
    """Parse arguments and reject a range whose start is after its end."""
    args = parser.parse_args(argv)
    try:
        validate_date_range(args.from_date, args.to_date)
    except ValueError as e:
        parser.error(str(e))
    return args

#===============================================
# Zoom functions
#===============================================
# Generate an access token (Server-to-Server OAuth)
def get_access_token(config):
    """
    Retrieve the Zoom access token for the configured account
    :return: str
    """
    auth_header = base64.b64encode(f"{config.client_id}:{config.client_secret}".encode()).decode()
    headers = {
        "Authorization": f"Basic {auth_header}",
        "Content-Type": "application/x-www-form-urlencoded",
    }
    params = {"grant_type": "account_credentials", "account_id": config.account_id}
    response = requests.post(TOKEN_URL, headers=headers, params=params)
    response.raise_for_status()
    return response.json()["access_token"]


def api_get(path, access_token, params=None):
    url = f"{API_URL}{path}"
    headers = {"Authorization": f"Bearer {access_token}"}
    response = requests.get(url, headers=headers, params=params)
    response.raise_for_status()
    return response.json()


def get_current_user(access_token):
    return api_get(CURRENT_USER_PATH, access_token)


# Fetch one page of cloud recordings for the account
def fetch_recordings_page(access_token, from_date, to_date, next_page_token=""):
    params = {
        "from": from_date.strftime(DATE_FORMAT),
        "to": to_date.strftime(DATE_FORMAT),
        "page_size": PAGE_SIZE,
        "next_page_token": next_page_token,
    }
    return api_get(RECORDINGS_PATH, access_token, params=params)


def collect_meetings(fetch_page, on_page=None):
    """
    Follow next_page_token until the listing is exhausted

    Args:
        fetch_page (callable): fetch_page(next_page_token) -> page dict
        on_page (callable, optional): on_page(page_number, meetings, has_next)

    Returns:
        tuple: (meetings in page order, number of pages fetched)
    """
    meetings = []
    page_count = 0
    next_page_token = ""

    while True:
        page = fetch_page(next_page_token)
        page_count += 1

        page_meetings = page.get("meetings") or []
        meetings.extend(page_meetings)

        next_page_token = page.get("next_page_token") or ""
        if on_page:
            on_page(page_count, page_meetings, bool(next_page_token))
        if not next_page_token:
            break

    return meetings, page_count


def encode_meeting_identifier(identifier):
    """
    Encode a meeting id or UUID for use in a URL path

    Zoom requires UUIDs that start with '/' or contain '//' to be encoded twice.
    """
    identifier = str(identifier)
    encoded = quote(identifier, safe="")
    if identifier.startswith("/") or "//" in identifier:
        encoded = quote(encoded, safe="")
    return encoded


# Move a single recording file to the trash
def move_to_trash(access_token, meeting_identifier, recording_id):
    # No action=delete: without it Zoom only moves the file to the trash
    url = "{}/meetings/{}/recordings/{}".format(
        API_URL,
        encode_meeting_identifier(meeting_identifier),
        quote(str(recording_id), safe=""),
    )
    headers = {"Authorization": f"Bearer {access_token}"}
    response = requests.delete(url, headers=headers)
    response.raise_for_status()


def describe_error(error):
    """
    Pull the Zoom error code and message out of a failed request

    Args:
        error (requests.RequestException): the failure

    Returns:
        tuple: (code, message). code is the Zoom "code" field when the body
        carries one, else the HTTP status, else None.
    """
    response = getattr(error, "response", None)
    if response is None:
        return None, str(error)

    try:
        data = response.json()
    except ValueError:
        data = None

    if not isinstance(data, dict):
        return response.status_code, response.text or str(error)

    code = data.get("code") or response.status_code
    message = data.get("message") or data.get("error_description") or response.text
    return code, message


def print_request_error(error, title="Error"):
    print(f"\n{title}:", file=sys.stderr)
    response = getattr(error, "response", None)
    if response is not None:
        _, message = describe_error(error)
        print(f"   Status : {response.status_code}", file=sys.stderr)
        print(f"   Message : {message}", file=sys.stderr)
    else:
        print(f"   {error}", file=sys.stderr)

#===============================================
# Recording helpers
#===============================================
def is_recording_type(recording_file, recording_type):
    return recording_file.get("recording_type") == recording_type


def is_valid_recording_type(recording_file):
    return recording_file.get("recording_type") in VALID_RECORDING_TYPES


def select_recording_files(recording_files, predicate):
    """Keep the recording files accepted by predicate, in their original order."""
    return [recording for recording in recording_files or [] if predicate(recording)]


def format_recording_start(recording_start, timezone=DEFAULT_TIMEZONE):
    """
    Format an ISO-8601 recording start in the given timezone
    :return: str in dd/mm/yyyy hh:mm format, or 'N/A'
    """
    if not recording_start:
        return "N/A"
    try:
        utc_time = datetime.fromisoformat(recording_start.replace("Z", "+00:00"))
    except ValueError:
        return recording_start
    if utc_time.tzinfo is None:
        utc_time = pytz.utc.localize(utc_time)
    local_time = utc_time.astimezone(pytz.timezone(timezone))
    return local_time.strftime(DISPLAY_DATETIME_FORMAT)
