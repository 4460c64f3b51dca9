# Constant variables - Zoom endpoints and recording settings
TOKEN_URL = "https://zoom.us/oauth/token"
API_URL = "https://api.zoom.us/v2"
RECORDINGS_PATH = "/accounts/me/recordings"
CURRENT_USER_PATH = "/users/me"

# Zoom caps list recordings at 300 meetings per page
PAGE_SIZE = 300

# Credentials are read from the environment (or a .env file)
ENV_ACCOUNT_ID = "ACCOUNT_ID"
ENV_CLIENT_ID = "CLIENT_ID"
ENV_CLIENT_SECRET = "CLIENT_SECRET"
ENV_TIMEZONE = "ZOOM_TIMEZONE"
REQUIRED_ENV_VARS = [ENV_ACCOUNT_ID, ENV_CLIENT_ID, ENV_CLIENT_SECRET]
DEFAULT_TIMEZONE = "UTC"

DATE_FORMAT = "%Y-%m-%d"
DISPLAY_DATETIME_FORMAT = "%d/%m/%Y %H:%M"

# Recording types
AUDIO_ONLY = "audio_only"
VALID_RECORDING_TYPES = [
    "shared_screen_with_speaker_view",
    "audio_transcript",
    AUDIO_ONLY,
    "chat_file",
    "closed_caption",
]

# Zoom error code returned when a meeting UUID cannot be resolved
RECORDING_NOT_FOUND_CODE = 3301

# SQL generation
SQL_TABLE = "prefix_zoom_meeting_recordings"
SQL_OUTPUT_DIR = "outputfiles"
