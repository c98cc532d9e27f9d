"""Now API configuration constants."""

import os
from pathlib import Path

SDK_VERSION = "0.1.0"

DEFAULT_BASE_URL = os.environ.get("NOW_API_URL", "https://api.zeit.co/")
DEFAULT_TIMEOUT = 30.0  # seconds
DEFAULT_MAX_WORKERS = 5

# Sent as X-Requested-By on every request
CLIENT_IDENTIFIER = f"now-sdk-python/{SDK_VERSION}"
USER_AGENT = CLIENT_IDENTIFIER

NOW_TOKEN_ENV = "NOW_TOKEN"
NOW_TEAM_ENV = "NOW_TEAM"
NOW_CONFIG_FILE = Path.home() / ".now.json"
