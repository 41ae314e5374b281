"""Paths and default settings."""

import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "parker-lookup"

DATA_DIR = Path(os.getenv("PARKER_DATA_DIR") or user_data_dir(APP_NAME))
SETTINGS_FILE = DATA_DIR / "settings.json"
LOG_DIR = DATA_DIR / "logs"
LOG_FILE = LOG_DIR / "server.log"
try:
    LOG_RETENTION_DAYS = max(1, int(os.getenv("PARKER_LOG_RETENTION_DAYS", "14")))
except ValueError:
    LOG_RETENTION_DAYS = 14

# Parker CRM
PARKER_BASE_URL = os.getenv("PARKER_BASE_URL", "https://parker.candidatelabs.com").rstrip("/")
try:
    HTTP_TIMEOUT = max(1.0, float(os.getenv("PARKER_HTTP_TIMEOUT", "30")))
except ValueError:
    HTTP_TIMEOUT = 30.0

ROOT_PATH = "/"
SIGN_IN_PATH = "/users/sign_in"
URL_CHECK_FORM_PATH = "/candidates/linkedin_url_check"
URL_CHECK_SUBMIT_PATH = "/candidates/check_linkedin_url"
CANDIDATES_PATH = "/candidates"
NEW_CANDIDATE_PATH = "/candidates/new"

# Server
HOST = "127.0.0.1"
PORT = 8000


def ensure_dirs() -> None:
    """Create required directories on first run."""
    for d in (DATA_DIR, LOG_DIR):
        d.mkdir(parents=True, exist_ok=True)
