"""Parker credentials, kept in a small JSON settings file.

Environment variables ``PARKER_EMAIL`` and ``PARKER_PASSWORD`` take precedence
over the file. The lookup/create core only reads from here; writes come from
the settings endpoints and the ``configure`` CLI command.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from .config import SETTINGS_FILE
from .models import Credentials

logger = logging.getLogger(__name__)

EMAIL_KEY = "parker_email"
PASSWORD_KEY = "parker_password"
_ENV_OVERRIDES = {EMAIL_KEY: "PARKER_EMAIL", PASSWORD_KEY: "PARKER_PASSWORD"}


class SettingsStore:
    def __init__(self, path: Path | None = None) -> None:
        self.path = Path(path) if path is not None else SETTINGS_FILE

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            parsed = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable settings file %s", self.path)
            return {}
        return parsed if isinstance(parsed, dict) else {}

    def get(self, key: str) -> str | None:
        env_name = _ENV_OVERRIDES.get(key)
        if env_name and os.getenv(env_name):
            return os.getenv(env_name)
        value = self._read().get(key)
        return value if isinstance(value, str) and value else None

    def update(self, values: dict[str, str]) -> None:
        data = self._read()
        data.update(values)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Owner-only from creation; the file holds the Parker password.
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2)
        try:
            self.path.chmod(0o600)
        except OSError:
            logger.debug("Could not restrict permissions on %s", self.path)

    def get_email(self) -> str | None:
        return self.get(EMAIL_KEY)

    def get_credentials(self) -> Credentials | None:
        email = self.get_email()
        password = self.get(PASSWORD_KEY)
        if not email or not password:
            return None
        return Credentials(email=email, password=password)

    def save_credentials(self, email: str, password: str) -> None:
        self.update({EMAIL_KEY: email.strip(), PASSWORD_KEY: password})

    def as_public_dict(self) -> dict:
        """Current settings with the password masked."""
        return {
            "email": self.get_email() or "",
            "password_set": bool(self.get(PASSWORD_KEY)),
        }
