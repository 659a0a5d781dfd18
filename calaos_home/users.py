"""E-mail addresses of the users, and notifications sent to them."""

from __future__ import annotations

import logging
import subprocess
import tempfile
from typing import Iterator

log = logging.getLogger(__name__)

MAIL_COMMAND = "calaos_mail"
MAIL_FROM = "noreply@example.com"


class UserInfoModel:
    """A list of e-mail addresses kept in the ``user_emails`` option."""

    def __init__(self, config) -> None:
        self.config = config
        self._emails: list[str] = []

    @property
    def emails(self) -> list[str]:
        return list(self._emails)

    def __len__(self) -> int:
        return len(self._emails)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._emails))

    def is_empty(self) -> bool:
        return not self._emails

    def load(self) -> None:
        stored = self.config.get_option("user_emails")
        if not stored:
            return
        self._emails.extend(stored.split(","))

    def save(self) -> None:
        self.config.set_option("user_emails", ",".join(self._emails))

    def add_email(self, email) -> None:
        self._emails.append(email)
        self.save()

    def delete_email(self, idx) -> None:
        if not 0 <= idx < len(self._emails):
            return
        del self._emails[idx]
        self.save()

    def send_email(self, subject, body) -> None:
        """Send a message to every registered address."""
        for email in list(self._emails):
            self._send_to(email, subject, body)

    def _send_to(self, email: str, subject: str, body: str) -> None:
        with tempfile.NamedTemporaryFile("wb", delete=False) as mail_file:
            mail_file.write(body.encode("utf-8"))
        args = [
            MAIL_COMMAND,
            "--delete",
            "--from",
            MAIL_FROM,
            "--to",
            email,
            "--subject",
            subject,
            "--body",
            mail_file.name,
        ]
        log.debug("Starting %s with: %s", MAIL_COMMAND, args[1:])
        subprocess.Popen(args, start_new_session=True)