"""
Auth Service - credential check and public profile view.

Passwords are stored and compared as plaintext, exactly as the
clients submit them (case-sensitive, no normalization).
"""

from student_records.errors import InvalidCredentials
from student_records.logging_config import get_logger, log_with_context
from student_records.models.student import ProfileView
from student_records.services.record_store import RecordStore

logger = get_logger("auth")


def build_profile(record: dict) -> ProfileView:
    """
    Derive the public profile from a stored record.

    fullName is split on whitespace: the first token is the given
    name, the rest (joined by single spaces) the surname. studentId
    is shown both as group and passport.
    """
    parts = (record.get("fullName") or "").split()
    return ProfileView(
        id=record["id"],
        name=parts[0] if parts else "",
        surname=" ".join(parts[1:]),
        group=record.get("studentId"),
        passport=record.get("studentId"),
        phone=record.get("phone"),
    )


class AuthService:

    def __init__(self, store: RecordStore):
        self.store = store

    async def authenticate(self, login, password) -> ProfileView:
        if login is None or password is None:
            raise InvalidCredentials()

        record = await self.store.find(
            lambda r: r.get("login") == login and r.get("password") == password
        )
        if record is None:
            log_with_context(logger, "WARNING", "Login failed", context={"login": login})
            raise InvalidCredentials()

        log_with_context(logger, "INFO", "Student {} logged in".format(record["id"]),
                         context={"student_id": record["id"]})
        return build_profile(record)
