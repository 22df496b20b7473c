"""
Process-wide store and service instances.

The JSON file is the one shared mutable resource, so exactly one
RecordStore (and therefore one lock) must exist per process. These
getters are FastAPI dependencies; tests replace them through
app.dependency_overrides.
"""

from typing import Optional

from fastapi import Depends

from student_records import config
from student_records.services.auth import AuthService
from student_records.services.record_store import RecordStore
from student_records.services.verification import VerificationCoordinator

_store: Optional[RecordStore] = None
_verifier: Optional[VerificationCoordinator] = None


def get_store() -> RecordStore:
    """Return the shared RecordStore, creating the data file on first use."""
    global _store
    if _store is None:
        _store = RecordStore(config.STUDENTS_FILE)
    return _store


def get_verifier() -> VerificationCoordinator:
    global _verifier
    if _verifier is None:
        _verifier = VerificationCoordinator(config.BOT_SERVICE_URL)
    return _verifier


def get_auth_service(store: RecordStore = Depends(get_store)) -> AuthService:
    return AuthService(store)
