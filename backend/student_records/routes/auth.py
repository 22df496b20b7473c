"""
Auth API routes - login, registration and Telegram code verification.

Login and the verification endpoints also accept a missing body, so a
request without one ends in the usual 401 / 400 domain error. The
verification endpoints accept the Telegram username as either
"handle" or "telegram" in the request body.
"""

from typing import Optional
from fastapi import APIRouter, Depends

from student_records.database import get_auth_service, get_store, get_verifier
from student_records.models.student import (
    LoginRequest, ProfileView, RegisterRequest, SendCodeRequest, VerifyCodeRequest
)
from student_records.services.auth import AuthService
from student_records.services.record_store import RecordStore
from student_records.services.verification import VerificationCoordinator

router = APIRouter()


@router.post("/auth", response_model=ProfileView)
async def login(request: Optional[LoginRequest] = None,
                auth: AuthService = Depends(get_auth_service)):
    request = request or LoginRequest()
    return await auth.authenticate(request.login, request.password)


@router.post("/register", status_code=201)
async def register(request: RegisterRequest, store: RecordStore = Depends(get_store)):
    return await store.register(
        login=request.login,
        password=request.password,
        fullName=request.fullName,
        phone=request.phone,
        studentId=request.studentId,
    )


@router.post("/auth/send-code")
async def send_code(request: Optional[SendCodeRequest] = None,
                    verifier: VerificationCoordinator = Depends(get_verifier)):
    """Ask the Telegram bot to deliver a one-time code to the handle."""
    request = request or SendCodeRequest()
    return await verifier.request_code(request.handle)


@router.post("/auth/verify-code")
async def verify_code(request: Optional[VerifyCodeRequest] = None,
                      verifier: VerificationCoordinator = Depends(get_verifier)):
    """Check a one-time code with the Telegram bot."""
    request = request or VerifyCodeRequest()
    return await verifier.verify_code(request.handle, request.code)
