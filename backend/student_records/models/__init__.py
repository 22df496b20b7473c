from student_records.models.student import (
    LoginRequest, ProfileView, RegisterRequest, SendCodeRequest, StudentPatch, VerifyCodeRequest
)

__all__ = [
    "LoginRequest", "ProfileView", "RegisterRequest",
    "SendCodeRequest", "StudentPatch", "VerifyCodeRequest",
]
