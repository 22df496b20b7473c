"""
Student record schemas.

Records are persisted as plain JSON objects, so the store works with
dicts. The pydantic models here only describe the request bodies the
API accepts and the profile view it returns.
"""

from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class StudentPatch(BaseModel):
    """
    Partial student record used by create and update.

    Unknown keys are kept so clients can store extra attributes,
    and only keys the client actually sent are merged.
    """
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: Optional[int] = None
    login: Optional[str] = None
    password: Optional[str] = None
    fullName: Optional[str] = None
    phone: Optional[str] = None
    studentId: Optional[str] = None

    def fields_set(self) -> dict:
        return self.model_dump(exclude_unset=True)


class RegisterRequest(BaseModel):
    """Self-registration payload."""
    login: str = Field(..., description="Unique login")
    password: str = Field(..., description="Account password")
    fullName: Optional[str] = Field(None, description="Given name followed by surname")
    phone: Optional[str] = Field(None, description="Contact phone number")
    studentId: Optional[str] = Field(None, description="Student group / passport identifier")


class LoginRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    login: Optional[str] = None
    password: Optional[str] = None


class SendCodeRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    handle: Optional[str] = Field(None, validation_alias=AliasChoices("handle", "telegram"))


class VerifyCodeRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    handle: Optional[str] = Field(None, validation_alias=AliasChoices("handle", "telegram"))
    code: Optional[str] = None


class ProfileView(BaseModel):
    """Public profile returned after a successful login. Never holds the password."""
    id: int
    name: str
    surname: str
    group: Optional[str] = None
    passport: Optional[str] = None
    phone: Optional[str] = None
