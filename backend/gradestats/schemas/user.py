"""
User request/response schemas. UserResponse never carries the password hash.
UserUpdateRequest is the allow-list for PUT /users/{id}; unknown keys (id, timestamps) are ignored.
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    department: str | None = None
    category: str | None = None
    role: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserUpdateRequest(BaseModel):
    username: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=1)  # re-hashed before storing
    department: str | None = None
    category: str | None = None
    role: str | None = Field(default=None, min_length=1)

    @field_validator("username", "email", "password", "role")
    @classmethod
    def not_null(cls, v):
        # may be omitted, but not sent as null: the columns are required
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    new_password: str = Field(alias="newPassword", min_length=1)
