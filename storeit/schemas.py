"""
Pydantic schemas for the StoreIt API.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class SignUpRequest(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr


class SignInRequest(BaseModel):
    email: EmailStr


class AccountIdResponse(BaseModel):
    account_id: str


class VerifyRequest(BaseModel):
    account_id: str
    password: str = Field(..., min_length=1, max_length=64)


class SessionResponse(BaseModel):
    session_id: str


class CurrentUserResponse(BaseModel):
    id: str
    account_id: str
    full_name: str
    email: str
    avatar: str

    @classmethod
    def from_record(cls, record: dict) -> "CurrentUserResponse":
        return cls(
            id=record["$id"],
            account_id=record["accountId"],
            full_name=record["fullName"],
            email=record["email"],
            avatar=record["avatar"],
        )


class FileListResponse(BaseModel):
    type: str
    types: list[str]
    total: int
    total_size: str
    documents: list[dict]
    user: CurrentUserResponse


class RenameFileRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    extension: str = Field(default="", max_length=32)


class ShareFileRequest(BaseModel):
    emails: list[str] = Field(default_factory=list)


class FileResponse(BaseModel):
    file: dict


class UsageBucket(BaseModel):
    size: int
    latestDate: str
    readable_size: Optional[str] = None


class UsageResponse(BaseModel):
    document: UsageBucket
    image: UsageBucket
    video: UsageBucket
    audio: UsageBucket
    other: UsageBucket
    used: int
    all: int
