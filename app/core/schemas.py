import re
from datetime import datetime
from typing import Optional
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, EmailStr, field_validator

# Tag/markup characters are dropped from chat messages before classification
MARKUP_RE = re.compile(r"<[^>]*>|[<>]")


# =========================
# Enums
# =========================
class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


# =========================
# OPERATOR ACCOUNTS
# =========================
class UserBase(BaseModel):
    email: EmailStr


class CreateUser(UserBase):
    password: str = Field(min_length=8)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(UserBase):
    id: int
    role: UserRole
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =========================
# CHAT
# =========================
class ChatRequest(BaseModel):
    message: str

    @field_validator("message")
    @classmethod
    def clean_message(cls, value: str) -> str:
        cleaned = MARKUP_RE.sub("", value).strip()
        if not cleaned:
            raise ValueError('Missing "message"')
        return cleaned


class ChatResponse(BaseModel):
    response: str


# =========================
# FAQ
# =========================
class FaqCreate(BaseModel):
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)

    @field_validator("question", "answer")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Please fill in both fields")
        return value


class FaqResponse(BaseModel):
    id: int
    question: str
    answer: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
