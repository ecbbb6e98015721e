"""
Pydantic models for request/response validation.

Defines the data contracts for the API: the member document in its
create, update and response shapes, plus the small upload, health
and error bodies.
"""

from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


REQUIRED_MEMBER_FIELDS = ("nome", "dataNascimento", "cargo")


class PingerState(str, Enum):
    """
    States of the keep-alive pinger.

    The pinger waits in idle, switches to firing while its request is
    in flight and always returns to idle afterwards.
    """
    IDLE = "idle"
    FIRING = "firing"


# ============================================================
# Request Models
# ============================================================

class MemberCreate(BaseModel):
    """
    Fields accepted when creating a member.

    nome, dataNascimento and cargo are required and must be non-empty.
    Numbers are accepted for string fields and stored as strings; any
    unknown field is dropped.
    """
    nome: str = Field(
        ...,
        min_length=1,
        description="Full name, also the listing sort key",
        examples=["Maria Silva"]
    )
    dataNascimento: str = Field(
        ...,
        min_length=1,
        description="Birth date, stored as given"
    )
    endereco: Optional[str] = Field(default=None, description="Postal address")
    telefone: Optional[str] = Field(default=None, description="Phone number")
    cargo: str = Field(
        ...,
        min_length=1,
        description="Role or title"
    )
    foto: Optional[str] = Field(
        default=None,
        description="Public photo URL, usually returned by POST /upload"
    )

    class Config:
        coerce_numbers_to_str = True
        json_schema_extra = {
            "example": {
                "nome": "Maria Silva",
                "dataNascimento": "1990-04-12",
                "endereco": "Rua das Flores, 10",
                "telefone": "(11) 99999-0000",
                "cargo": "Tesoureira",
                "foto": "https://res.cloudinary.com/demo/image/upload/v1/maria.jpg"
            }
        }


class MemberUpdate(BaseModel):
    """Partial update: only the fields present in the request are changed."""
    nome: Optional[str] = None
    dataNascimento: Optional[str] = None
    endereco: Optional[str] = None
    telefone: Optional[str] = None
    cargo: Optional[str] = None
    foto: Optional[str] = None

    class Config:
        coerce_numbers_to_str = True


# ============================================================
# Response Models
# ============================================================

class Member(BaseModel):
    """
    A stored member, as returned by every member route.

    Required fields are optional here: documents written by earlier
    versions of the service may hold null or missing values, and they
    must still be listed, updated and deleted.
    """
    id: str = Field(..., description="Identifier generated by the store")
    nome: Optional[str] = None
    dataNascimento: Optional[str] = None
    endereco: Optional[str] = None
    telefone: Optional[str] = None
    cargo: Optional[str] = None
    foto: Optional[str] = None

    class Config:
        coerce_numbers_to_str = True


class UploadResponse(BaseModel):
    """Response of a successful photo upload."""
    secure_url: str = Field(..., description="Public HTTPS URL of the uploaded asset")


class MessageResponse(BaseModel):
    """Plain confirmation message."""
    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""
    message: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    service: str = "members-api"
    version: str
    database_connected: bool
    timestamp: str
