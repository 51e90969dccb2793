"""
Pydantic models for user data.

Defines schemas for registering and authenticating users and for
reading a user's profile.  The password salt and hash are never part
of any response model.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class UserCredentials(BaseModel):
    """Payload of ``/register`` and ``/login``."""

    username: str = Field(..., min_length=1, max_length=254, examples=["hepburn@bymyself.life"])
    password: str = Field(..., min_length=1, examples=["strongpassword"])


class AuthResult(BaseModel):
    success: bool = True
    username: str


class GenderUpdate(BaseModel):
    username: str
    gender: str = Field(..., max_length=64, examples=["female"])


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    username: str
    gender: Optional[str] = None
    full_name: Optional[str] = None
    picture: Optional[str] = None
    items: List[int] = Field(default_factory=list)
    outfits: List[int] = Field(default_factory=list)

    model_config = {
        "from_attributes": True,
    }
