from typing import Optional
from pydantic import AliasChoices, BaseModel, Field
from .base import BaseSchema

class UserResponse(BaseSchema):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None
    is_anonymous: bool = Field(
        False,
        validation_alias=AliasChoices("is_anonymous", "isAnonymous"),
        serialization_alias="isAnonymous",
    )

class MeResponse(BaseModel):
    user: Optional[UserResponse] = None

class AuthUrlResponse(BaseModel):
    url: str

class GoogleIdentity(BaseModel):
    """Claims returned by the Google userinfo endpoint."""
    sub: str = Field(..., min_length=1)
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None
