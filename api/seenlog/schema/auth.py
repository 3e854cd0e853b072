"""Authentication-related response schemas."""

from pydantic import BaseModel

from seenlog.schema.user import UserRead


class AccessToken(BaseModel):
    """Access token returned after registration or login."""
    access_token: str
    token_type: str = "bearer"
    user: UserRead
