"""Public view of a registered user (never includes the password hash)."""

from typing import Optional

from pydantic import BaseModel


class UserInfo(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
