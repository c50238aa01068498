from typing import Optional

from pydantic import BaseModel


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: str
    profileImage: Optional[str] = None
    twoFactorEnabled: bool
