from typing import Optional
from pydantic import BaseModel, EmailStr
from crimewatch.models.enums import UserRole


class UserOut(BaseModel):
    id: str
    email: EmailStr
    name: str
    is_active: bool
    role: UserRole


class UserEnvelope(BaseModel):
    user: Optional[UserOut] = None
