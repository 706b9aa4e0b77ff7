from pydantic import BaseModel, ConfigDict
from typing import Optional


class RoleInfo(BaseModel):
    id: int
    name: Optional[str] = None
    description: Optional[str] = None


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    username: Optional[str] = None
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[RoleInfo] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    @property
    def role_id(self):
        return self.role.id if self.role else None

    @property
    def display_name(self):
        if self.full_name:
            return self.full_name
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or self.username or self.email


class TokenPair(BaseModel):
    access: str
    refresh: Optional[str] = None
