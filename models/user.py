from datetime import datetime

from pydantic import BaseModel
from sqlalchemy import Column, Integer, DateTime, String, func

from enums.user_role import UserRole
from models.base import Base


# Accounts are owned by the authentication service; the core only needs
# identity, display name (denormalized into reviews) and role.
class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)
    role = Column(String(10), nullable=False, default=UserRole.USER.value)
    created_at = Column(DateTime, default=func.now())


class UserDTO(BaseModel):
    id: int | None = None
    name: str | None = None
    email: str | None = None
    role: UserRole = UserRole.USER
    created_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
