from sqlalchemy import Boolean, Column, Enum, Integer, String

from trafficdesk.core.constants import UserRole
from trafficdesk.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    # Fixed at creation; never taken from a request
    role = Column(Enum(UserRole), nullable=False, default=UserRole.DRIVER)

    profile_image = Column(String(255))
    two_factor_enabled = Column(Boolean, default=False, nullable=False)
    two_factor_secret = Column(String(100))

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"
