from sqlalchemy import Column, DateTime, Enum, Integer, String

from app.database import Base, utcnow
from app.models.enums import UserRole


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True)
    password_hash = Column(String, nullable=False)
    full_name = Column(String(100), nullable=True)
    role = Column(
        Enum(UserRole, native_enum=False, length=50, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.USER,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
