from sqlalchemy import Boolean, Column, Integer, String, false
from sqlalchemy.orm import relationship

from models.base_model import Base, TimestampMixin


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Stored as given; uniqueness is case-sensitive
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<User id={self.id} email={self.email!r} is_admin={self.is_admin}>"
