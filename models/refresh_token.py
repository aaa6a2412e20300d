"""
RefreshToken model: one row per live refresh token.
Fields:
- jti (primary key) - the token's own JWT ID
- user_id (Integer) - FK to users.id
- expires_at
- created_at, updated_at

A row exists only while the token is usable; rotation and revocation
delete it rather than flagging it.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from models.base_model import Base, TimestampMixin


class RefreshToken(TimestampMixin, Base):
    __tablename__ = "refresh_tokens"

    jti = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    user = relationship("User", back_populates="refresh_tokens")

    def __repr__(self):
        return f"<RefreshToken jti={self.jti} user_id={self.user_id}>"
