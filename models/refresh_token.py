"""
RefreshToken model: server-side record for an opaque refresh token.
Fields:
- token (unique, indexed) - the opaque value handed to the client
- user_id (String(36)) - FK to users.id
- expires_at
- revoked_at (null until revoked)
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from models.base_model import BaseModel, Base


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(64), nullable=False, unique=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<RefreshToken user={self.user_id} revoked={self.revoked_at is not None}>"
